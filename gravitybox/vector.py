"""
Two-dimensional vector used for both positions and velocities.
"""

from typing import Tuple, Union
import numpy as np


class Vector:
    """A mutable 2D quantity backed by a float64 array."""

    __slots__ = ('_data',)

    def __init__(self, x: float = 0.0, y: float = 0.0):
        self._data = np.array([x, y], dtype=np.float64)

    @property
    def x(self) -> float:
        return float(self._data[0])

    @x.setter
    def x(self, value: float) -> None:
        self._data[0] = value

    @property
    def y(self) -> float:
        return float(self._data[1])

    @y.setter
    def y(self, value: float) -> None:
        self._data[1] = value

    def add(self, other: Union['Vector', np.ndarray]) -> None:
        """Add another vector to this one in place."""
        if isinstance(other, Vector):
            self._data += other._data
        else:
            self._data += np.asarray(other, dtype=np.float64)

    def add_coordinates(self, x: float, y: float) -> None:
        """Add raw (x, y) components in place."""
        self._data[0] += x
        self._data[1] += y

    def scale(self, c: float) -> None:
        """Multiply both components by ``c`` in place."""
        self._data *= c

    def reset(self) -> None:
        """Set both components to zero."""
        self._data.fill(0.0)

    def difference(self, other: 'Vector') -> 'Vector':
        """
        Vector pointing from this one to ``other``.

        Example:
            Vector(-5, 7).difference(Vector(2, 3)) == Vector(7, -4)
        """
        dx, dy = other._data - self._data
        return Vector(dx, dy)

    def distance(self, other: 'Vector') -> float:
        """Euclidean distance to ``other``; symmetric."""
        return float(np.linalg.norm(other._data - self._data))

    def export_coordinates(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def copy(self) -> 'Vector':
        return Vector(self.x, self.y)

    def as_array(self) -> np.ndarray:
        """Return a copy of the components as a numpy array."""
        return self._data.copy()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vector):
            return NotImplemented
        return bool(np.array_equal(self._data, other._data))

    __hash__ = None

    def __iter__(self):
        return iter(self.export_coordinates())

    def __repr__(self) -> str:
        return f"Vector({self.x!r}, {self.y!r})"

    def __str__(self) -> str:
        return f"[ {self.x}, {self.y} ]"
