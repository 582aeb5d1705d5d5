"""
Gravitationally interacting point bodies.
"""

from typing import List, Optional, Tuple
import logging
import numpy as np
from .errors import ValueOutOfRangeError
from .vector import Vector

logger = logging.getLogger(__name__)

MAX_TRAIL_LENGTH = 2000
MIN_MASS = 0.1
MAX_MASS = 1.0

# Half-weights the Newtonian term; each ordered pair is visited once per tick.
GRAVITY_FACTOR = 0.5

COLOR_OPTIONS = (
    "#f44336",  # Red
    "#E91E63",  # Pink
    "#9C27B0",  # Purple
    "#673AB7",  # Deep Purple
    "#3F51B5",  # Indigo
    "#2196F3",  # Blue
    "#00BCD4",  # Cyan
    "#009688",  # Teal
    "#4CAF50",  # Green
    "#CDDC39",  # Lime
    "#FFEB3B",  # Yellow
    "#FFC107",  # Amber
    "#FF9800",  # Orange
    "#FF5722",  # Deep Orange
)


class Body:
    """A point mass with position, velocity and display metadata."""

    MAX_TRAIL_LENGTH = MAX_TRAIL_LENGTH
    MIN_MASS = MIN_MASS
    MAX_MASS = MAX_MASS
    COLOR_OPTIONS = COLOR_OPTIONS

    def __init__(self, mass: float, position: Vector, velocity: Vector,
                 rng: Optional[np.random.Generator] = None):
        """
        Initialize a body.

        Bodies are normally created through BodyCollection.add_body_custom.

        Args:
            mass: Mass in [MIN_MASS, MAX_MASS]
            position: Initial position, owned by the body from now on
            velocity: Initial velocity, owned by the body from now on
            rng: Random source used for colour selection

        Raises:
            ValueOutOfRangeError: If mass is out of bounds
        """
        self._check_mass(mass)

        self.mass = float(mass)
        self.position = position
        self.velocity = velocity

        self.trail_length = 0
        self.trail: List[Tuple[float, float]] = []

        # Visual properties
        self.color_index = 0
        self.trail_thickness = 2.0
        self.highlight = False

        self._rng = rng if rng is not None else np.random.default_rng()
        self.set_random_color()

    @property
    def x(self) -> float:
        return self.position.x

    @property
    def y(self) -> float:
        return self.position.y

    def get_radius(self) -> float:
        """Drawn radius in pixels."""
        return self.mass * 10

    def get_color(self) -> str:
        return COLOR_OPTIONS[self.color_index]

    def get_weighted_position(self) -> Vector:
        """Position multiplied by mass, as a new vector."""
        p = self.position.copy()
        p.scale(self.mass)
        return p

    def get_momentum(self) -> Vector:
        """Momentum p = m * v, as a new vector."""
        v = self.velocity.copy()
        v.scale(self.mass)
        return v

    def get_kinetic_energy(self) -> float:
        """Calculate kinetic energy: 0.5 * m * v^2"""
        v = self.velocity.as_array()
        return 0.5 * self.mass * float(np.dot(v, v))

    # Physics

    def gravitational_coefficient(self, other: 'Body') -> float:
        """
        Strength of the attraction of this body to ``other``.

        Used as a coefficient on the position difference, so the direction
        and the 1/r^2 falloff distribute over the components. Returns inf
        when the squared separation is zero (coincident or underflowing).
        """
        radius = self.position.distance(other.position)
        radius_squared = radius * radius
        if radius_squared == 0.0:
            return float('inf')
        return GRAVITY_FACTOR * self.mass * other.mass / radius_squared

    def adjust_velocity_towards(self, other: 'Body') -> None:
        """Accelerate this body towards ``other`` for one tick."""
        # Force to velocity change
        c = self.gravitational_coefficient(other) / self.mass
        if not np.isfinite(c):
            logger.warning(f"Bodies at {self.position} and {other.position} "
                           f"too close, skipping interaction")
            return

        d = self.position.difference(other.position)

        self.velocity.add_coordinates(c * d.x, c * d.y)

    def advance_position(self) -> None:
        """Move by one step of velocity, recording the trail first."""
        if self.trail_length != 0 and self.trail_length >= len(self.trail):
            self.trail.append(self.position.export_coordinates())

        if len(self.trail) > self.trail_length:
            del self.trail[:len(self.trail) - self.trail_length]

        self.position.add(self.velocity)

    # Mutators

    @staticmethod
    def _check_mass(mass: float) -> None:
        if not MIN_MASS <= mass <= MAX_MASS:
            raise ValueOutOfRangeError(mass, MIN_MASS, MAX_MASS)

    @staticmethod
    def _check_index(n: int, minimum: int, maximum: int) -> None:
        """Whole numbers in [minimum, maximum] only; NaN and fractions fail."""
        if not minimum <= n <= maximum or n != int(n):
            raise ValueOutOfRangeError(n, minimum, maximum)

    def set_mass(self, mass: float) -> float:
        """Set the mass, leaving velocity (and so not momentum) untouched."""
        self._check_mass(mass)
        self.mass = float(mass)
        return self.mass

    def set_mass_safe(self, mass: float) -> float:
        """
        Set the mass while preserving momentum.

        The velocity is rescaled by old_mass / new_mass. If the new mass is
        rejected the rescale is a no-op and the error propagates.
        """
        old = self.mass
        try:
            self.set_mass(mass)
        finally:
            self.velocity.scale(old / self.mass)
        return self.mass

    def set_trail_length(self, n: int) -> int:
        self._check_index(n, 0, MAX_TRAIL_LENGTH)

        self.trail_length = int(n)
        return self.trail_length

    def set_trail_thickness(self, pixels: float) -> float:
        """Trail width in pixels, in (0, radius]."""
        if not 0 < pixels <= self.get_radius():
            raise ValueOutOfRangeError(pixels, 0, self.get_radius())

        self.trail_thickness = float(pixels)
        return self.trail_thickness

    def set_color(self, i: int) -> int:
        self._check_index(i, 0, len(COLOR_OPTIONS) - 1)
        self.color_index = int(i)
        return self.color_index

    def set_random_color(self) -> int:
        self.color_index = int(self._rng.integers(len(COLOR_OPTIONS)))
        return self.color_index

    # Logging

    def describe(self) -> str:
        """A short snapshot string for logging."""
        return (f"BODY SNAPSHOT\n"
                f"  Position: {self.position}\n"
                f"  Motion vector: {self.velocity}\n")

    def log_position(self) -> None:
        logger.info(f"Position snapshot: {self.position}")

    def log_velocity(self) -> None:
        logger.info(f"Velocity snapshot: {self.velocity}")

    def __repr__(self) -> str:
        return (f"Body(mass={self.mass!r}, position={self.position!r}, "
                f"velocity={self.velocity!r})")
