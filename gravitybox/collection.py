"""
Bounded ensemble of bodies and the pairwise interaction step.
"""

from typing import Any, Dict, Iterator, List, Optional
import logging
import numpy as np
from .body import Body
from .errors import LimitReachedError
from .vector import Vector

logger = logging.getLogger(__name__)

MAX_BODIES = 10


class BodyCollection:
    """A collection of bodies that interact with one another."""

    MAX_BODIES = MAX_BODIES

    def __init__(self, bodies: Optional[List[Body]] = None,
                 rng: Optional[np.random.Generator] = None):
        """
        Initialize a collection.

        Args:
            bodies: Initial bodies, at most MAX_BODIES
            rng: Random source handed to every body created by this collection

        Raises:
            LimitReachedError: If more than MAX_BODIES bodies are given
        """
        bodies = list(bodies) if bodies is not None else []
        if len(bodies) > MAX_BODIES:
            raise LimitReachedError("body count", MAX_BODIES)

        self.bodies: List[Body] = bodies
        self.rng = rng if rng is not None else np.random.default_rng()

        self.center_of_mass = Vector()
        self.velocity = Vector()

        self.update_meta_info()

    @property
    def position(self) -> Vector:
        """Alias of the center of mass."""
        return self.center_of_mass

    def __len__(self) -> int:
        return len(self.bodies)

    def __iter__(self) -> Iterator[Body]:
        return iter(self.bodies)

    def body(self, index: int) -> Body:
        return self.bodies[index]

    def add_body(self, x: float = 0.0, y: float = 0.0) -> Body:
        """Add a body of mass 1 at rest at (x, y)."""
        return self.add_body_custom(1.0, x, y, 0.0, 0.0)

    def add_body_custom(self, mass: float, x: float, y: float,
                        vx: float, vy: float) -> Body:
        """
        Add a body with all properties given.

        Returns:
            The newly added body

        Raises:
            LimitReachedError: If the collection already holds MAX_BODIES
            ValueOutOfRangeError: If mass is out of bounds
        """
        if len(self.bodies) >= MAX_BODIES:
            raise LimitReachedError("body count", MAX_BODIES)

        body = Body(mass, Vector(x, y), Vector(vx, vy), rng=self.rng)
        self.bodies.append(body)
        self.update_meta_info()
        logger.debug(f"Added body {len(self.bodies) - 1} at ({x}, {y})")

        return body

    def remove_body(self, index: int) -> Body:
        """Remove and return the body at ``index``; IndexError if absent."""
        body = self.bodies.pop(index)
        self.update_meta_info()
        logger.debug(f"Removed body {index}")
        return body

    def update_vectors(self) -> None:
        """
        Update every body's velocity from the influence of all others.

        Only velocities change here, so every pair sees the positions as
        they stood at the start of the tick.
        """
        for i, body in enumerate(self.bodies):
            for j, other in enumerate(self.bodies):
                if i == j:
                    continue
                body.adjust_velocity_towards(other)

    def update_positions(self) -> None:
        """Advance every body by its velocity, then refresh the aggregates."""
        for body in self.bodies:
            body.advance_position()

        self.update_meta_info()

    def update_meta_info(self) -> None:
        """Recompute the center of mass and the mass-weighted velocity."""
        self.center_of_mass.reset()
        self.velocity.reset()

        if not self.bodies:
            return

        total = 0.0
        for body in self.bodies:
            self.velocity.add(body.get_momentum())
            self.center_of_mass.add(body.get_weighted_position())
            total += body.mass

        self.center_of_mass.scale(1 / total)
        self.velocity.scale(1 / total)

    def update_simulation(self) -> None:
        """One tick: all velocities first, then all positions. Never interleaved."""
        self.update_vectors()
        self.update_positions()

    def get_total_mass(self) -> float:
        return sum(body.mass for body in self.bodies)

    def get_kinetic_energy(self) -> float:
        return sum(body.get_kinetic_energy() for body in self.bodies)

    def get_state(self) -> Dict[str, Any]:
        """Get a plain snapshot of the collection."""
        return {
            'center_of_mass': list(self.center_of_mass.export_coordinates()),
            'velocity': list(self.velocity.export_coordinates()),
            'total_mass': self.get_total_mass(),
            'bodies': [self._serialize_body(body) for body in self.bodies]
        }

    @staticmethod
    def _serialize_body(body: Body) -> Dict[str, Any]:
        return {
            'mass': body.mass,
            'position': list(body.position.export_coordinates()),
            'velocity': list(body.velocity.export_coordinates()),
            'color': body.color_index,
            'trail_length': body.trail_length,
            'trail_thickness': body.trail_thickness,
            'highlight': body.highlight
        }

    def log_velocities(self) -> None:
        for body in self.bodies:
            body.log_velocity()

    def log_positions(self) -> None:
        for body in self.bodies:
            body.log_position()

    def log(self) -> None:
        """Log every body's snapshot plus the center of mass."""
        logger.info(f"CENTER OF MASS: {self.center_of_mass}")
        logger.info("BODIES:")
        for body in self.bodies:
            logger.info(body.describe())
