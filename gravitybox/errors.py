"""
Error taxonomy shared by bodies, collections and the animator.
"""

from enum import Enum
from typing import Any, Optional


class ErrorKind(Enum):
    """Discriminator for SimulationError."""
    VALUE_OUT_OF_RANGE = "value_out_of_range"
    LIMIT_REACHED = "limit_reached"
    NOT_READY = "not_ready"


class SimulationError(Exception):
    """
    Base error for all validation failures in the simulation.

    Every instance carries a ``kind`` and the structured payload that
    produced it, so callers can either catch the concrete subclass or
    branch on ``kind``.
    """

    kind: ErrorKind

    def __init__(self, message: str, **payload: Any):
        super().__init__(message)
        self.payload = payload

    def __getattr__(self, name: str) -> Any:
        payload = self.__dict__.get('payload', {})
        if name in payload:
            return payload[name]
        raise AttributeError(name)


class ValueOutOfRangeError(SimulationError, ValueError):
    """A numeric input fell outside its declared bounds."""

    kind = ErrorKind.VALUE_OUT_OF_RANGE

    def __init__(self, given: Any, minimum: Optional[float] = None,
                 maximum: Optional[float] = None):
        message = f"Given value '{given}' is invalid"

        if minimum == maximum:
            pass
        elif minimum is None:
            message += f", must be less than {maximum}"
        elif maximum is None:
            message += f", must be greater than {minimum}"
        else:
            message += f", must be between {minimum} and {maximum}"

        super().__init__(message, given=given, minimum=minimum, maximum=maximum)


class LimitReachedError(SimulationError):
    """An add operation would exceed an imposed limit."""

    kind = ErrorKind.LIMIT_REACHED

    def __init__(self, limit_name: str, limit: Any = None):
        extra = "" if limit is None else f" of {limit}"
        super().__init__(f"Limit{extra} for {limit_name} has been reached.",
                         limit_name=limit_name, limit=limit)


class NotReadyError(SimulationError, RuntimeError):
    """A lifecycle precondition was not met; ``task`` names the missing step."""

    kind = ErrorKind.NOT_READY

    def __init__(self, task: str):
        super().__init__(f"Cannot execute - you must {task} first.", task=task)
