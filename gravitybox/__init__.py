"""
gravitybox

A small 2D n-body gravity simulator with a frame-paced animator.
"""

__version__ = "1.0.0"

from .errors import (ErrorKind, SimulationError, ValueOutOfRangeError,
                     LimitReachedError, NotReadyError)
from .vector import Vector
from .body import Body, COLOR_OPTIONS, MAX_MASS, MAX_TRAIL_LENGTH, MIN_MASS
from .collection import BodyCollection, MAX_BODIES
from .animation import (Animator, Surface, TickSource, AsyncioTickSource,
                        ManualTickSource)
from .io import SceneLoader, default_scene

__all__ = [
    'ErrorKind',
    'SimulationError',
    'ValueOutOfRangeError',
    'LimitReachedError',
    'NotReadyError',
    'Vector',
    'Body',
    'COLOR_OPTIONS',
    'MAX_MASS',
    'MAX_TRAIL_LENGTH',
    'MIN_MASS',
    'BodyCollection',
    'MAX_BODIES',
    'Animator',
    'Surface',
    'TickSource',
    'AsyncioTickSource',
    'ManualTickSource',
    'SceneLoader',
    'default_scene'
]
