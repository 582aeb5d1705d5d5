"""
Frame-paced scheduling of calculation and drawing for a BodyCollection.
"""

from typing import Any, Awaitable, Callable, Coroutine, Dict, Optional, Union
import asyncio
import inspect
import itertools
import logging
from .body import Body
from .collection import BodyCollection
from .errors import NotReadyError, ValueOutOfRangeError
from .vector import Vector

logger = logging.getLogger(__name__)

CENTER_OF_MASS_RADIUS = 2
CENTER_OF_MASS_COLOR = "white"


class Surface:
    """
    Base class for drawing collaborators.

    Any method may return an awaitable; the animator awaits it before
    moving on, which keeps the paint order deterministic.
    """

    def clear(self) -> Optional[Awaitable[None]]:
        """Clear the current frame."""
        raise NotImplementedError

    def draw_body(self, body: Body, scale: float = 1) -> Optional[Awaitable[None]]:
        """Draw a body (and its trail) with its radius enlarged by ``scale``."""
        raise NotImplementedError

    def draw_position(self, position: Vector, radius: float,
                      color: str) -> Optional[Awaitable[None]]:
        """Draw a filled circle at a body-space position."""
        raise NotImplementedError

    def update_dimensions(self) -> None:
        """Recompute the surface geometry after a resize."""
        raise NotImplementedError


class TickSource:
    """Base class for frame-pacing primitives."""

    def request_tick(self, callback: Callable[[], None]) -> Any:
        """Schedule ``callback`` for the next frame and return a handle."""
        raise NotImplementedError

    def cancel(self, handle: Any) -> None:
        """Cancel a pending request; unknown or spent handles are ignored."""
        raise NotImplementedError

    def spawn(self, coro: Coroutine[Any, Any, None]) -> asyncio.Future:
        """Start a draw pass without waiting for it, on the running event loop."""
        return asyncio.get_running_loop().create_task(coro)


class AsyncioTickSource(TickSource):
    """Paces ticks on the running asyncio event loop at a fixed frame rate."""

    def __init__(self, fps: float = 60.0,
                 loop: Optional[asyncio.AbstractEventLoop] = None):
        if not fps > 0:
            raise ValueOutOfRangeError(fps, 0)
        self.interval = 1.0 / fps
        self.loop = loop

    def request_tick(self, callback: Callable[[], None]) -> asyncio.TimerHandle:
        loop = self.loop or asyncio.get_running_loop()
        return loop.call_later(self.interval, callback)

    def cancel(self, handle: Optional[asyncio.TimerHandle]) -> None:
        if handle is not None:
            handle.cancel()


class ManualTickSource(TickSource):
    """Deterministic tick source; pending callbacks run only when fired."""

    def __init__(self):
        self._pending: Dict[int, Callable[[], None]] = {}
        self._ids = itertools.count(1)

    @property
    def pending(self) -> int:
        return len(self._pending)

    def request_tick(self, callback: Callable[[], None]) -> int:
        handle = next(self._ids)
        self._pending[handle] = callback
        return handle

    def cancel(self, handle: Optional[int]) -> None:
        self._pending.pop(handle, None)

    def fire(self) -> int:
        """Run every callback pending right now; returns how many ran."""
        callbacks = list(self._pending.values())
        self._pending.clear()
        for callback in callbacks:
            callback()
        return len(callbacks)


async def _resolve(result: Union[None, Awaitable[None]]) -> None:
    if inspect.isawaitable(result):
        await result


class Animator:
    """
    State machine pacing calculation ticks and draw passes.

    is_running, is_paused and is_drawing are independent: a running, paused
    animator keeps drawing without advancing the physics.
    """

    def __init__(self, collection: BodyCollection, surface_id: str,
                 surface_factory: Callable[[str], Surface],
                 tick_source: TickSource):
        """
        Initialize animator.

        The surface is bound separately by initialize(), so an animator can
        exist before anything can be drawn on.

        Args:
            collection: The collection to animate, owned by this animator
            surface_id: Identifier handed to ``surface_factory``
            surface_factory: Creates the drawing collaborator for an id
            tick_source: Frame-pacing primitive driving tick()
        """
        self.collection = collection
        self.surface_id = surface_id
        self.surface_factory = surface_factory
        self.tick_source = tick_source

        self.speed = 1
        self.scale = 1.0

        self.is_running = False
        self.is_paused = True
        self.is_drawing = False

        self.frame: Any = None
        self.surface: Optional[Surface] = None
        self._draw_task: Optional[asyncio.Future] = None

    @property
    def is_initialized(self) -> bool:
        return self.surface is not None

    def initialize(self) -> None:
        """Bind a drawing surface for the current surface id."""
        self.surface = self.surface_factory(self.surface_id)
        logger.info(f"Animator initialized on surface '{self.surface_id}'")

    def standby(self) -> None:
        """Stop the loop if it is running and discard the surface."""
        self.stop()
        self.surface = None
        logger.info(f"Animator on surface '{self.surface_id}' in standby")

    def dimension_update(self) -> None:
        """Forward a resize to the bound surface, if any."""
        if self.surface is not None:
            self.surface.update_dimensions()

    def change_surface_id(self, new_id: str) -> None:
        if self.surface is not None:
            raise NotReadyError("put animator in standby with the standby() method")
        self.surface_id = new_id

    def change_scale(self, new_scale: float) -> None:
        """Enlarge or shrink drawn bodies by ``new_scale`` (at least 1)."""
        if not new_scale >= 1:
            raise ValueOutOfRangeError(new_scale, 1)
        self.scale = float(new_scale)

    def change_speed(self, new_speed: int) -> None:
        """Number of simulation ticks computed per frame (at least 1)."""
        if not (new_speed >= 1 and float(new_speed).is_integer()):
            raise ValueOutOfRangeError(new_speed, 1)
        self.speed = int(new_speed)

    def body(self, i: int) -> Body:
        return self.collection.body(i)

    def calculate(self) -> None:
        """Advance the simulation ``speed`` ticks."""
        for _ in range(self.speed):
            self.collection.update_simulation()

    async def draw(self) -> None:
        """
        Draw the current state of the collection, as is.

        Bodies are painted in collection order and the center of mass last.
        """
        surface = self.surface
        if surface is None:
            raise NotReadyError("initialize the animator")

        self.is_drawing = True
        try:
            await _resolve(surface.clear())

            for body in list(self.collection.bodies):
                await _resolve(surface.draw_body(body, self.scale))

            await _resolve(surface.draw_position(
                self.collection.center_of_mass,
                CENTER_OF_MASS_RADIUS, CENTER_OF_MASS_COLOR
            ))
        finally:
            self.is_drawing = False

    def tick(self) -> None:
        """
        One frame: calculate unless paused, start a draw pass unless one is
        still in flight, then reschedule while running.

        Draw passes are started through the tick source, which for the
        asyncio-based sources needs a running event loop.
        """
        self.frame = None

        if not self.is_paused:
            self.calculate()

        if not self.is_drawing and self.surface is not None:
            self.is_drawing = True
            self._draw_task = self.tick_source.spawn(self.draw())
            self._draw_task.add_done_callback(self._draw_finished)

        if self.is_running:
            self.frame = self.tick_source.request_tick(self.tick)

    def _draw_finished(self, task: asyncio.Future) -> None:
        if task.cancelled():
            self.is_drawing = False
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Draw pass failed", exc_info=exc)

    def pause(self) -> None:
        """Stop calculating; drawing continues while running."""
        self.is_paused = True
        logger.debug("Animator paused")

    def unpause(self) -> None:
        self.is_paused = False
        logger.debug("Animator unpaused")

    def toggle_pause(self) -> None:
        if self.is_paused:
            self.unpause()
        else:
            self.pause()

    def start(self) -> None:
        """Start the frame loop; no-op if it is already running."""
        if self.is_running:
            return
        self.is_running = True
        self.frame = self.tick_source.request_tick(self.tick)
        logger.debug("Animator started")

    def stop(self) -> None:
        """Stop the frame loop and cancel the pending tick. Safe to repeat."""
        self.is_running = False
        if self.frame is not None:
            self.tick_source.cancel(self.frame)
            self.frame = None

    def toggle(self) -> None:
        if self.surface is None:
            raise NotReadyError("initialize the animator")
        if self.is_running:
            self.stop()
        else:
            self.start()
