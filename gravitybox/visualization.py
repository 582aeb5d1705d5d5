"""
Matplotlib-based drawing surface for the animator.
"""

from typing import Any, Callable, Coroutine, List, Optional
import asyncio
import logging
import matplotlib.animation as animation
import matplotlib.pyplot as plt
from matplotlib.backend_bases import TimerBase
from matplotlib.patches import Circle as MPLCircle
from .animation import Animator, Surface, TickSource
from .body import Body
from .collection import BodyCollection
from .errors import ValueOutOfRangeError
from .vector import Vector

logger = logging.getLogger(__name__)

BACKGROUND_COLOR = "black"
HIGHLIGHT_COLOR = "white"
HIGHLIGHT_WIDTH = 3


class MatplotlibSurface(Surface):
    """
    Draws bodies into a matplotlib figure.

    Body space is mapped one unit to one pixel with the origin at the centre
    of a square viewport, y pointing up.
    """

    def __init__(self, surface_id: str, size: float = 6.0, dpi: int = 100):
        """
        Initialize surface.

        Args:
            surface_id: Figure label; reusing a label reuses the figure
            size: Figure size in inches (square)
            dpi: Figure resolution
        """
        self.surface_id = surface_id
        self.fig = plt.figure(num=surface_id, figsize=(size, size), dpi=dpi,
                              facecolor=BACKGROUND_COLOR)
        self.fig.clf()
        self.ax = self.fig.add_axes([0, 0, 1, 1])
        self.ax.set_facecolor(BACKGROUND_COLOR)
        self.ax.set_aspect('equal')
        self.ax.set_axis_off()

        self.width = 0.0
        self.height = 0.0
        self._artists: List[Any] = []

        self.update_dimensions()
        logger.info(f"Surface '{surface_id}' created")

    def update_dimensions(self) -> None:
        """Size the viewport to the smaller figure dimension, in pixels."""
        w, h = self.fig.get_size_inches() * self.fig.dpi
        d = min(w, h)
        self.width = d
        self.height = d

        half = d / 2
        self.ax.set_xlim(-half, half)
        self.ax.set_ylim(-half, half)

    def _points(self, pixels: float) -> float:
        return pixels * 72.0 / self.fig.dpi

    def clear(self) -> None:
        for artist in self._artists:
            artist.remove()
        self._artists.clear()

    def draw_coords(self, x: float, y: float, radius: float, color: str,
                    highlight: bool = False) -> None:
        """Fill a circle, outlined in white when highlighted."""
        patch = MPLCircle((x, y), radius, facecolor=color, edgecolor='none')
        self.ax.add_patch(patch)
        self._artists.append(patch)

        if highlight:
            outline = MPLCircle((x, y), radius, fill=False,
                                edgecolor=HIGHLIGHT_COLOR,
                                linewidth=self._points(HIGHLIGHT_WIDTH))
            self.ax.add_patch(outline)
            self._artists.append(outline)

    def draw_line(self, xs: List[float], ys: List[float], color: str,
                  width: float) -> None:
        line, = self.ax.plot(xs, ys, color=color,
                             linewidth=self._points(width),
                             solid_capstyle='round')
        self._artists.append(line)

    def draw_position(self, position: Vector, radius: float, color: str) -> None:
        self.draw_coords(position.x, position.y, radius, color)

    def draw_body_trail(self, body: Body) -> None:
        """Draw the trail from the current position back to the oldest point."""
        if not body.trail or not body.trail_length:
            return

        points = body.trail[-body.trail_length:]
        xs = [body.x] + [p[0] for p in reversed(points)]
        ys = [body.y] + [p[1] for p in reversed(points)]
        self.draw_line(xs, ys, body.get_color(), body.trail_thickness)

    def draw_body(self, body: Body, scale: float = 1) -> None:
        self.draw_coords(body.x, body.y, body.get_radius() * scale,
                         body.get_color(), body.highlight)
        self.draw_body_trail(body)

    @property
    def artists(self) -> List[Any]:
        """Artists of the current frame, in paint order."""
        return list(self._artists)

    def is_open(self) -> bool:
        return plt.fignum_exists(self.fig.number)

    def close(self) -> None:
        plt.close(self.fig)


class MatplotlibTickSource(TickSource):
    """
    Paces ticks with single-shot matplotlib canvas timers.

    Timers are created on the figure labelled ``surface_id``, so the source
    follows one surface; build a new source after change_surface_id().
    Draw passes run to completion on a private event loop, since the GUI
    main loop rather than asyncio owns the thread.
    """

    def __init__(self, surface_id: str, fps: float = 60.0):
        if not fps > 0:
            raise ValueOutOfRangeError(fps, 0)
        self.surface_id = surface_id
        self.interval = max(1, int(round(1000.0 / fps)))
        self._loop = asyncio.new_event_loop()

    def request_tick(self, callback: Callable[[], None]) -> Optional[TimerBase]:
        if not plt.fignum_exists(self.surface_id):
            logger.debug(f"Figure '{self.surface_id}' is closed, no tick scheduled")
            return None

        timer = plt.figure(num=self.surface_id).canvas.new_timer(interval=self.interval)
        timer.single_shot = True
        timer.add_callback(callback)
        timer.start()
        return timer

    def cancel(self, handle: Optional[TimerBase]) -> None:
        if handle is not None:
            handle.stop()

    def spawn(self, coro: Coroutine[Any, Any, None]) -> asyncio.Future:
        task = self._loop.create_task(coro)
        self._loop.run_until_complete(asyncio.wait({task}))
        return task

    def close(self) -> None:
        self._loop.close()


def create_animator(collection: BodyCollection, surface_id: str = "gravitybox",
                    fps: float = 60.0) -> Animator:
    """Build an animator drawing into a matplotlib figure, paced by its timers."""
    return Animator(collection, surface_id, MatplotlibSurface,
                    MatplotlibTickSource(surface_id, fps))


def _on_key(animator: Animator, key: Optional[str]) -> None:
    if key == ' ':
        animator.toggle_pause()
    elif key == 'q':
        animator.stop()


def run(animator: Animator, frame_rate: float = 60.0,
        duration: Optional[float] = None) -> None:
    """
    Show an animator's figure until it is closed or ``duration`` seconds pass.

    The animator is initialized, drawn once, then started. Ticks come from
    the animator's tick source while a FuncAnimation refreshes the figure.
    Clicking the figure or pressing space toggles the pause.
    """
    if not animator.is_initialized:
        animator.initialize()

    surface = animator.surface
    canvas = surface.fig.canvas
    canvas.mpl_connect('resize_event', lambda event: animator.dimension_update())
    canvas.mpl_connect('button_press_event', lambda event: animator.toggle_pause())
    canvas.mpl_connect('key_press_event', lambda event: _on_key(animator, event.key))

    refresher = animation.FuncAnimation(
        surface.fig, lambda frame: surface.artists,
        interval=1000.0 / frame_rate, blit=False, cache_frame_data=False
    )

    if duration is not None:
        closer = canvas.new_timer(interval=int(duration * 1000))
        closer.single_shot = True
        closer.add_callback(plt.close, surface.fig)
        closer.start()

    animator.tick_source.spawn(animator.draw())
    animator.toggle()
    try:
        plt.show()
    finally:
        refresher.event_source.stop()
        animator.standby()
