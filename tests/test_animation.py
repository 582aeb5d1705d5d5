import asyncio

import pytest

from gravitybox import (Animator, AsyncioTickSource, ManualTickSource,
                        NotReadyError, ValueOutOfRangeError)

from conftest import RecordingSurface


class GatedSurface(RecordingSurface):
    """Surface whose body draws block until the gate opens."""

    def __init__(self, surface_id):
        super().__init__(surface_id)
        self.gate = asyncio.Event()

    async def draw_body(self, body, scale=1):
        await self.gate.wait()
        super().draw_body(body, scale)


@pytest.fixture
def source():
    return ManualTickSource()


@pytest.fixture
def animator(two_bodies, source):
    return Animator(two_bodies, "canvas0", RecordingSurface, source)


def test_initial_state(animator):
    assert not animator.is_running
    assert animator.is_paused
    assert not animator.is_drawing
    assert animator.speed == 1
    assert animator.scale == 1
    assert animator.surface is None


def test_toggle_requires_initialize(animator, source):
    with pytest.raises(NotReadyError):
        animator.toggle()
    assert not animator.is_running
    assert source.pending == 0


def test_toggle_starts_and_stops(animator, source):
    animator.initialize()
    animator.toggle()
    assert animator.is_running
    assert source.pending == 1

    animator.toggle()
    assert not animator.is_running
    assert source.pending == 0
    assert source.fire() == 0


def test_stop_is_idempotent(animator, source):
    animator.initialize()
    animator.start()
    animator.stop()
    animator.stop()
    assert not animator.is_running
    assert source.pending == 0


def test_start_twice_schedules_once(animator, source):
    animator.start()
    animator.start()
    assert source.pending == 1


def test_change_surface_id_requires_standby(animator, source):
    animator.initialize()
    animator.start()
    with pytest.raises(NotReadyError):
        animator.change_surface_id("canvas1")
    assert animator.surface_id == "canvas0"

    animator.standby()
    assert not animator.is_running
    assert animator.surface is None
    assert source.pending == 0

    animator.change_surface_id("canvas1")
    animator.initialize()
    assert animator.surface.surface_id == "canvas1"


def test_change_scale_and_speed(animator):
    animator.change_scale(1.5)
    assert animator.scale == 1.5
    with pytest.raises(ValueOutOfRangeError):
        animator.change_scale(0.5)
    assert animator.scale == 1.5

    animator.change_speed(4)
    assert animator.speed == 4
    with pytest.raises(ValueOutOfRangeError):
        animator.change_speed(0)


@pytest.mark.parametrize("value", [float("nan"), 0.5])
def test_change_scale_rejects_nan(animator, value):
    with pytest.raises(ValueOutOfRangeError):
        animator.change_scale(value)
    assert animator.scale == 1.0


@pytest.mark.parametrize("value", [float("nan"), 1.5, float("inf")])
def test_change_speed_rejects_nan_and_fractions(animator, value):
    with pytest.raises(ValueOutOfRangeError):
        animator.change_speed(value)
    assert animator.speed == 1


def test_pause_flags(animator):
    animator.unpause()
    assert not animator.is_paused
    animator.toggle_pause()
    assert animator.is_paused
    animator.toggle_pause()
    assert not animator.is_paused
    assert not animator.is_running


def test_dimension_update(animator):
    animator.dimension_update()
    animator.initialize()
    animator.dimension_update()
    assert animator.surface.calls == [('dimensions',)]


def test_calculate_runs_speed_ticks(animator, two_bodies):
    animator.change_speed(3)
    animator.calculate()
    # a first tick moves body 0 by 0.05, later ticks add a bit more each
    assert two_bodies.body(0).x > 0.15


def test_draw_order(animator, two_bodies):
    animator.initialize()
    animator.change_scale(2)
    asyncio.run(animator.draw())

    calls = animator.surface.calls
    assert calls[0] == ('clear',)
    assert calls[1] == ('body', two_bodies.body(0), 2.0)
    assert calls[2] == ('body', two_bodies.body(1), 2.0)
    assert calls[3] == ('position', (5.0, 0.0), 2, "white")
    assert not animator.is_drawing


def test_draw_requires_surface(animator):
    with pytest.raises(NotReadyError):
        asyncio.run(animator.draw())


def test_paused_tick_draws_without_calculating(animator, source, two_bodies):
    async def scenario():
        animator.initialize()
        animator.toggle()
        source.fire()
        await asyncio.sleep(0)

    asyncio.run(scenario())
    assert two_bodies.body(0).position.export_coordinates() == (0.0, 0.0)
    assert animator.surface.count('clear') == 1
    assert source.pending == 1


def test_running_tick_calculates_and_reschedules(animator, source, two_bodies):
    async def scenario():
        animator.initialize()
        animator.unpause()
        animator.toggle()
        source.fire()
        await asyncio.sleep(0)
        source.fire()
        await asyncio.sleep(0)

    asyncio.run(scenario())
    assert two_bodies.body(0).x > 0.05
    assert animator.surface.count('clear') == 2
    assert source.pending == 1


def test_stopped_tick_does_not_reschedule(animator, source, two_bodies):
    async def scenario():
        animator.initialize()
        animator.unpause()
        animator.tick()
        await asyncio.sleep(0)

    asyncio.run(scenario())
    assert two_bodies.body(0).position.export_coordinates() == pytest.approx((0.05, 0.0))
    assert source.pending == 0


def test_slow_draw_does_not_block_calculation(two_bodies, source):
    animator = Animator(two_bodies, "slow", GatedSurface, source)

    async def scenario():
        animator.initialize()
        animator.unpause()
        animator.toggle()

        source.fire()
        await asyncio.sleep(0)
        assert animator.is_drawing

        # the draw pass is stuck, calculation continues and no pass overlaps
        source.fire()
        await asyncio.sleep(0)
        assert animator.surface.count('clear') == 1
        assert two_bodies.body(0).x > 0.05

        animator.surface.gate.set()
        for _ in range(5):
            await asyncio.sleep(0)
        assert not animator.is_drawing
        assert animator.surface.count('body') == 2
        assert animator.surface.count('position') == 1

        source.fire()
        await asyncio.sleep(0)
        assert animator.surface.count('clear') == 2
        animator.stop()

    asyncio.run(scenario())


def test_asyncio_tick_source_drives_animator(animator, two_bodies):
    animator.tick_source = AsyncioTickSource(fps=200)

    async def scenario():
        animator.initialize()
        animator.unpause()
        animator.start()
        await asyncio.sleep(0.1)
        animator.stop()
        await asyncio.sleep(0.02)

    asyncio.run(scenario())
    assert not animator.is_running
    assert animator.frame is None
    assert two_bodies.body(0).x > 0
    assert animator.surface.count('clear') >= 2


@pytest.mark.parametrize("fps", [0, float("nan")])
def test_asyncio_tick_source_rejects_bad_fps(fps):
    with pytest.raises(ValueOutOfRangeError):
        AsyncioTickSource(fps=fps)


def test_manual_tick_source_cancel_unknown_handle(source):
    source.cancel(None)
    source.cancel(99)
    assert source.pending == 0
