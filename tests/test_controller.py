"""Unit tests for the render controller state machine and paint policy."""

import pytest

from fernplot.controller import POINT_SIZE, ControllerState, RenderController
from fernplot.ifs import Point, PointGenerator
from fernplot.themes import rainbow_color
from fernplot.viewport import Viewport


@pytest.fixture
def unit_viewport() -> Viewport:
    # pixel = (x, -y): lets tests aim at exact pixels
    return Viewport(width=10, height=10, scale=1.0, center_x=0.0, center_y=0.0)


class TestConstruction:
    """Initial state."""

    def test_starts_idle_and_cleared(self, controller, surface):
        assert controller.state is ControllerState.IDLE
        assert not controller.running
        assert controller.point_count == 0
        assert controller.throughput == 100
        assert controller.theme.name == "classic"
        assert surface.clears == [(0, 0, 0)]

    def test_resizes_surface_to_viewport(self, make_surface, scheduler, desktop_viewport):
        surface = make_surface(10, 10)
        RenderController(surface, scheduler, viewport=desktop_viewport)
        assert (surface.width, surface.height) == (900, 600)

    @pytest.mark.parametrize("bad", [0, -5, 2.5, "100", True])
    def test_rejects_bad_throughput(self, surface, scheduler, desktop_viewport, bad):
        with pytest.raises(ValueError):
            RenderController(surface, scheduler, viewport=desktop_viewport, throughput=bad)

    def test_rejects_bad_theme(self, surface, scheduler, desktop_viewport):
        with pytest.raises(ValueError):
            RenderController(surface, scheduler, viewport=desktop_viewport, theme="neon")


class TestStateMachine:
    """start / stop / reset transitions."""

    def test_start_schedules_one_tick(self, controller, scheduler):
        controller.start()
        assert controller.state is ControllerState.RUNNING
        assert scheduler.pending == 1

    def test_start_is_noop_when_running(self, controller, scheduler):
        controller.start()
        controller.start()
        assert scheduler.pending == 1

    def test_tick_reschedules_while_running(self, controller, scheduler):
        controller.start()
        scheduler.run_frame()
        assert scheduler.pending == 1
        assert controller.point_count > 0

    def test_stop_cancels_pending_tick(self, controller, scheduler):
        controller.start()
        controller.stop()
        assert controller.state is ControllerState.IDLE
        assert scheduler.pending == 0
        assert scheduler.run_frame() == 0
        assert controller.point_count == 0

    def test_stop_is_noop_when_idle(self, controller, scheduler):
        controller.stop()
        assert controller.state is ControllerState.IDLE

    def test_toggle(self, controller):
        controller.toggle()
        assert controller.running
        controller.toggle()
        assert not controller.running

    def test_no_paint_after_stop(self, controller, scheduler, surface):
        controller.start()
        scheduler.run_frame()
        painted = len(surface.paints)
        controller.stop()
        for _ in range(3):
            scheduler.run_frame()
        assert len(surface.paints) == painted

    def test_reset_clears_everything(self, controller, scheduler, surface):
        controller.start()
        for _ in range(5):
            scheduler.run_frame()
        controller.reset()
        assert controller.state is ControllerState.IDLE
        assert controller.point_count == 0
        assert controller.generator.current == Point(0.0, 0.0)
        assert surface.paints == []
        assert surface.clears[-1] == (0, 0, 0)
        assert scheduler.pending == 0

    def test_reset_is_idempotent(self, controller, scheduler, surface):
        controller.start()
        scheduler.run_frame()
        controller.reset()
        once = (controller.state, controller.point_count, controller.generator.current, list(surface.paints))
        controller.reset()
        twice = (controller.state, controller.point_count, controller.generator.current, list(surface.paints))
        assert once == twice

    def test_pause_resume_continues_from_stop(self, make_random, make_surface, scheduler, desktop_viewport):
        draws = [0.3, 0.9, 0.95, 0.5, 0.005, 0.77, 0.88, 0.1]
        c = RenderController(
            make_surface(900, 600), scheduler,
            generator=PointGenerator(random_source=make_random(draws)),
            viewport=desktop_viewport, throughput=50,
        )
        c.start()
        for _ in range(3):
            scheduler.run_frame()
        c.stop()
        count = c.point_count
        where = c.generator.current
        assert where != Point(0.0, 0.0)

        scheduler.run_frame()
        assert c.point_count == count
        assert c.generator.current == where

        twin = PointGenerator(random_source=make_random(draws))
        twin.take(150)
        assert twin.current == where
        expected = twin.take(50)

        c.start()
        scheduler.run_frame()
        assert c.generator.current == Point(*expected[-1])
        vp = c.viewport
        in_view = sum(vp.contains(*vp.to_screen(x, y)) for x, y in expected)
        assert c.point_count == count + in_view


class TestTick:
    """Per-tick generation and painting."""

    def test_one_draw_per_point(self, make_random, make_surface, scheduler, desktop_viewport):
        source = make_random([0.3, 0.9, 0.95, 0.5])
        c = RenderController(
            make_surface(900, 600), scheduler,
            generator=PointGenerator(random_source=source),
            viewport=desktop_viewport, throughput=37,
        )
        c.start()
        scheduler.run_frame()
        assert source.calls == 37

    def test_throughput_change_applies_on_next_tick(self, make_random, make_surface, scheduler, desktop_viewport):
        source = make_random([0.3, 0.9, 0.95, 0.5])
        c = RenderController(
            make_surface(900, 600), scheduler,
            generator=PointGenerator(random_source=source),
            viewport=desktop_viewport, throughput=100,
        )
        c.subscribe(lambda count: c.set_throughput(500))
        c.start()
        scheduler.run_frame()
        assert source.calls == 100
        scheduler.run_frame()
        assert source.calls == 600

    def test_restart_from_observer_keeps_single_tick(self, make_random, make_surface, scheduler, desktop_viewport):
        source = make_random([0.3, 0.9, 0.95, 0.5])
        c = RenderController(
            make_surface(900, 600), scheduler,
            generator=PointGenerator(random_source=source),
            viewport=desktop_viewport, throughput=10,
        )
        restarted = []

        def restart_once(count):
            if not restarted:
                restarted.append(count)
                c.reset()
                c.start()

        c.subscribe(restart_once)
        c.start()
        scheduler.run_frame()
        assert scheduler.pending == 1
        scheduler.run_frame()
        assert scheduler.pending == 1
        assert source.calls == 20
        c.stop()
        assert scheduler.pending == 0
        assert scheduler.run_frame() == 0

    def test_paints_two_pixel_squares_at_floored_coords(self, make_random, make_surface, scheduler, desktop_viewport):
        surface = make_surface(900, 600)
        c = RenderController(
            surface, scheduler,
            generator=PointGenerator(random_source=make_random([0.5])),
            viewport=desktop_viewport, throughput=1,
        )
        c.start()
        scheduler.run_frame()
        # (0, 1.6) -> (450, 540 - 80)
        x, y, color, alpha, size = surface.paints[0]
        assert (x, y) == (450, 460)
        assert isinstance(x, int) and isinstance(y, int)
        assert color == (144, 238, 144)
        assert alpha == 0.8
        assert size == POINT_SIZE == 2

    def test_observer_gets_count_each_tick(self, controller, scheduler):
        seen = []
        controller.subscribe(seen.append)
        controller.start()
        scheduler.run_frame()
        scheduler.run_frame()
        controller.reset()
        assert len(seen) == 3
        assert seen[0] <= seen[1]
        assert seen[-1] == 0

    def test_theme_switch_mid_run(self, controller, scheduler, surface):
        controller.start()
        scheduler.run_frame()
        controller.set_theme("ocean")
        start = len(surface.paints)
        scheduler.run_frame()
        assert {p[2] for p in surface.paints[start:]} == {(74, 144, 226)}

    def test_rainbow_uses_count_before_increment(self, make_random, make_surface, scheduler, desktop_viewport):
        surface = make_surface(900, 600)
        c = RenderController(
            surface, scheduler,
            generator=PointGenerator(random_source=make_random([0.5])),
            viewport=desktop_viewport, throughput=3, theme="rainbow",
        )
        c.start()
        scheduler.run_frame()
        assert [p[2] for p in surface.paints] == [rainbow_color(0), rainbow_color(1), rainbow_color(2)]


class TestBoundsFiltering:
    """Out-of-view points are dropped and not counted."""

    @pytest.mark.parametrize("x, y", [(-1.0, -5.0), (10.0, -5.0), (5.0, -10.0), (5.0, 0.5)])
    def test_outside_not_painted(self, make_surface, scheduler, unit_viewport, x, y):
        surface = make_surface(10, 10)
        c = RenderController(surface, scheduler, viewport=unit_viewport)
        assert c.plot(x, y) is False
        assert c.point_count == 0
        assert surface.paints == []

    def test_origin_pixel_painted(self, make_surface, scheduler, unit_viewport):
        surface = make_surface(10, 10)
        c = RenderController(surface, scheduler, viewport=unit_viewport)
        assert c.plot(0.0, 0.0) is True
        assert c.point_count == 1
        assert surface.paints[0][:2] == (0, 0)

    def test_fractional_pixel_floored(self, make_surface, scheduler, unit_viewport):
        surface = make_surface(10, 10)
        c = RenderController(surface, scheduler, viewport=unit_viewport)
        c.plot(9.99, -9.5)
        assert surface.paints[0][:2] == (9, 9)


class TestViewportChange:
    """Resize keeps the fern's progress but clears pixels."""

    def test_preserves_generator_and_count(self, controller, scheduler, surface):
        controller.start()
        scheduler.run_frame()
        count = controller.point_count
        where = controller.generator.current
        controller.stop()

        vp = controller.on_viewport_change(400, 800)
        assert controller.viewport == vp
        assert (surface.width, surface.height) == (380, 480)
        assert surface.paints == []
        assert surface.clears[-1] == (0, 0, 0)
        assert controller.point_count == count
        assert controller.generator.current == where

    def test_does_not_change_running_flag(self, controller):
        controller.start()
        controller.on_viewport_change(400, 800)
        assert controller.running
