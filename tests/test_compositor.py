import numpy as np
import pytest

from zoomreel.background import canvas_size
from zoomreel.compositor import Compositor, apply_zoom_crop
from zoomreel.models import CursorConfig, EasingType, FrameStyle, RecordedEvents, ZoomConfig
from zoomreel.zoom import FrameViewport

from helpers import click

LINEAR = ZoomConfig(zoom_level=2.0, zoom_in_ms=300, hold_ms=500, zoom_out_ms=300,
                    easing=EasingType.LINEAR)


def full_view(w, h):
    return FrameViewport(0.0, 0.0, float(w), float(h), 1.0, w / 2.0, h / 2.0)


def test_unzoomed_same_size_passes_through(checker_frame):
    out = apply_zoom_crop(checker_frame, full_view(64, 48), 64, 48)
    assert out is not checker_frame
    assert (out == checker_frame).all()


def test_unzoomed_different_size_is_resized(checker_frame):
    out = apply_zoom_crop(checker_frame, full_view(64, 48), 32, 24)
    assert out.shape == (24, 32, 4)


def test_zoom_crop_scales_region_to_target(checker_frame):
    vp = FrameViewport(0.0, 0.0, 32.0, 24.0, 2.0, 16.0, 12.0)
    out = apply_zoom_crop(checker_frame, vp, 64, 48)
    assert out.shape == (48, 64, 4)
    assert out[..., 0].min() >= 250
    assert out[..., 2].max() <= 5


def test_zoom_crop_saturates_out_of_range_viewport(checker_frame):
    vp = FrameViewport(60.0, 40.0, 32.0, 24.0, 2.0, 76.0, 52.0)
    out = apply_zoom_crop(checker_frame, vp, 64, 48)
    assert out.shape == (48, 64, 4)
    assert out[..., 2].min() >= 250


def test_zero_sized_source_gives_blank_target():
    empty = np.zeros((0, 0, 4), dtype=np.uint8)
    out = apply_zoom_crop(empty, FrameViewport(0, 0, 0, 0, 2.0, 0, 0), 8, 4)
    assert out.shape == (4, 8, 4)
    assert (out == 0).all()


def test_compositor_output_size_matches_canvas():
    style = FrameStyle(padding=10)
    comp  = Compositor(style, ZoomConfig(), RecordedEvents(), 64, 48)
    assert comp.output_size == canvas_size(64, 48, style) == (84, 68)
    out = comp.compose_frame(np.zeros((48, 64, 4), dtype=np.uint8), 0)
    assert out.shape == (68, 84, 4)


def test_compositor_builds_keyframes_from_clicks_only(sample_events):
    comp = Compositor(FrameStyle(), ZoomConfig(), sample_events, 64, 48)
    assert [k.start_ms for k in comp.zoom_keyframes] == [100, 1500]


def test_compose_without_clicks_is_plain_frame(flat_style, checker_frame):
    comp = Compositor(flat_style, ZoomConfig(), RecordedEvents(), 64, 48)
    assert (comp.compose_frame(checker_frame, 750) == checker_frame).all()


def test_compose_zooms_towards_click(flat_style, checker_frame):
    events = RecordedEvents(mouse_events=(click(100, 20, 12),))
    comp = Compositor(flat_style, LINEAR, events, 64, 48)
    vp = comp.get_viewport(500)
    assert vp.zoom == pytest.approx(2.0)
    assert (vp.x, vp.y) == (4.0, 0.0)

    out = comp.compose_frame(checker_frame, 500)
    assert out[24, 5, 0] >= 250 and out[24, 5, 2] <= 5     # red side
    assert out[24, 62, 2] >= 250 and out[24, 62, 0] <= 5   # blue side
    assert (comp.compose_frame(checker_frame, 5000) == checker_frame).all()


def test_compose_is_deterministic_in_any_order(flat_style, checker_frame):
    events = RecordedEvents(mouse_events=(click(100, 40, 30),))
    comp = Compositor(flat_style, LINEAR, events, 64, 48)
    times = [900, 200, 450, 200, 0]
    first = [comp.compose_frame(checker_frame, t) for t in times]
    second = [comp.compose_frame(checker_frame, t) for t in reversed(times)]
    for a, b in zip(first, reversed(second)):
        assert (a == b).all()


def test_compose_does_not_mutate_source(flat_style, checker_frame):
    before = checker_frame.copy()
    comp = Compositor(FrameStyle(), LINEAR, RecordedEvents(mouse_events=(click(0, 5, 5),)), 64, 48)
    comp.compose_frame(checker_frame, 400)
    assert (checker_frame == before).all()


def test_cursor_state_uses_full_event_log(sample_events):
    comp = Compositor(FrameStyle(), ZoomConfig(), sample_events, 64, 48)
    state = comp.cursor_state(300, CursorConfig(smoothing=0.0))
    assert (state.x, state.y) == (30.0, 20.0)
    assert state.visible
    assert state.click_highlight.progress == pytest.approx(0.5)
