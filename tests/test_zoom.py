import pytest

from zoomreel.models import EasingType, ZoomConfig
from zoomreel.zoom import ZoomKeyframe, compute_viewport, ease, generate_keyframes

from helpers import click, make_event

ALL_EASINGS = list(EasingType)


@pytest.mark.parametrize("easing", ALL_EASINGS)
def test_easing_boundaries(easing):
    assert ease(0.0, easing) == pytest.approx(0.0, abs=1e-12)
    assert ease(1.0, easing) == pytest.approx(1.0, abs=1e-12)


@pytest.mark.parametrize("easing", ALL_EASINGS)
def test_easing_monotonic(easing):
    prev = 0.0
    for i in range(1, 101):
        val = ease(i / 100.0, easing)
        assert val >= prev, f"{easing} not monotonic at {i / 100}"
        prev = val


def test_easing_midpoints():
    assert ease(0.5, EasingType.LINEAR) == pytest.approx(0.5)
    assert ease(0.5, EasingType.EASE_IN) < 0.5
    assert ease(0.5, EasingType.EASE_OUT) > 0.5
    assert ease(0.5, EasingType.EASE_IN_OUT) == 0.5


def test_easing_clamps_input():
    assert ease(-3.0, EasingType.EASE_OUT) == 0.0
    assert ease(7.0, EasingType.EASE_IN) == 1.0


def test_no_keyframes_is_full_frame():
    vp = compute_viewport(500, [], 1920.0, 1080.0)
    assert vp.zoom == 1.0
    assert (vp.x, vp.y, vp.width, vp.height) == (0.0, 0.0, 1920.0, 1080.0)
    assert (vp.center_x, vp.center_y) == (960.0, 540.0)


def test_hold_phase_reaches_peak(linear_keyframe):
    vp = compute_viewport(400, [linear_keyframe], 1920.0, 1080.0)
    assert vp.zoom == pytest.approx(2.0)
    assert vp.width == pytest.approx(960.0)
    assert vp.height == pytest.approx(540.0)


def test_zoom_in_halfway(linear_keyframe):
    vp = compute_viewport(150, [linear_keyframe], 1920.0, 1080.0)
    assert vp.zoom == pytest.approx(1.5)


def test_zoom_out_halfway(linear_keyframe):
    vp = compute_viewport(950, [linear_keyframe], 1920.0, 1080.0)
    assert vp.zoom == pytest.approx(1.5)


def test_outside_window_is_unzoomed():
    kf = ZoomKeyframe(1000, 2100, 960.0, 540.0, 2.0, 300, 500, 300, EasingType.LINEAR)
    assert compute_viewport(500, [kf], 1920.0, 1080.0).zoom == 1.0
    assert compute_viewport(3000, [kf], 1920.0, 1080.0).zoom == 1.0
    assert compute_viewport(1150, [kf], 1920.0, 1080.0).zoom == pytest.approx(1.5)


def test_window_end_is_inclusive(linear_keyframe):
    vp = compute_viewport(1100, [linear_keyframe], 1920.0, 1080.0)
    assert vp.zoom == pytest.approx(1.0)


def test_zero_length_zoom_out_does_not_divide_by_zero():
    kf = ZoomKeyframe(0, 800, 100.0, 100.0, 2.0, 300, 500, 0, EasingType.LINEAR)
    assert compute_viewport(800, [kf], 400.0, 300.0).zoom == 1.0


@pytest.mark.parametrize("cx,cy", [(10.0, 10.0), (1915.0, 5.0), (3.0, 1079.0),
                                   (1919.0, 1079.0), (-50.0, 4000.0)])
@pytest.mark.parametrize("peak", [1.5, 2.0, 2.7, 3.0])
def test_crop_stays_in_bounds(cx, cy, peak):
    kf = ZoomKeyframe(0, 1100, cx, cy, peak, 300, 500, 300, EasingType.EASE_IN_OUT)
    for t in (0, 100, 299, 400, 900, 1100):
        vp = compute_viewport(t, [kf], 1920.0, 1080.0)
        assert vp.x >= 0.0
        assert vp.y >= 0.0
        assert vp.x + vp.width <= 1920.0 + 1e-9
        assert vp.y + vp.height <= 1080.0 + 1e-9


def test_greatest_zoom_wins():
    small = ZoomKeyframe(0, 1100, 100.0, 100.0, 1.5, 300, 500, 300, EasingType.LINEAR)
    big   = ZoomKeyframe(0, 1100, 900.0, 500.0, 2.5, 300, 500, 300, EasingType.LINEAR)
    vp = compute_viewport(400, [small, big], 1920.0, 1080.0)
    assert vp.zoom == pytest.approx(2.5)
    assert (vp.center_x, vp.center_y) == (900.0, 500.0)


def test_equal_zoom_keeps_first_keyframe():
    first  = ZoomKeyframe(0, 1100, 600.0, 400.0, 2.0, 300, 500, 300, EasingType.LINEAR)
    second = ZoomKeyframe(0, 1100, 1200.0, 700.0, 2.0, 300, 500, 300, EasingType.LINEAR)
    vp = compute_viewport(400, [first, second], 1920.0, 1080.0)
    assert (vp.center_x, vp.center_y) == (600.0, 400.0)


def test_viewport_is_deterministic_for_out_of_order_queries(linear_keyframe):
    times = [950, 10, 400, 150, 950, 1100, 400]
    first = [compute_viewport(t, [linear_keyframe], 1920.0, 1080.0) for t in times]
    again = [compute_viewport(t, [linear_keyframe], 1920.0, 1080.0) for t in reversed(times)]
    assert first == list(reversed(again))


def test_generate_keyframes_disabled_or_empty():
    assert generate_keyframes([], ZoomConfig()) == []
    assert generate_keyframes([click(100, 500, 300)], ZoomConfig(enabled=False)) == []


def test_generate_keyframes_copies_config():
    cfg = ZoomConfig(zoom_level=2.5, zoom_in_ms=200, hold_ms=400, zoom_out_ms=250,
                     easing=EasingType.EASE_OUT)
    kfs = generate_keyframes([click(100, 500, 300), click(2000, 10, 20)], cfg)
    assert [k.start_ms for k in kfs] == [100, 2000]
    assert kfs[0].end_ms == 100 + 200 + 400 + 250
    assert (kfs[0].center_x, kfs[0].center_y) == (500.0, 300.0)
    assert kfs[1].peak_zoom == 2.5
    assert kfs[1].easing is EasingType.EASE_OUT
    assert (kfs[1].zoom_in_ms, kfs[1].hold_ms, kfs[1].zoom_out_ms) == (200, 400, 250)


def test_generate_keyframes_maps_every_given_event():
    # filtering to clicks is the caller's job
    kfs = generate_keyframes([make_event(5, 1, 1)], ZoomConfig())
    assert len(kfs) == 1
