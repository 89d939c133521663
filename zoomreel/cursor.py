"""
Cursor engine: smoothed position, auto-hide and click highlight.

Everything is computed from absolute time over the immutable event log;
there is no per-frame state carried between calls.
"""

from bisect import bisect_right
from dataclasses import dataclass

from .models import EventType

HIGHLIGHT_MS = 400   # click highlight animation length


@dataclass(frozen=True)
class ClickHighlight:
    progress: float   # 0 .. 1 animation progress
    x:        float
    y:        float


@dataclass(frozen=True)
class CursorState:
    x:               float
    y:               float
    visible:         bool
    click_highlight: object = None   # ClickHighlight | None


def _locate(events, t):
    """Index of the event at or just before ``t``, clamped to the log."""
    times = [e.timestamp_ms for e in events]
    idx = bisect_right(times, t) - 1
    return max(0, min(len(events) - 1, idx))


def _smooth_position(events, center_idx, window_ms):
    """Quadratic-falloff average around the located event's timestamp."""
    center = events[center_idx]
    if window_ms <= 0:
        return center.x, center.y
    t0 = center.timestamp_ms
    sum_x = sum_y = weight_sum = 0.0
    for ev in events:
        dt = abs(ev.timestamp_ms - t0)
        if dt > window_ms:
            continue
        w = (1.0 - dt / window_ms) ** 2
        sum_x += ev.x * w
        sum_y += ev.y * w
        weight_sum += w
    if weight_sum > 0.0:
        return sum_x / weight_sum, sum_y / weight_sum
    return center.x, center.y


def _is_visible(events, idx, t, auto_hide_after_ms):
    for ev in reversed(events[:idx + 1]):
        if ev.event_type in (EventType.CLICK, EventType.MOVE):
            return 0 <= t - ev.timestamp_ms < auto_hide_after_ms
    return False


def _click_highlight(events, t):
    latest = None
    for ev in events:
        if ev.event_type is EventType.CLICK and ev.timestamp_ms <= t \
                and t - ev.timestamp_ms < HIGHLIGHT_MS:
            latest = ev
    if latest is None:
        return None
    return ClickHighlight(progress=(t - latest.timestamp_ms) / HIGHLIGHT_MS,
                          x=latest.x, y=latest.y)


def cursor_at(t, events, config):
    """Cursor state at time ``t`` (ms) from a timestamp-sorted event list."""
    if not events:
        return CursorState(0.0, 0.0, False, None)

    idx     = _locate(events, t)
    nearest = events[idx]

    if config.smoothing > 0.01:
        x, y = _smooth_position(events, idx, int(config.smoothing * 100))
    else:
        x, y = nearest.x, nearest.y

    visible   = _is_visible(events, idx, t, config.auto_hide_after_ms)
    highlight = _click_highlight(events, t) if config.highlight_clicks else None
    return CursorState(x, y, visible, highlight)
