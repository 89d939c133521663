"""
Keyframe engine: click-driven zoom animation.

Each click becomes one keyframe with zoom-in / hold / zoom-out phases.
The viewport for any timestamp is a pure function of the keyframe list,
so frames can be rendered in any order or in parallel.
"""

import logging
from dataclasses import dataclass

from .models import EasingType

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ZoomKeyframe:
    start_ms:    int
    end_ms:      int
    center_x:    float   # screen coords
    center_y:    float
    peak_zoom:   float
    zoom_in_ms:  int
    hold_ms:     int
    zoom_out_ms: int
    easing:      EasingType

    def contains(self, t):
        return self.start_ms <= t <= self.end_ms

    def zoom_at(self, t):
        """Zoom factor for a time inside [start_ms, end_ms]."""
        elapsed = t - self.start_ms
        peak    = self.peak_zoom
        # ── zoom in ───────────────────────────────────────────────
        if elapsed < self.zoom_in_ms:
            eased = ease(elapsed / self.zoom_in_ms, self.easing)
            return 1.0 + (peak - 1.0) * eased
        # ── hold ──────────────────────────────────────────────────
        if elapsed < self.zoom_in_ms + self.hold_ms:
            return peak
        # ── zoom out ──────────────────────────────────────────────
        if self.zoom_out_ms <= 0:
            return 1.0
        out_elapsed = elapsed - self.zoom_in_ms - self.hold_ms
        eased = ease(out_elapsed / self.zoom_out_ms, self.easing)
        return peak - (peak - 1.0) * eased


@dataclass(frozen=True)
class FrameViewport:
    """Crop rectangle in source pixels plus the zoom that produced it."""
    x:        float
    y:        float
    width:    float
    height:   float
    zoom:     float
    center_x: float
    center_y: float

    def to_dict(self):
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height,
                "zoom": self.zoom, "center_x": self.center_x, "center_y": self.center_y}


def ease(t, easing):
    """Remap normalised time; input is clamped to [0, 1]."""
    t = max(0.0, min(1.0, t))
    if easing is EasingType.LINEAR:
        return t
    if easing is EasingType.EASE_IN:
        return t * t * t
    if easing is EasingType.EASE_OUT:
        return 1.0 - (1.0 - t) ** 3
    if easing is EasingType.EASE_IN_OUT:
        if t < 0.5:
            return 4.0 * t * t * t
        return 1.0 - (-2.0 * t + 2.0) ** 3 / 2.0
    raise ValueError(f"unhandled easing {easing!r}")


def generate_keyframes(click_events, config):
    """One keyframe per click event, in event order."""
    if not config.enabled or not click_events:
        return []
    total = config.zoom_in_ms + config.hold_ms + config.zoom_out_ms
    keyframes = [
        ZoomKeyframe(
            start_ms=ev.timestamp_ms,
            end_ms=ev.timestamp_ms + total,
            center_x=ev.x,
            center_y=ev.y,
            peak_zoom=config.zoom_level,
            zoom_in_ms=config.zoom_in_ms,
            hold_ms=config.hold_ms,
            zoom_out_ms=config.zoom_out_ms,
            easing=config.easing,
        )
        for ev in click_events
    ]
    log.debug("generated %d zoom keyframes (peak x%.2f, %d ms each)",
              len(keyframes), config.zoom_level, total)
    return keyframes


def compute_viewport(t, keyframes, source_w, source_h):
    """Crop viewport at time ``t`` (ms) for a ``source_w`` x ``source_h`` frame."""
    max_zoom = 1.0
    cx, cy   = source_w / 2.0, source_h / 2.0

    for kf in keyframes:
        if not kf.contains(t):
            continue
        zoom = kf.zoom_at(t)
        # strictly greater: the first keyframe to reach a maximum keeps it
        if zoom > max_zoom:
            max_zoom = zoom
            cx, cy   = kf.center_x, kf.center_y

    crop_w = source_w / max_zoom
    crop_h = source_h / max_zoom
    half_w = crop_w / 2.0
    half_h = crop_h / 2.0
    cx = max(half_w, min(source_w - half_w, cx))
    cy = max(half_h, min(source_h - half_h, cy))

    return FrameViewport(
        x=cx - half_w,
        y=cy - half_h,
        width=crop_w,
        height=crop_h,
        zoom=max_zoom,
        center_x=cx,
        center_y=cy,
    )
