"""
Per-frame compositor: zoom crop -> background -> shadow + rounded frame.

    Background  ->  Shadow  ->  Rounded frame (zoomed source)

The cursor layer is not part of ``compose_frame``; see ``overlay``.
"""

import numpy as np
from PIL import Image

from . import background, zoom
from .cursor import cursor_at

NO_ZOOM_EPS = 0.01


def _resize(raster, width, height):
    pil = Image.fromarray(np.ascontiguousarray(raster))
    return np.array(pil.resize((width, height), Image.LANCZOS))


def apply_zoom_crop(source, viewport, target_w, target_h):
    """Crop ``source`` to ``viewport`` and scale the crop to target size."""
    src_h, src_w = source.shape[:2]
    if src_w == 0 or src_h == 0 or target_w <= 0 or target_h <= 0:
        return np.zeros((max(0, target_h), max(0, target_w), 4), dtype=np.uint8)

    if abs(viewport.zoom - 1.0) < NO_ZOOM_EPS:
        if (src_w, src_h) == (target_w, target_h):
            return source.copy()
        return _resize(source, target_w, target_h)

    # Crop region, saturated to what the source actually has
    crop_x = min(int(max(0.0, viewport.x)), src_w - 1)
    crop_y = min(int(max(0.0, viewport.y)), src_h - 1)
    crop_w = max(1, min(int(viewport.width),  src_w - crop_x))
    crop_h = max(1, min(int(viewport.height), src_h - crop_y))

    cropped = source[crop_y:crop_y + crop_h, crop_x:crop_x + crop_w]
    return _resize(np.ascontiguousarray(cropped), target_w, target_h)


class Compositor:
    """Combines all layers for one frame; holds only immutable inputs."""

    def __init__(self, frame_style, zoom_config, events, source_width, source_height):
        self.frame_style   = frame_style
        self.events        = events
        self.source_width  = source_width
        self.source_height = source_height
        self.zoom_keyframes = tuple(zoom.generate_keyframes(events.click_events(), zoom_config))
        self.output_width, self.output_height = background.canvas_size(
            source_width, source_height, frame_style)

    @property
    def output_size(self):
        return self.output_width, self.output_height

    def get_viewport(self, time_ms):
        return zoom.compute_viewport(time_ms, self.zoom_keyframes,
                                     float(self.source_width), float(self.source_height))

    def cursor_state(self, time_ms, cursor_config):
        return cursor_at(time_ms, self.events.mouse_events, cursor_config)

    def compose_frame(self, source_frame, time_ms):
        """Final RGBA8 canvas for ``source_frame`` shown at ``time_ms``."""
        viewport = self.get_viewport(time_ms)
        zoomed   = apply_zoom_crop(source_frame, viewport,
                                   self.source_width, self.source_height)
        bg = background.render_background(self.output_width, self.output_height,
                                          self.frame_style)
        return background.composite_frame(bg, zoomed, self.frame_style)
