"""
Cursor overlay drawn on top of a composed frame.

Kept apart from ``Compositor.compose_frame`` so callers can choose to
render the cursor, draw it elsewhere, or skip it entirely.
"""

import numpy as np
from PIL import Image, ImageDraw

from .background import parse_hex_color

CURSOR_DOT_RADIUS = 6


def source_to_canvas(x, y, viewport, frame_w, frame_h, offset=(0, 0)):
    """Map a source-pixel position through the zoom viewport into canvas pixels."""
    ox, oy = offset
    if viewport.width <= 0 or viewport.height <= 0:
        return float(ox), float(oy)
    cx = (x - viewport.x) / viewport.width * frame_w + ox
    cy = (y - viewport.y) / viewport.height * frame_h + oy
    return cx, cy


def frame_offset(canvas_w, canvas_h, frame_w, frame_h):
    """Top-left of the centred frame, as ``composite_frame`` places it."""
    return max(0, canvas_w - frame_w) // 2, max(0, canvas_h - frame_h) // 2


def _draw_click_ripple(draw, px, py, progress, config):
    """Expanding ring + shrinking dot for a click."""
    r, g, b, _ = parse_hex_color(config.highlight_color)
    opacity = int(200 * max(0.0, 1.0 - progress))
    if opacity < 5:
        return
    radius = max(4, int(config.highlight_radius * (0.4 + 0.6 * progress)))
    draw.ellipse([px - radius, py - radius, px + radius, py + radius],
                 outline=(r, g, b, opacity), width=2)
    r2 = max(3, int(6 * max(0.0, 1.0 - progress * 3)))
    draw.ellipse([px - r2, py - r2, px + r2, py + r2],
                 fill=(r, g, b, min(255, opacity + 30)))


def draw_cursor(canvas, state, viewport, config, frame_size, offset=(0, 0)):
    """Return a copy of ``canvas`` with the click ripple and cursor dot drawn."""
    if not state.visible and state.click_highlight is None:
        return canvas.copy()

    ch, cw = canvas.shape[:2]
    fw, fh = frame_size
    layer  = Image.new("RGBA", (cw, ch), (0, 0, 0, 0))
    draw   = ImageDraw.Draw(layer)

    hl = state.click_highlight
    if hl is not None:
        hx, hy = source_to_canvas(hl.x, hl.y, viewport, fw, fh, offset)
        _draw_click_ripple(draw, int(hx), int(hy), hl.progress, config)

    if state.visible:
        px, py = source_to_canvas(state.x, state.y, viewport, fw, fh, offset)
        px = max(0, min(cw - 1, int(px)))
        py = max(0, min(ch - 1, int(py)))
        r = CURSOR_DOT_RADIUS
        draw.ellipse([px - r, py - r, px + r, py + r],
                     fill=(255, 255, 255, 235), outline=(20, 20, 20, 200), width=1)

    base = Image.fromarray(np.ascontiguousarray(canvas))
    return np.array(Image.alpha_composite(base, layer))
