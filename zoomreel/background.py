"""
Background canvas, drop shadow and rounded-frame compositing.

Rasters are ``(height, width, 4)`` uint8 numpy arrays (RGBA8). All pixel
maths is done here with numpy broadcasting: gradient projection, shadow
falloff, rounded-corner masking and the "over" operator.
"""

import logging
import math
import re
from functools import lru_cache

import numpy as np

from .models import GradientBackground, ImageBackground, SolidBackground

log = logging.getLogger(__name__)

IMAGE_FALLBACK_COLOR = "#1a1a2e"

# ════════════════════════════════════════════════════════════════
#  COLOURS
# ════════════════════════════════════════════════════════════════

_HEX_PAIR = re.compile(r"[0-9a-fA-F]{2}")


def _hex_byte(s, default):
    if not _HEX_PAIR.fullmatch(s):
        return default
    return int(s, 16)


def parse_hex_color(hex_str):
    """'#RRGGBB' / 'RRGGBBAA' -> (r, g, b, a). Anything else is opaque black."""
    h = str(hex_str).lstrip("#")
    if len(h) == 6:
        return (_hex_byte(h[0:2], 0), _hex_byte(h[2:4], 0), _hex_byte(h[4:6], 0), 255)
    if len(h) == 8:
        return (_hex_byte(h[0:2], 0), _hex_byte(h[2:4], 0), _hex_byte(h[4:6], 0),
                _hex_byte(h[6:8], 255))
    return (0, 0, 0, 255)


def alpha_blend_array(bg, fg):
    """Porter-Duff "over" of ``fg`` onto ``bg`` for arrays of RGBA8 pixels."""
    fg   = fg.astype(np.float64)
    bg   = bg.astype(np.float64)
    fg_a = fg[..., 3:4] / 255.0
    bg_a = bg[..., 3:4] / 255.0
    out_a = fg_a + bg_a * (1.0 - fg_a)

    empty = out_a < 0.001
    safe  = np.where(empty, 1.0, out_a)
    rgb   = (fg[..., :3] * fg_a + bg[..., :3] * bg_a * (1.0 - fg_a)) / safe

    # truncating cast; the epsilon absorbs float noise such as 254.99999
    out = np.empty(rgb.shape[:-1] + (4,), dtype=np.uint8)
    out[..., :3] = np.clip(rgb + 1e-9, 0, 255).astype(np.uint8)
    out[..., 3:] = np.clip(out_a * 255.0 + 1e-9, 0, 255).astype(np.uint8)
    out[empty[..., 0]] = 0
    return out


def alpha_blend(bg, fg):
    """Single-pixel form of :func:`alpha_blend_array`."""
    px = alpha_blend_array(np.array([bg], dtype=np.uint8), np.array([fg], dtype=np.uint8))
    return tuple(int(v) for v in px[0])

# ════════════════════════════════════════════════════════════════
#  BACKGROUND
# ════════════════════════════════════════════════════════════════

def canvas_size(frame_w, frame_h, style):
    """Frame plus padding, widened to the style's aspect ratio if it has one."""
    w = frame_w + style.padding * 2
    h = frame_h + style.padding * 2
    ratio = style.aspect_ratio.ratio
    if ratio:
        rw, rh = ratio
        if w * rh > h * rw:
            h = -(-w * rh // rw)
        else:
            w = -(-h * rw // rh)
    return w, h


@lru_cache(maxsize=None)
def _warn_image_fallback(path):
    log.warning("image backgrounds are not rendered yet, using %s instead of %s",
                IMAGE_FALLBACK_COLOR, path)


def render_background(width, height, style):
    canvas = np.zeros((height, width, 4), dtype=np.uint8)
    bg = style.background
    if isinstance(bg, SolidBackground):
        canvas[:] = parse_hex_color(bg.color)
    elif isinstance(bg, GradientBackground):
        draw_gradient(canvas, bg.colors, bg.angle)
    elif isinstance(bg, ImageBackground):
        # TODO: load the image and cover-fit it to the canvas
        _warn_image_fallback(bg.path)
        canvas[:] = parse_hex_color(IMAGE_FALLBACK_COLOR)
    else:
        raise TypeError(f"unknown background {bg!r}")
    return canvas


def draw_gradient(canvas, colors, angle_deg):
    """Linear multi-stop gradient along ``angle_deg``, written into ``canvas``."""
    if not colors:
        return canvas
    if len(colors) == 1:
        canvas[:] = parse_hex_color(colors[0])
        return canvas

    h, w = canvas.shape[:2]
    rad = math.radians(angle_deg)
    dx, dy = math.cos(rad), math.sin(rad)

    corners  = [x * dx + y * dy for x, y in ((0, 0), (w, 0), (0, h), (w, h))]
    min_proj = min(corners)
    span     = max(corners) - min_proj

    proj = np.arange(w, dtype=np.float64)[None, :] * dx \
         + np.arange(h, dtype=np.float64)[:, None] * dy
    if span > 0:
        t = np.clip((proj - min_proj) / span, 0.0, 1.0)
    else:
        t = np.zeros_like(proj)

    stops = np.array([parse_hex_color(c)[:3] for c in colors], dtype=np.float64)
    segments = len(stops) - 1
    seg_t    = t * segments
    idx      = np.minimum(seg_t.astype(np.int64), segments - 1)
    local    = (seg_t - idx)[..., None]

    c1, c2 = stops[idx], stops[idx + 1]
    rgb = np.clip(c1 + (c2 - c1) * local, 0.0, 255.0)
    canvas[..., :3] = np.floor(rgb + 0.5).astype(np.uint8)
    canvas[..., 3]  = 255
    return canvas

# ════════════════════════════════════════════════════════════════
#  SHADOW + ROUNDED FRAME
# ════════════════════════════════════════════════════════════════

def _edge_distance(d, size):
    """Per-axis pixel distance outside [0, size)."""
    return np.where(d < 0, -d, np.where(d >= size, d - size + 1, 0)).astype(np.float64)


def draw_shadow(canvas, offset_x, offset_y, width, height, shadow):
    """Linear-falloff box shadow around the offset frame rectangle, in place."""
    r, g, b, _ = parse_hex_color(shadow.color)
    blur  = max(0, int(shadow.blur))
    sx, sy = int(shadow.offset_x), int(shadow.offset_y)
    base_alpha = float(int(max(0.0, min(255.0, shadow.opacity * 255.0))))

    ch, cw = canvas.shape[:2]
    dxs = np.arange(-blur, width + blur + 1)
    dys = np.arange(-blur, height + blur + 1)
    cols = (offset_x + sx + dxs >= 0) & (offset_x + sx + dxs < cw)
    rows = (offset_y + sy + dys >= 0) & (offset_y + sy + dys < ch)
    dxs, dys = dxs[cols], dys[rows]
    if dxs.size == 0 or dys.size == 0:
        return canvas

    dist = np.hypot(_edge_distance(dys, height)[:, None], _edge_distance(dxs, width)[None, :])
    if blur > 0:
        inside = dist <= blur
        alpha  = base_alpha * (1.0 - dist / blur)
    else:
        inside = dist <= 0
        alpha  = np.full(dist.shape, base_alpha)

    fg = np.empty(dist.shape + (4,), dtype=np.uint8)
    fg[..., 0], fg[..., 1], fg[..., 2] = r, g, b
    fg[..., 3] = np.clip(alpha, 0, 255).astype(np.uint8)

    x0 = offset_x + sx + int(dxs[0])
    y0 = offset_y + sy + int(dys[0])
    region  = canvas[y0:y0 + dys.size, x0:x0 + dxs.size]
    blended = alpha_blend_array(region, fg)
    region[inside] = blended[inside]
    return canvas


def _clamp_radius(width, height, radius):
    return max(0, min(int(radius), width // 2, height // 2))


def is_in_rounded_rect(x, y, width, height, radius):
    r = _clamp_radius(width, height, radius)
    if r == 0:
        return True
    if x < r:
        cx = r
    elif x >= width - r:
        cx = width - r
    else:
        return True
    if y < r:
        cy = r
    elif y >= height - r:
        cy = height - r
    else:
        return True
    return (x - cx) ** 2 + (y - cy) ** 2 <= r * r


def rounded_rect_mask(width, height, radius):
    """Boolean ``(height, width)`` mask of :func:`is_in_rounded_rect`."""
    r = _clamp_radius(width, height, radius)
    if r == 0:
        return np.ones((height, width), dtype=bool)
    xs = np.arange(width, dtype=np.float64)
    ys = np.arange(height, dtype=np.float64)
    x_edge = (xs < r) | (xs >= width - r)
    y_edge = (ys < r) | (ys >= height - r)
    cx = np.where(xs < r, r, width - r)
    cy = np.where(ys < r, r, height - r)
    d2 = (xs - cx)[None, :] ** 2 + (ys - cy)[:, None] ** 2
    return ~(y_edge[:, None] & x_edge[None, :] & (d2 > r * r))


def _draw_rounded_frame(canvas, frame, offset_x, offset_y, radius):
    ch, cw = canvas.shape[:2]
    fh, fw = frame.shape[:2]
    w = max(0, min(fw, cw - offset_x))
    h = max(0, min(fh, ch - offset_y))
    if w == 0 or h == 0:
        return canvas
    mask   = rounded_rect_mask(fw, fh, radius)[:h, :w]
    region = canvas[offset_y:offset_y + h, offset_x:offset_x + w]
    region[mask] = frame[:h, :w][mask]
    return canvas


def composite_frame(background, video_frame, style):
    """Centre ``video_frame`` on a copy of ``background`` with shadow and rounded corners."""
    canvas = background.copy()
    ch, cw = canvas.shape[:2]
    fh, fw = video_frame.shape[:2]
    offset_x = max(0, cw - fw) // 2
    offset_y = max(0, ch - fh) // 2

    draw_shadow(canvas, offset_x, offset_y, fw, fh, style.shadow)
    _draw_rounded_frame(canvas, video_frame, offset_x, offset_y, style.corner_radius)
    return canvas
