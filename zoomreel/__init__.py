"""
zoomreel: click-driven zoom, cursor smoothing and styled framing for
screen recordings.

    comp  = Compositor(style, zoom_config, events, width, height)
    frame = comp.compose_frame(source_rgba, t_ms)
"""

from .background import alpha_blend, canvas_size, composite_frame, is_in_rounded_rect, \
    parse_hex_color, render_background
from .compositor import Compositor, apply_zoom_crop
from .cursor import ClickHighlight, CursorState, cursor_at
from .errors import ConfigError, EncoderError, SourceVideoError, ZoomReelError
from .models import AspectRatio, CursorConfig, CustomResolution, EasingType, EventType, \
    ExportConfig, ExportFormat, FrameStyle, GradientBackground, ImageBackground, \
    MouseButton, MouseEvent, RecordedEvents, ResolutionPreset, Shadow, SolidBackground, \
    ZoomConfig
from .zoom import FrameViewport, ZoomKeyframe, compute_viewport, ease, generate_keyframes

__version__ = "0.1.0"
