"""
Data models shared by the zoom, cursor and compositing engines.

Every model round-trips through plain dicts (``to_dict()`` / ``from_dict()``)
so projects can persist them as JSON. Closed variant sets use the
externally tagged layout: unit variants are bare strings (``"EaseInOut"``)
and data variants are single-key objects (``{"Solid": {"color": "#fff"}}``).
"""

from dataclasses import dataclass, field
from enum import Enum

from .errors import ConfigError

# ════════════════════════════════════════════════════════════════
#  UNIT VARIANTS
# ════════════════════════════════════════════════════════════════

class EventType(Enum):
    CLICK  = "Click"
    MOVE   = "Move"
    SCROLL = "Scroll"


class MouseButton(Enum):
    LEFT   = "Left"
    RIGHT  = "Right"
    MIDDLE = "Middle"
    OTHER  = "Other"


class EasingType(Enum):
    LINEAR      = "Linear"
    EASE_IN     = "EaseIn"
    EASE_OUT    = "EaseOut"
    EASE_IN_OUT = "EaseInOut"


class AspectRatio(Enum):
    AUTO       = "Auto"
    RATIO_16X9 = "Ratio16x9"
    RATIO_9X16 = "Ratio9x16"
    RATIO_1X1  = "Ratio1x1"

    @property
    def ratio(self):
        """(width, height) terms of the ratio, or None for Auto."""
        return {
            AspectRatio.AUTO:       None,
            AspectRatio.RATIO_16X9: (16, 9),
            AspectRatio.RATIO_9X16: (9, 16),
            AspectRatio.RATIO_1X1:  (1, 1),
        }[self]


class ExportFormat(Enum):
    MP4 = "Mp4"
    GIF = "Gif"


class ResolutionPreset(Enum):
    R720P  = "R720p"
    R1080P = "R1080p"
    R4K    = "R4k"

    def dimensions(self):
        return {
            ResolutionPreset.R720P:  (1280, 720),
            ResolutionPreset.R1080P: (1920, 1080),
            ResolutionPreset.R4K:    (3840, 2160),
        }[self]

    def to_dict(self):
        return self.value


def _unit(enum_cls, value):
    try:
        return enum_cls(value)
    except ValueError:
        raise ConfigError(f"unknown {enum_cls.__name__} variant: {value!r}") from None


def _single_tag(data, what):
    if isinstance(data, str):
        return data, {}
    if not isinstance(data, dict) or len(data) != 1:
        raise ConfigError(f"{what} must be a tag string or a single-key object, got {data!r}")
    tag, body = next(iter(data.items()))
    return tag, body or {}

# ════════════════════════════════════════════════════════════════
#  POINTER EVENTS
# ════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class MouseEvent:
    """One pointer event; ``timestamp_ms`` is relative to recording start."""
    timestamp_ms: int
    x:            float
    y:            float
    event_type:   EventType   = EventType.MOVE
    button:       MouseButton = MouseButton.LEFT

    @property
    def is_click(self):
        return self.event_type is EventType.CLICK

    def to_dict(self):
        return {
            "timestamp_ms": self.timestamp_ms,
            "x":            self.x,
            "y":            self.y,
            "event_type":   self.event_type.value,
            "button":       self.button.value,
        }

    @staticmethod
    def from_dict(d):
        try:
            return MouseEvent(
                timestamp_ms=int(d["timestamp_ms"]),
                x=float(d["x"]),
                y=float(d["y"]),
                event_type=_unit(EventType, d.get("event_type", "Move")),
                button=_unit(MouseButton, d.get("button", "Left")),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ConfigError(f"malformed mouse event {d!r}: {e}") from e


@dataclass(frozen=True)
class RecordedEvents:
    """Finalized pointer log handed over by the capture side."""
    mouse_events:       tuple = ()
    recording_start_ms: int   = 0
    display_width:      float = 0.0
    display_height:     float = 0.0

    def click_events(self):
        return [e for e in self.mouse_events if e.is_click]

    def scaled_to(self, width, height):
        """Copy with coordinates rescaled from display space to ``width`` x ``height``."""
        if self.display_width <= 0 or self.display_height <= 0:
            return self
        sx = width / self.display_width
        sy = height / self.display_height
        if sx == 1.0 and sy == 1.0:
            return self
        events = tuple(
            MouseEvent(e.timestamp_ms, e.x * sx, e.y * sy, e.event_type, e.button)
            for e in self.mouse_events
        )
        return RecordedEvents(events, self.recording_start_ms, float(width), float(height))

    def to_dict(self):
        return {
            "mouse_events":       [e.to_dict() for e in self.mouse_events],
            "recording_start_ms": self.recording_start_ms,
            "display_width":      self.display_width,
            "display_height":     self.display_height,
        }

    @staticmethod
    def from_dict(d):
        if not isinstance(d, dict):
            raise ConfigError(f"recorded events must be an object, got {type(d).__name__}")
        events = tuple(MouseEvent.from_dict(e) for e in d.get("mouse_events", []))
        return RecordedEvents(
            mouse_events=events,
            recording_start_ms=int(d.get("recording_start_ms", 0)),
            display_width=float(d.get("display_width", 0.0)),
            display_height=float(d.get("display_height", 0.0)),
        )

# ════════════════════════════════════════════════════════════════
#  ZOOM / CURSOR CONFIG
# ════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ZoomConfig:
    enabled:     bool       = True
    zoom_level:  float      = 2.0    # 1.5 .. 3.0
    zoom_in_ms:  int        = 300
    hold_ms:     int        = 500
    zoom_out_ms: int        = 300
    easing:      EasingType = EasingType.EASE_IN_OUT

    def to_dict(self):
        return {
            "enabled":              self.enabled,
            "zoom_level":           self.zoom_level,
            "zoom_in_duration_ms":  self.zoom_in_ms,
            "hold_duration_ms":     self.hold_ms,
            "zoom_out_duration_ms": self.zoom_out_ms,
            "easing":               self.easing.value,
        }

    @staticmethod
    def from_dict(d):
        base = ZoomConfig()
        return ZoomConfig(
            enabled=bool(d.get("enabled", base.enabled)),
            zoom_level=float(d.get("zoom_level", base.zoom_level)),
            zoom_in_ms=int(d.get("zoom_in_duration_ms", base.zoom_in_ms)),
            hold_ms=int(d.get("hold_duration_ms", base.hold_ms)),
            zoom_out_ms=int(d.get("zoom_out_duration_ms", base.zoom_out_ms)),
            easing=_unit(EasingType, d.get("easing", base.easing.value)),
        )


@dataclass(frozen=True)
class CursorConfig:
    smoothing:          float = 0.5     # 0..1, window = smoothing * 100 ms
    auto_hide_after_ms: int   = 3000
    highlight_clicks:   bool  = True
    highlight_color:    str   = "#FFD700"
    highlight_radius:   int   = 30

    def to_dict(self):
        return {
            "smoothing":          self.smoothing,
            "auto_hide_after_ms": self.auto_hide_after_ms,
            "highlight_clicks":   self.highlight_clicks,
            "highlight_color":    self.highlight_color,
            "highlight_radius":   self.highlight_radius,
        }

    @staticmethod
    def from_dict(d):
        base = CursorConfig()
        return CursorConfig(
            smoothing=float(d.get("smoothing", base.smoothing)),
            auto_hide_after_ms=int(d.get("auto_hide_after_ms", base.auto_hide_after_ms)),
            highlight_clicks=bool(d.get("highlight_clicks", base.highlight_clicks)),
            highlight_color=str(d.get("highlight_color", base.highlight_color)),
            highlight_radius=int(d.get("highlight_radius", base.highlight_radius)),
        )

# ════════════════════════════════════════════════════════════════
#  FRAME STYLE
# ════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class SolidBackground:
    TAG = "Solid"
    color: str = "#1a1a2e"

    def to_dict(self):
        return {self.TAG: {"color": self.color}}


@dataclass(frozen=True)
class GradientBackground:
    TAG = "Gradient"
    colors: tuple = ("#667eea", "#764ba2")
    angle:  float = 135.0   # degrees

    def to_dict(self):
        return {self.TAG: {"colors": list(self.colors), "angle": self.angle}}


@dataclass(frozen=True)
class ImageBackground:
    TAG = "Image"
    path: str = ""

    def to_dict(self):
        return {self.TAG: {"path": self.path}}


def background_from_dict(data):
    tag, body = _single_tag(data, "Background")
    if tag == SolidBackground.TAG:
        return SolidBackground(color=str(body.get("color", SolidBackground.color)))
    if tag == GradientBackground.TAG:
        colors = body.get("colors", list(GradientBackground.colors))
        return GradientBackground(colors=tuple(str(c) for c in colors),
                                  angle=float(body.get("angle", GradientBackground.angle)))
    if tag == ImageBackground.TAG:
        return ImageBackground(path=str(body.get("path", "")))
    raise ConfigError(f"unknown Background variant: {tag!r}")


@dataclass(frozen=True)
class Shadow:
    offset_x: float = 0.0
    offset_y: float = 8.0
    blur:     float = 32.0
    color:    str   = "#000000"
    opacity:  float = 0.3

    def to_dict(self):
        return {
            "offset_x": self.offset_x,
            "offset_y": self.offset_y,
            "blur":     self.blur,
            "color":    self.color,
            "opacity":  self.opacity,
        }

    @staticmethod
    def from_dict(d):
        base = Shadow()
        return Shadow(
            offset_x=float(d.get("offset_x", base.offset_x)),
            offset_y=float(d.get("offset_y", base.offset_y)),
            blur=float(d.get("blur", base.blur)),
            color=str(d.get("color", base.color)),
            opacity=float(d.get("opacity", base.opacity)),
        )


@dataclass(frozen=True)
class FrameStyle:
    background:    object      = field(default_factory=GradientBackground)
    padding:       int         = 64
    corner_radius: int         = 12
    shadow:        Shadow      = field(default_factory=Shadow)
    aspect_ratio:  AspectRatio = AspectRatio.AUTO

    def to_dict(self):
        return {
            "background":    self.background.to_dict(),
            "padding":       self.padding,
            "corner_radius": self.corner_radius,
            "shadow":        self.shadow.to_dict(),
            "aspect_ratio":  self.aspect_ratio.value,
        }

    @staticmethod
    def from_dict(d):
        base = FrameStyle()
        bg = d.get("background")
        return FrameStyle(
            background=background_from_dict(bg) if bg is not None else base.background,
            padding=int(d.get("padding", base.padding)),
            corner_radius=int(d.get("corner_radius", base.corner_radius)),
            shadow=Shadow.from_dict(d.get("shadow") or {}),
            aspect_ratio=_unit(AspectRatio, d.get("aspect_ratio", base.aspect_ratio.value)),
        )

# ════════════════════════════════════════════════════════════════
#  EXPORT CONFIG
# ════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class CustomResolution:
    TAG = "Custom"
    width:  int = 1920
    height: int = 1080

    def dimensions(self):
        return (self.width, self.height)

    def to_dict(self):
        return {self.TAG: {"width": self.width, "height": self.height}}


def resolution_from_dict(data):
    tag, body = _single_tag(data, "ExportResolution")
    if tag == CustomResolution.TAG:
        return CustomResolution(width=int(body.get("width", CustomResolution.width)),
                                height=int(body.get("height", CustomResolution.height)))
    return _unit(ResolutionPreset, tag)


@dataclass(frozen=True)
class ExportConfig:
    format:      ExportFormat = ExportFormat.MP4
    resolution:  object       = ResolutionPreset.R1080P
    quality:     float        = 0.8   # 0..1
    output_path: str          = ""

    def to_dict(self):
        return {
            "format":      self.format.value,
            "resolution":  self.resolution.to_dict(),
            "quality":     self.quality,
            "output_path": self.output_path,
        }

    @staticmethod
    def from_dict(d):
        base = ExportConfig()
        res = d.get("resolution")
        return ExportConfig(
            format=_unit(ExportFormat, d.get("format", base.format.value)),
            resolution=resolution_from_dict(res) if res is not None else base.resolution,
            quality=float(d.get("quality", base.quality)),
            output_path=str(d.get("output_path", base.output_path)),
        )
