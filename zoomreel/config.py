"""
Render settings bundle and JSON file loading.

A settings file holds any subset of::

    {"zoom": {...}, "cursor": {...}, "style": {...}, "export": {...},
     "draw_cursor": false}

Missing sections fall back to their defaults.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

from .errors import ConfigError
from .models import CursorConfig, ExportConfig, FrameStyle, RecordedEvents, ZoomConfig

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderSettings:
    zoom:        ZoomConfig   = field(default_factory=ZoomConfig)
    cursor:      CursorConfig = field(default_factory=CursorConfig)
    style:       FrameStyle   = field(default_factory=FrameStyle)
    export:      ExportConfig = field(default_factory=ExportConfig)
    draw_cursor: bool         = False

    def to_dict(self):
        return {
            "zoom":        self.zoom.to_dict(),
            "cursor":      self.cursor.to_dict(),
            "style":       self.style.to_dict(),
            "export":      self.export.to_dict(),
            "draw_cursor": self.draw_cursor,
        }

    @staticmethod
    def from_dict(d):
        if not isinstance(d, dict):
            raise ConfigError(f"settings must be an object, got {type(d).__name__}")
        try:
            return RenderSettings(
                zoom=ZoomConfig.from_dict(d.get("zoom") or {}),
                cursor=CursorConfig.from_dict(d.get("cursor") or {}),
                style=FrameStyle.from_dict(d.get("style") or {}),
                export=ExportConfig.from_dict(d.get("export") or {}),
                draw_cursor=bool(d.get("draw_cursor", False)),
            )
        except (AttributeError, TypeError, ValueError) as e:
            raise ConfigError(f"invalid settings: {e}") from e


def _read_json(path):
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            return json.load(f)
    except OSError as e:
        raise ConfigError(f"cannot read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"{path} is not valid JSON: {e}") from e


def load_settings(path=None):
    if path is None:
        return RenderSettings()
    settings = RenderSettings.from_dict(_read_json(path))
    log.debug("loaded settings from %s", path)
    return settings


def load_events(path):
    """Read a RecordedEvents log; events are sorted by timestamp on load."""
    events = RecordedEvents.from_dict(_read_json(path))
    ordered = tuple(sorted(events.mouse_events, key=lambda e: e.timestamp_ms))
    if ordered != events.mouse_events:
        log.warning("%s: mouse events were out of order, sorted by timestamp", path)
        events = RecordedEvents(ordered, events.recording_start_ms,
                                events.display_width, events.display_height)
    log.debug("loaded %d mouse events (%d clicks) from %s",
              len(events.mouse_events), len(events.click_events()), path)
    return events


def save_json(obj, path):
    """Write any model with ``to_dict()`` as indented JSON."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(obj.to_dict(), f, indent=2)
