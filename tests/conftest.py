"""Shared fixtures for the zoomreel test suite."""

import sys
from pathlib import Path

import numpy as np
import pytest

PROJECT_ROOT = Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from zoomreel.models import (AspectRatio, EasingType, FrameStyle, RecordedEvents, Shadow,
                             SolidBackground)
from zoomreel.zoom import ZoomKeyframe

from helpers import click, make_event


@pytest.fixture
def linear_keyframe():
    return ZoomKeyframe(start_ms=0, end_ms=1100, center_x=960.0, center_y=540.0,
                        peak_zoom=2.0, zoom_in_ms=300, hold_ms=500, zoom_out_ms=300,
                        easing=EasingType.LINEAR)


@pytest.fixture
def flat_style():
    """Solid background, no padding, corners or shadow."""
    return FrameStyle(background=SolidBackground("#102030"), padding=0, corner_radius=0,
                      shadow=Shadow(offset_x=0, offset_y=0, blur=0, opacity=0.0),
                      aspect_ratio=AspectRatio.AUTO)


@pytest.fixture
def checker_frame():
    """64x48 RGBA frame: red left half, blue right half."""
    frame = np.zeros((48, 64, 4), dtype=np.uint8)
    frame[:, :32] = (255, 0, 0, 255)
    frame[:, 32:] = (0, 0, 255, 255)
    return frame


@pytest.fixture
def sample_events():
    return RecordedEvents(
        mouse_events=(
            make_event(0, 10, 10),
            click(100, 20, 12),
            make_event(250, 30, 20),
            click(1500, 50, 40),
        ),
        recording_start_ms=1_700_000_000_000,
        display_width=64.0,
        display_height=48.0,
    )
