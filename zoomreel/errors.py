"""Exception hierarchy.

Rendering math never raises these: colours, geometry and crops fall back to
defaults. Only configuration loading and the decode/encode collaborators
fail, each with its own category.
"""


class ZoomReelError(Exception):
    """Base class for every error surfaced to callers."""


class ConfigError(ZoomReelError):
    """Settings or event log could not be read or parsed."""


class SourceVideoError(ZoomReelError):
    """The captured source video could not be opened or decoded."""


class EncoderError(ZoomReelError):
    """The output writer failed to accept or finalize frames."""
