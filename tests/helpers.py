"""Event builders shared by the tests."""

from zoomreel.models import EventType, MouseButton, MouseEvent


def make_event(t, x=0.0, y=0.0, kind=EventType.MOVE, button=MouseButton.LEFT):
    return MouseEvent(t, float(x), float(y), kind, button)


def click(t, x=0.0, y=0.0):
    return make_event(t, x, y, EventType.CLICK)


def scroll(t, x=0.0, y=0.0):
    return make_event(t, x, y, EventType.SCROLL, MouseButton.MIDDLE)
