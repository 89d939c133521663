"""
Capture-side pointer log.

The OS hook thread appends through ``record()`` while the foreground
thread starts/stops the session; all buffer access goes through one lock.
``stop()`` hands the rendering side an immutable ``RecordedEvents``.
"""

import logging
import threading
import time

from .models import EventType, MouseButton, MouseEvent, RecordedEvents

log = logging.getLogger(__name__)


class EventRecorder:
    def __init__(self, display_width, display_height, clock=time.monotonic, wall_clock=time.time):
        self.display_width  = display_width
        self.display_height = display_height
        self.running        = False
        self.paused         = False
        self._clock         = clock
        self._wall_clock    = wall_clock
        self._lock          = threading.Lock()
        self._events        = []
        self._t_start       = 0.0
        self._start_ms      = 0

    # ── Hook side ─────────────────────────────────────────────────
    def record(self, x, y, event_type=EventType.MOVE, button=MouseButton.LEFT):
        """Append one event; ignored unless recording and not paused."""
        with self._lock:
            if not self.running or self.paused:
                return False
            t_ms = int((self._clock() - self._t_start) * 1000)
            self._events.append(MouseEvent(t_ms, float(x), float(y), event_type, button))
            return True

    # ── Session control ───────────────────────────────────────────
    def start(self):
        with self._lock:
            self._events   = []
            self._t_start  = self._clock()
            self._start_ms = int(self._wall_clock() * 1000)
            self.running   = True
            self.paused    = False
        log.info("event recording started (%sx%s)", self.display_width, self.display_height)

    def pause(self):
        with self._lock:
            self.paused = True

    def resume(self):
        with self._lock:
            self.paused = False

    def event_count(self):
        with self._lock:
            return len(self._events)

    def stop(self):
        """End the session and hand over the finished log."""
        with self._lock:
            self.running = False
            events, self._events = tuple(self._events), []
            start_ms = self._start_ms
        log.info("event recording stopped: %d events", len(events))
        return RecordedEvents(
            mouse_events=events,
            recording_start_ms=start_ms,
            display_width=float(self.display_width),
            display_height=float(self.display_height),
        )
