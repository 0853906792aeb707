from __future__ import annotations


class RestTimer:
    """Whole-second rest countdown.

    The timer is advisory display state: it is either idle or counting down
    from an armed value.  Something outside the session (normally a Kivy
    ``Clock`` interval event owned by the active screen) calls :meth:`tick`
    once per second.  Reaching zero returns the timer to idle.
    """

    def __init__(self) -> None:
        self.remaining: int = 0
        self.duration: int = 0

    @property
    def active(self) -> bool:
        return self.remaining > 0

    def arm(self, seconds: int) -> None:
        """Start counting down from ``seconds``."""

        seconds = max(0, int(seconds))
        self.duration = seconds
        self.remaining = seconds

    def tick(self, seconds: int = 1) -> int:
        """Advance the countdown and return the seconds left."""

        if self.remaining > 0:
            self.remaining = max(0, self.remaining - int(seconds))
            if self.remaining == 0:
                self.duration = 0
        return self.remaining

    def adjust(self, seconds: int) -> int:
        """Lengthen (or shorten, when negative) a running countdown."""

        if not self.active:
            return 0
        self.remaining = max(0, self.remaining + int(seconds))
        self.duration = max(self.duration, self.remaining)
        if self.remaining == 0:
            self.duration = 0
        return self.remaining

    def cancel(self) -> None:
        self.remaining = 0
        self.duration = 0

    def progress(self) -> float:
        """Return the elapsed fraction of the current countdown (0.0 - 1.0)."""

        if not self.duration:
            return 0.0
        return (self.duration - self.remaining) / self.duration
