from __future__ import annotations


class CalendarError(Exception):
    """Base class for calendar errors."""


class InvalidInput(CalendarError, ValueError):
    """The events argument itself is unusable."""


class InvalidEvent(CalendarError, ValueError):
    def __init__(self, index: int, reason: str) -> None:
        self.index = index
        self.reason = reason
        super().__init__(f"Invalid event at position {index}: {reason}")


class DataSourceUnavailable(CalendarError):
    pass
