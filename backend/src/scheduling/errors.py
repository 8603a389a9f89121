"""Errors raised when planning reminders or calendar events.

Messages are meant to be shown to the user as-is.
"""


class SchedulingError(Exception):
    """Base class for reminder and calendar errors."""

    message = "Scheduling failed."

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)


class NotAuthorized(SchedulingError):
    message = "Access not authorized. Enable it in Settings > CinéLyon."


class InvalidDate(SchedulingError):
    message = "Invalid showtime date."


class PastDate(SchedulingError):
    message = "Cannot schedule a reminder for a past date."


class EventNotFound(SchedulingError):
    message = "Event not found in the calendar."
