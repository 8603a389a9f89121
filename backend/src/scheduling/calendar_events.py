"""Calendar entries for showtimes, through a pluggable CalendarBackend."""

from datetime import date, datetime, timedelta
from typing import Protocol
from zoneinfo import ZoneInfo

from pydantic import BaseModel

from models import CATALOG_TIMEZONE, Movie, Showtime
from utils.logger import get_logger

from .errors import EventNotFound, InvalidDate, NotAuthorized

logger = get_logger(__name__)

ALARM_BEFORE = timedelta(hours=2)


class CalendarEvent(BaseModel):
    title: str
    location: str
    start: datetime
    end: datetime
    notes: str
    url: str | None = None
    alarm_offset: timedelta = -ALARM_BEFORE


class CalendarBackend(Protocol):
    def is_authorized(self) -> bool: ...

    def request_access(self) -> bool: ...

    def save(self, event: CalendarEvent) -> str: ...

    def remove(self, event_id: str) -> None: ...

    def exists(self, event_id: str) -> bool: ...


def build_event(movie: Movie, cinema: str, showtime: Showtime, start: datetime) -> CalendarEvent:
    notes = f"Movie: {movie.title}\n"
    notes += f"Director: {movie.director}\n"
    notes += f"Duration: {movie.duration}\n"
    notes += f"Format: {showtime.language}"
    if showtime.format:
        notes += f" {showtime.format}"
    if showtime.ticketing_url:
        notes += f"\n\nBook: {showtime.ticketing_url}"

    return CalendarEvent(
        title=f"🎬 {movie.title}",
        location=cinema,
        start=start,
        end=start + timedelta(minutes=movie.duration_minutes),
        notes=notes,
        url=movie.external_url or None,
    )


class CalendarService:
    """Adds showtimes to the user's calendar."""

    def __init__(self, backend: CalendarBackend, *, tz: ZoneInfo = CATALOG_TIMEZONE) -> None:
        self.backend = backend
        self.tz = tz

    def add_to_calendar(
        self, movie: Movie, cinema: str, showtime: Showtime, day: date | datetime
    ) -> str:
        """
        Create an event for a showtime.

        Returns:
            Backend identifier of the new event

        Raises:
            NotAuthorized: calendar access denied
            InvalidDate: showtime time cannot be parsed
        """
        if not self.backend.is_authorized() and not self.backend.request_access():
            raise NotAuthorized("Calendar access not authorized. Enable it in Settings > CinéLyon.")

        start = showtime.starts_at(day, self.tz)
        if start is None:
            raise InvalidDate()

        event_id = self.backend.save(build_event(movie, cinema, showtime, start))
        logger.info("Calendar event created", event_id=event_id, movie=movie.title, cinema=cinema)
        return event_id

    def remove_from_calendar(self, event_id: str) -> None:
        if not self.backend.exists(event_id):
            raise EventNotFound()
        self.backend.remove(event_id)

    def event_exists(self, event_id: str) -> bool:
        return self.backend.exists(event_id)
