"""
Local reminders for showtimes.

The notification centre itself is platform code; it is reached through the
Notifier protocol so the planning rules can run and be tested anywhere.
"""

from collections.abc import Callable
from datetime import date, datetime, timedelta, timezone
from enum import Enum
from typing import Protocol
from zoneinfo import ZoneInfo

from pydantic import BaseModel

from models import CATALOG_TIMEZONE, Movie, Showtime
from utils.logger import get_logger

from .errors import InvalidDate, NotAuthorized, PastDate

logger = get_logger(__name__)

REMINDER_CATEGORY = "SHOWTIME_REMINDER"


class ReminderType(str, Enum):
    ONE_DAY = "1 day before"
    TWO_HOURS = "2 hours before"

    @property
    def offset(self) -> timedelta:
        if self is ReminderType.ONE_DAY:
            return timedelta(days=1)
        return timedelta(hours=2)


class ReminderRequest(BaseModel):
    """A pending local notification."""

    identifier: str
    title: str
    body: str
    fire_at: datetime
    category: str = REMINDER_CATEGORY
    payload: dict[str, str | float] = {}


class Notifier(Protocol):
    def is_authorized(self) -> bool: ...

    def request_authorization(self) -> bool: ...

    def add(self, request: ReminderRequest) -> None: ...

    def remove(self, identifiers: list[str]) -> None: ...

    def pending(self) -> list[ReminderRequest]: ...


def reminder_identifier(movie: Movie, cinema: str, showtime: Showtime, kind: ReminderType) -> str:
    return f"{movie.id}-{cinema}-{showtime.time}-{kind.value}".replace(" ", "_")


class ReminderService:
    """Plans and cancels showtime reminders."""

    def __init__(
        self,
        notifier: Notifier,
        *,
        tz: ZoneInfo = CATALOG_TIMEZONE,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self.notifier = notifier
        self.tz = tz
        self._clock = clock

    def _ensure_authorized(self) -> None:
        if self.notifier.is_authorized():
            return
        if not self.notifier.request_authorization():
            raise NotAuthorized("Notifications not authorized. Enable them in Settings > CinéLyon.")

    def schedule(
        self,
        movie: Movie,
        cinema: str,
        showtime: Showtime,
        day: date | datetime,
        kind: ReminderType,
    ) -> str:
        """
        Schedule a reminder ahead of a showtime.

        Returns:
            Identifier of the pending notification

        Raises:
            NotAuthorized: notifications denied
            InvalidDate: showtime time cannot be parsed
            PastDate: the reminder instant has already passed
        """
        self._ensure_authorized()

        starts_at = showtime.starts_at(day, self.tz)
        if starts_at is None:
            raise InvalidDate()

        fire_at = starts_at - kind.offset
        if fire_at <= self._clock():
            raise PastDate()

        identifier = reminder_identifier(movie, cinema, showtime, kind)
        request = ReminderRequest(
            identifier=identifier,
            title=f"🎬 Reminder: {movie.title}",
            body=f"{kind.value} • {showtime.time} at {cinema}",
            fire_at=fire_at,
            payload={
                "movieId": movie.id,
                "movieTitle": movie.title,
                "cinema": cinema,
                "showtimeDate": starts_at.timestamp(),
            },
        )
        self.notifier.add(request)

        logger.info("Reminder scheduled", identifier=identifier, fire_at=fire_at.isoformat())
        return identifier

    def cancel(self, identifier: str) -> None:
        self.notifier.remove([identifier])

    def cancel_all_for_movie(self, movie_id: str) -> list[str]:
        prefix = movie_id.replace(" ", "_") + "-"
        identifiers = [
            request.identifier
            for request in self.notifier.pending()
            if request.identifier.startswith(prefix)
        ]
        if identifiers:
            self.notifier.remove(identifiers)
        logger.info("Reminders cancelled", movie_id=movie_id, count=len(identifiers))
        return identifiers

    def exists(self, identifier: str) -> bool:
        return any(request.identifier == identifier for request in self.notifier.pending())
