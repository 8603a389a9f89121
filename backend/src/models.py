"""
Data models for CinéLyon.
Immutable Pydantic models mirroring the movies.json catalog, plus the
best-effort parsers behind their derived accessors.
"""

import re
from datetime import date, datetime
from zoneinfo import ZoneInfo

from pydantic import BaseModel, ConfigDict, Field, model_validator

CATALOG_TIMEZONE = ZoneInfo("Europe/Paris")

# Format tag used in showtime identity when the upstream omits one
STANDARD_FORMAT = "standard"

# Years between release and screening for a movie to count as a re-release
RERELEASE_AGE = 5


def compute_movie_id(title: str, release_year: str) -> str:
    """Identity of a movie across the catalog: title followed by release year."""
    return f"{title}{release_year}"


def parse_duration(duration: str | None) -> int:
    """
    Convert a duration string to minutes.

    Args:
        duration: Duration like '3h 17min', '45min' or '2h'

    Returns:
        Duration in minutes, 0 (or the parsed part) if malformed
    """
    if not duration:
        return 0

    hours = minutes = 0

    if match := re.search(r"(\d+)\s*h", duration):
        hours = int(match.group(1))

    if match := re.search(r"(\d+)\s*min", duration):
        minutes = int(match.group(1))

    return hours * 60 + minutes


def parse_rating(rating: str | None) -> float:
    """Numeric rating, 0.0 when the text is not a number."""
    if not rating:
        return 0.0
    try:
        return float(rating)
    except ValueError:
        return 0.0


def parse_year(year: str | None) -> int | None:
    if not year:
        return None
    try:
        return int(year)
    except ValueError:
        return None


def to_catalog_date(value: date | datetime | str, tz: ZoneInfo = CATALOG_TIMEZONE) -> date:
    """
    Canonical calendar day of ``value`` in the catalog time zone.

    Aware datetimes are converted into ``tz``; naive ones are taken as
    already expressed in it. Strings must be ``YYYY-MM-DD``.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(tz)
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


class Showtime(BaseModel):
    """One screening of a movie in a cinema."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    time: str  # Format: HH:MM
    language: str = Field(alias="lang")  # "VO" or "VF"
    format: str | None = None  # "3D", "IMAX", "4DX"...
    ticketing_url: str | None = None

    @property
    def id(self) -> str:
        return f"{self.time}-{self.language}-{self.format or STANDARD_FORMAT}"

    @property
    def display_text(self) -> str:
        """Showtime label, e.g. '20:30 - VF 3D'."""
        text = f"{self.time} - {self.language}"
        if self.format:
            text += f" {self.format}"
        return text

    def starts_at(
        self, day: date | datetime, tz: ZoneInfo = CATALOG_TIMEZONE
    ) -> datetime | None:
        """
        Absolute start of the screening on ``day`` in the catalog time zone.

        Returns None when ``time`` is not exactly two integer parts forming
        a valid 24-hour clock time.
        """
        match = re.fullmatch(r"(\d+):(\d+)", self.time, re.ASCII)
        if match is None:
            return None

        hour, minute = int(match.group(1)), int(match.group(2))
        day = to_catalog_date(day, tz)
        try:
            return datetime(day.year, day.month, day.day, hour, minute, tzinfo=tz)
        except ValueError:
            return None


class Movie(BaseModel):
    """A movie and its showtimes per cinema, for one day of the catalog."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    title: str
    release_year: str
    duration: str = Field(alias="duree")
    rating: str
    genres: str
    director: str = Field(alias="realisateur")
    synopsis: str
    poster_url: str = Field(alias="affiche")
    want_to_see: int = Field(alias="wantToSee")
    external_url: str = Field(alias="url")
    showtimes: dict[str, list[Showtime]] = Field(alias="seances")

    @property
    def id(self) -> str:
        return compute_movie_id(self.title, self.release_year)

    @property
    def genre_list(self) -> list[str]:
        return [genre.strip() for genre in self.genres.split(",") if genre.strip()]

    @property
    def rating_value(self) -> float:
        return parse_rating(self.rating)

    @property
    def duration_minutes(self) -> int:
        return parse_duration(self.duration)

    @property
    def cinemas(self) -> list[str]:
        return sorted(self.showtimes)

    @property
    def total_showtimes(self) -> int:
        return sum(len(showtimes) for showtimes in self.showtimes.values())

    def is_rerelease(self, today: date | None = None) -> bool:
        """Old movie programmed again: released at least five years ago."""
        year = parse_year(self.release_year)
        if year is None:
            return False
        current_year = (today or date.today()).year
        return current_year - year >= RERELEASE_AGE

    def __eq__(self, other):
        if not isinstance(other, Movie):
            return NotImplemented
        return self.id == other.id

    def __hash__(self):
        return hash(self.id)


class ScheduleDay(BaseModel):
    """Movies programmed on one calendar day."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    date_key: str = Field(alias="date")  # Format: YYYY-MM-DD
    movies: list[Movie]

    @property
    def day(self) -> date | None:
        try:
            return date.fromisoformat(self.date_key)
        except ValueError:
            return None

    def is_today(self, now: datetime | None = None, tz: ZoneInfo = CATALOG_TIMEZONE) -> bool:
        return self.day == to_catalog_date(now or datetime.now(tz), tz)

    def is_tomorrow(
        self, now: datetime | None = None, tz: ZoneInfo = CATALOG_TIMEZONE
    ) -> bool:
        day = self.day
        if day is None:
            return False
        return (day - to_catalog_date(now or datetime.now(tz), tz)).days == 1


class Catalog(BaseModel):
    """Root of the movies.json payload."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    generated_at: str
    days: list[ScheduleDay]

    @model_validator(mode="after")
    def unique_dates(self):
        seen = set()
        for day in self.days:
            if day.date_key in seen:
                raise ValueError(f"Duplicate schedule date: {day.date_key}")
            seen.add(day.date_key)
        return self

    @property
    def generated_at_datetime(self) -> datetime | None:
        try:
            return datetime.fromisoformat(self.generated_at)
        except ValueError:
            return None

    def to_json(self) -> str:
        """Canonical JSON form, same shape as the upstream payload."""
        return self.model_dump_json(by_alias=True, exclude_none=True)
