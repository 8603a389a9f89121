"""
Local favorites storage (movies, cinemas, showtimes) in SQLite.
"""

import sqlite3
import uuid
from collections.abc import Callable, Iterable
from datetime import date, datetime, timezone
from pathlib import Path
from zoneinfo import ZoneInfo

from pydantic import BaseModel

from models import CATALOG_TIMEZONE, Movie, Showtime
from scheduling.errors import InvalidDate
from utils.logger import get_logger

logger = get_logger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS favorite_movies (
    movie_id TEXT PRIMARY KEY,
    title TEXT NOT NULL,
    poster_url TEXT,
    added_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS favorite_cinemas (
    name TEXT PRIMARY KEY,
    added_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS favorite_showtimes (
    id TEXT PRIMARY KEY,
    movie_id TEXT NOT NULL,
    movie_title TEXT NOT NULL,
    cinema TEXT NOT NULL,
    showtime_at TEXT NOT NULL,
    reminder_at TEXT,
    added_at TEXT NOT NULL
);
"""


class FavoriteShowtime(BaseModel):
    """A showtime saved by the user, optionally with a reminder."""

    id: str
    movie_id: str
    movie_title: str
    cinema: str
    showtime_at: datetime
    reminder_at: datetime | None = None
    added_at: datetime


class FavoritesStore:
    """Favorite movies, cinemas and showtimes for the device owner."""

    def __init__(
        self,
        db_path: str | Path,
        *,
        tz: ZoneInfo = CATALOG_TIMEZONE,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self.db_path = str(db_path)
        if self.db_path != ":memory:":
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        self.tz = tz
        self._clock = clock
        self.conn = sqlite3.connect(self.db_path)
        self.conn.executescript(SCHEMA)
        self.conn.commit()

    def close(self) -> None:
        self.conn.close()

    def _now(self) -> str:
        return self._clock().isoformat()

    # ----------------- MOVIES -----------------

    def add_movie(self, movie: Movie) -> None:
        """Mark a movie as favorite; adding it twice keeps the first entry."""
        self.conn.execute(
            """
            INSERT OR IGNORE INTO favorite_movies (movie_id, title, poster_url, added_at)
            VALUES (?, ?, ?, ?)
            """,
            (movie.id, movie.title, movie.poster_url, self._now()),
        )
        self.conn.commit()
        logger.debug("Favorite movie added", movie_id=movie.id)

    def remove_movie(self, movie_id: str) -> None:
        self.conn.execute("DELETE FROM favorite_movies WHERE movie_id = ?", (movie_id,))
        self.conn.commit()

    def is_movie_favorite(self, movie_id: str) -> bool:
        cur = self.conn.execute(
            "SELECT 1 FROM favorite_movies WHERE movie_id = ? LIMIT 1", (movie_id,)
        )
        return cur.fetchone() is not None

    def favorite_movie_ids(self) -> list[str]:
        """Favorite movie ids, most recently added first."""
        cur = self.conn.execute(
            "SELECT movie_id FROM favorite_movies ORDER BY added_at DESC, rowid DESC"
        )
        return [row[0] for row in cur.fetchall()]

    def toggle_movie(self, movie: Movie) -> bool:
        """Flip the favorite flag. Returns True if the movie is now a favorite."""
        if self.is_movie_favorite(movie.id):
            self.remove_movie(movie.id)
            return False
        self.add_movie(movie)
        return True

    def favorite_movies(self, movies: Iterable[Movie]) -> list[Movie]:
        ids = set(self.favorite_movie_ids())
        return [movie for movie in movies if movie.id in ids]

    # ----------------- CINEMAS -----------------

    def add_cinema(self, name: str) -> None:
        self.conn.execute(
            "INSERT OR IGNORE INTO favorite_cinemas (name, added_at) VALUES (?, ?)",
            (name, self._now()),
        )
        self.conn.commit()

    def remove_cinema(self, name: str) -> None:
        self.conn.execute("DELETE FROM favorite_cinemas WHERE name = ?", (name,))
        self.conn.commit()

    def is_cinema_favorite(self, name: str) -> bool:
        cur = self.conn.execute("SELECT 1 FROM favorite_cinemas WHERE name = ? LIMIT 1", (name,))
        return cur.fetchone() is not None

    def favorite_cinema_names(self) -> list[str]:
        cur = self.conn.execute(
            "SELECT name FROM favorite_cinemas ORDER BY added_at DESC, rowid DESC"
        )
        return [row[0] for row in cur.fetchall()]

    def toggle_cinema(self, name: str) -> bool:
        if self.is_cinema_favorite(name):
            self.remove_cinema(name)
            return False
        self.add_cinema(name)
        return True

    # ----------------- SHOWTIMES -----------------

    def add_showtime(
        self,
        movie: Movie,
        cinema: str,
        showtime: Showtime,
        day: date | datetime,
        reminder_at: datetime | None = None,
    ) -> str:
        """
        Save a showtime, optionally with the instant of its reminder.

        Returns:
            Id of the saved showtime

        Raises:
            InvalidDate: showtime time cannot be parsed
        """
        showtime_at = showtime.starts_at(day, self.tz)
        if showtime_at is None:
            raise InvalidDate()

        favorite_id = str(uuid.uuid4())
        self.conn.execute(
            """
            INSERT INTO favorite_showtimes (
                id, movie_id, movie_title, cinema,
                showtime_at, reminder_at, added_at
            )
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                favorite_id,
                movie.id,
                movie.title,
                cinema,
                showtime_at.isoformat(),
                reminder_at.isoformat() if reminder_at else None,
                self._now(),
            ),
        )
        self.conn.commit()
        logger.info("Favorite showtime added", id=favorite_id, movie_id=movie.id, cinema=cinema)
        return favorite_id

    def remove_showtime(self, favorite_id: str) -> None:
        self.conn.execute("DELETE FROM favorite_showtimes WHERE id = ?", (favorite_id,))
        self.conn.commit()

    def upcoming_showtimes(self, now: datetime | None = None) -> list[FavoriteShowtime]:
        """Saved showtimes not started yet, soonest first."""
        now = now or self._clock()
        cur = self.conn.execute(
            """
            SELECT id, movie_id, movie_title, cinema, showtime_at, reminder_at, added_at
            FROM favorite_showtimes
            """
        )
        showtimes = [
            FavoriteShowtime(
                id=row[0],
                movie_id=row[1],
                movie_title=row[2],
                cinema=row[3],
                showtime_at=datetime.fromisoformat(row[4]),
                reminder_at=datetime.fromisoformat(row[5]) if row[5] else None,
                added_at=datetime.fromisoformat(row[6]),
            )
            for row in cur.fetchall()
        ]
        upcoming = [s for s in showtimes if s.showtime_at >= now]
        return sorted(upcoming, key=lambda s: s.showtime_at)
