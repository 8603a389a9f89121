"""
Derived views over a catalog.
Pure functions: nothing here mutates the catalog it reads.
"""

from dataclasses import dataclass
from datetime import date, datetime
from zoneinfo import ZoneInfo

from models import CATALOG_TIMEZONE, Catalog, Movie, to_catalog_date

# Number of movies shown by the home-screen widget
WIDGET_MOVIE_COUNT = 3


@dataclass(frozen=True)
class MovieFilter:
    """Optional predicates, AND-combined. None means no constraint."""

    genre: str | None = None
    director: str | None = None
    min_rating: float | None = None
    year: str | None = None
    cinema: str | None = None
    is_rerelease: bool | None = None

    def matches(self, movie: Movie, today: date | None = None) -> bool:
        if self.genre is not None:
            genre = self.genre.lower()
            if not any(g.lower() == genre for g in movie.genre_list):
                return False

        if self.director is not None and self.director.lower() not in movie.director.lower():
            return False

        if self.min_rating is not None and movie.rating_value < self.min_rating:
            return False

        if self.year is not None and movie.release_year != self.year:
            return False

        if self.cinema is not None:
            cinema = self.cinema.lower()
            if not any(cinema in name.lower() for name in movie.showtimes):
                return False

        if self.is_rerelease is not None and movie.is_rerelease(today) != self.is_rerelease:
            return False

        return True


def deduplicated_movies(catalog: Catalog | None) -> list[Movie]:
    """All movies in day order, keeping the first occurrence of each identity."""
    if catalog is None:
        return []

    seen = set()
    movies = []
    for day in catalog.days:
        for movie in day.movies:
            if movie.id in seen:
                continue
            seen.add(movie.id)
            movies.append(movie)
    return movies


def movies_for_date(
    catalog: Catalog | None,
    when: date | datetime | str,
    tz: ZoneInfo = CATALOG_TIMEZONE,
) -> list[Movie]:
    """Movies programmed on ``when``; empty if the catalog has no such day."""
    if catalog is None:
        return []

    try:
        key = to_catalog_date(when, tz).isoformat()
    except ValueError:
        return []

    for day in catalog.days:
        if day.date_key == key:
            return list(day.movies)
    return []


def dates_with_showtimes(catalog: Catalog | None) -> set[str]:
    if catalog is None:
        return set()
    return {day.date_key for day in catalog.days if day.movies}


def search(catalog: Catalog | None, query: str) -> list[Movie]:
    """Case-insensitive match on title, director or genres."""
    movies = deduplicated_movies(catalog)
    if not query:
        return movies

    query = query.lower()
    return [
        movie
        for movie in movies
        if query in movie.title.lower()
        or query in movie.director.lower()
        or query in movie.genres.lower()
    ]


def filter_movies(
    catalog: Catalog | None,
    criteria: MovieFilter | None = None,
    today: date | None = None,
) -> list[Movie]:
    movies = deduplicated_movies(catalog)
    if criteria is None:
        return movies
    return [movie for movie in movies if criteria.matches(movie, today)]


def top_movies(catalog: Catalog | None, limit: int = WIDGET_MOVIE_COUNT) -> list[Movie]:
    """Most wanted-to-see movies, ties kept in catalog order."""
    movies = sorted(deduplicated_movies(catalog), key=lambda m: m.want_to_see, reverse=True)
    return movies[:limit]
