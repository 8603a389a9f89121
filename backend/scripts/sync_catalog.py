#!/usr/bin/env python3
"""
Synchronize the CinéLyon catalog and query it.
Usage: python sync_catalog.py [--search Q] [--date YYYY-MM-DD] [--genre G]
                              [--cinema C] [--top N] [--clear-cache]
"""
import argparse
import sys
from pathlib import Path
from zoneinfo import ZoneInfo

# Add src to path
sys.path.append(str(Path(__file__).resolve().parent.parent / "src"))

from catalog.cache_store import CatalogCacheStore
from catalog.coordinator import SyncCoordinator, SyncState
from catalog.fetcher import CatalogFetcher
from catalog.queries import MovieFilter
from config.settings import get_settings
from utils.logger import configure_logging, get_logger

logger = get_logger(__name__)


def build_coordinator() -> SyncCoordinator:
    """Wire the fetcher, cache store and coordinator from settings."""
    settings = get_settings()
    fetcher = CatalogFetcher(settings.catalog_url, timeout=settings.request_timeout)
    cache_store = CatalogCacheStore(settings.cache_path)
    return SyncCoordinator(fetcher, cache_store, tz=ZoneInfo(settings.catalog_timezone))


def print_movies(movies) -> None:
    for movie in movies:
        cinemas = ", ".join(movie.cinemas)
        print(f"  {movie.title} ({movie.release_year}) - {movie.duration} - {cinemas}")


def main() -> int:
    """Main entry point."""
    configure_logging()

    parser = argparse.ArgumentParser(description="Synchronize the CinéLyon catalog")
    parser.add_argument("--search", type=str, help="Search title, director or genre")
    parser.add_argument("--date", type=str, help="List movies for a day (YYYY-MM-DD)")
    parser.add_argument("--genre", type=str, help="Filter on a genre")
    parser.add_argument("--cinema", type=str, help="Filter on a cinema name")
    parser.add_argument("--top", type=int, help="Show the N most wanted movies")
    parser.add_argument("--clear-cache", action="store_true", help="Delete the local cache first")

    args = parser.parse_args()

    coordinator = build_coordinator()

    if args.clear_cache:
        coordinator.clear_cache()

    snapshot = coordinator.load()

    if snapshot.state is SyncState.FAILED:
        logger.error("Catalog unavailable", error=snapshot.error_message)
        print(snapshot.error_message)
        return 1

    if snapshot.notice:
        print(snapshot.notice)

    print(f"Catalog: {len(coordinator.all_movies)} movies, "
          f"{len(coordinator.dates_with_showtimes)} days with showtimes")

    if args.date:
        print(f"\nMovies on {args.date}:")
        print_movies(coordinator.movies_for_date(args.date))

    if args.search is not None:
        print(f"\nSearch '{args.search}':")
        print_movies(coordinator.search(args.search))

    if args.genre or args.cinema:
        print("\nFiltered:")
        print_movies(coordinator.filter(MovieFilter(genre=args.genre, cinema=args.cinema)))

    if args.top:
        print(f"\nTop {args.top}:")
        print_movies(coordinator.top_movies(args.top))

    return 0


if __name__ == "__main__":
    sys.exit(main())
