"""
Catalog synchronization.

The coordinator owns the authoritative in-memory catalog. A load tries the
network first, stores the result in the cache, and falls back to the cached
snapshot when the fetch fails:

    IDLE -> LOADING -> READY_FRESH | READY_STALE | FAILED

Every transition is published to subscribers as an immutable SyncSnapshot.
"""

import threading
from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import date, datetime, timezone
from enum import Enum
from zoneinfo import ZoneInfo

from models import CATALOG_TIMEZONE, Catalog, Movie
from utils.logger import get_logger

from . import queries
from .cache_store import CatalogCacheStore
from .errors import CacheWriteError, FetchError
from .fetcher import CatalogFetcher
from .queries import MovieFilter

logger = get_logger(__name__)


class SyncState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY_FRESH = "ready_fresh"
    READY_STALE = "ready_stale"
    FAILED = "failed"


@dataclass(frozen=True)
class SyncSnapshot:
    """Observable state of the coordinator at one point in time."""

    state: SyncState = SyncState.IDLE
    catalog: Catalog | None = None
    last_updated: datetime | None = None
    notice: str | None = None
    error_message: str | None = None
    error: Exception | None = None

    @property
    def is_loading(self) -> bool:
        return self.state is SyncState.LOADING

    @property
    def is_ready(self) -> bool:
        return self.state in (SyncState.READY_FRESH, SyncState.READY_STALE)


Observer = Callable[[SyncSnapshot], None]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SyncCoordinator:
    """Network-first catalog loader with cache fallback."""

    def __init__(
        self,
        fetcher: CatalogFetcher,
        cache_store: CatalogCacheStore,
        *,
        tz: ZoneInfo = CATALOG_TIMEZONE,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.fetcher = fetcher
        self.cache_store = cache_store
        self.tz = tz
        self._clock = clock
        self._snapshot = SyncSnapshot()
        self._observers: list[Observer] = []
        self._lock = threading.Lock()
        self._inflight: threading.Event | None = None

    # State

    @property
    def snapshot(self) -> SyncSnapshot:
        return self._snapshot

    @property
    def state(self) -> SyncState:
        return self._snapshot.state

    @property
    def catalog(self) -> Catalog | None:
        return self._snapshot.catalog

    @property
    def last_updated(self) -> datetime | None:
        return self._snapshot.last_updated

    @property
    def notice(self) -> str | None:
        return self._snapshot.notice

    @property
    def error_message(self) -> str | None:
        return self._snapshot.error_message

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Register ``observer`` for state changes. Returns an unsubscribe callable."""
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def _publish(self, snapshot: SyncSnapshot) -> SyncSnapshot:
        self._snapshot = snapshot
        for observer in list(self._observers):
            try:
                observer(snapshot)
            except Exception:
                logger.exception("Observer failed", state=snapshot.state.value)
        return snapshot

    # Loading

    def load(self) -> SyncSnapshot:
        """
        Fetch the catalog, falling back to the cache.

        A call made while another load is running waits for it and returns
        its outcome instead of issuing a second request.
        """
        with self._lock:
            flight = self._inflight
            leader = flight is None
            if leader:
                flight = self._inflight = threading.Event()

        if not leader:
            logger.debug("Joining in-flight catalog load")
            flight.wait()
            return self._snapshot

        try:
            return self._load()
        except Exception as e:
            logger.exception("Catalog load failed", error=str(e))
            return self._publish(
                replace(
                    self._snapshot,
                    state=SyncState.FAILED,
                    error=e,
                    error_message=f"Unable to load movies: {e}",
                )
            )
        finally:
            with self._lock:
                self._inflight = None
            flight.set()

    def refresh(self) -> SyncSnapshot:
        return self.load()

    def _load(self) -> SyncSnapshot:
        self._publish(
            replace(
                self._snapshot,
                state=SyncState.LOADING,
                notice=None,
                error_message=None,
                error=None,
            )
        )

        try:
            catalog = self.fetcher.fetch()
        except FetchError as e:
            logger.warning("Catalog fetch failed", error=str(e), kind=type(e).__name__)
            return self._fall_back_to_cache(e)

        last_updated = catalog.generated_at_datetime or self._clock()

        try:
            self.cache_store.persist(catalog)
        except CacheWriteError as e:
            logger.warning("Failed to cache catalog", error=str(e))

        logger.info("Catalog ready", days=len(catalog.days), generated_at=catalog.generated_at)
        return self._publish(
            SyncSnapshot(
                state=SyncState.READY_FRESH,
                catalog=catalog,
                last_updated=last_updated,
            )
        )

    def _fall_back_to_cache(self, fetch_error: FetchError) -> SyncSnapshot:
        cached = self.cache_store.load()

        if cached is None:
            logger.error("No catalog available", error=str(fetch_error))
            return self._publish(
                replace(
                    self._snapshot,
                    state=SyncState.FAILED,
                    error=fetch_error,
                    error_message=f"Unable to load movies: {fetch_error}",
                )
            )

        logger.info("Using cached catalog", generated_at=cached.generated_at)
        return self._publish(
            SyncSnapshot(
                state=SyncState.READY_STALE,
                catalog=cached,
                last_updated=cached.generated_at_datetime,
                notice=f"Offline data (last updated: {cached.generated_at})",
                error=fetch_error,
            )
        )

    def clear_cache(self) -> None:
        self.cache_store.clear()

    # Queries

    @property
    def all_movies(self) -> list[Movie]:
        return queries.deduplicated_movies(self.catalog)

    @property
    def dates_with_showtimes(self) -> set[str]:
        return queries.dates_with_showtimes(self.catalog)

    def movies_for_date(self, when: date | datetime | str) -> list[Movie]:
        return queries.movies_for_date(self.catalog, when, self.tz)

    def search(self, query: str) -> list[Movie]:
        return queries.search(self.catalog, query)

    def filter(self, criteria: MovieFilter | None = None, **predicates) -> list[Movie]:
        """Filter the movie list, by a MovieFilter or keyword predicates."""
        if criteria is None:
            criteria = MovieFilter(**predicates)
        today = self._clock().astimezone(self.tz).date()
        return queries.filter_movies(self.catalog, criteria, today)

    def top_movies(self, limit: int = queries.WIDGET_MOVIE_COUNT) -> list[Movie]:
        return queries.top_movies(self.catalog, limit)
