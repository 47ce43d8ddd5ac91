"""Query cache: deduplicated, staleness-aware fetching with invalidation."""

import logging
import threading
import time
from collections.abc import Callable, Hashable, Iterable, Mapping
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar

from budgetbuddy.errors import AuthenticationError, is_retryable
from budgetbuddy.notifications import Notifier

logger = logging.getLogger(__name__)

T = TypeVar("T")
QueryKey = tuple[Hashable, ...]


def default_retry_delay(attempt: int) -> float:
    """Exponential backoff in seconds: 1, 2, 4 ... capped at 30."""
    return float(min(2 ** (attempt - 1), 30))


def as_key(key: Hashable | Iterable[Hashable]) -> QueryKey:
    """Turn "accounts" or ["transactions", id] into a tuple key."""
    if isinstance(key, tuple):
        return key
    if isinstance(key, str):
        return (key,)
    if isinstance(key, Iterable):
        return tuple(key)
    return (key,)


def key_matches(key: QueryKey, prefix: QueryKey) -> bool:
    """Whether ``prefix`` addresses ``key`` (("bills",) covers ("bills", "overdue"))."""
    return key[: len(prefix)] == prefix


@dataclass(frozen=True)
class QueryOptions:
    """Per-query cache policy.

    Attributes:
        stale_time: Seconds a result stays fresh; 0 refetches on every read
        retry: Extra attempts after a retryable failure; 0 disables retry
    """

    stale_time: float = 0.0
    retry: int = 3


class QueryStatus(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class QueryResult(Generic[T]):
    """Outcome of one query, for widgets that render their own state."""

    key: QueryKey
    status: QueryStatus
    data: T | None = None
    error: BaseException | None = None

    @property
    def is_success(self) -> bool:
        return self.status is QueryStatus.SUCCESS

    @property
    def is_error(self) -> bool:
        return self.status is QueryStatus.ERROR


@dataclass(frozen=True)
class QueryRequest:
    """A key with the call that fills it, as passed to fetch_many."""

    key: QueryKey
    fetcher: Callable[[], Any]
    options: QueryOptions = field(default_factory=QueryOptions)


@dataclass
class _Entry:
    options: QueryOptions
    fetcher: Callable[[], Any] | None = None
    data: Any = None
    error: BaseException | None = None
    updated_at: float | None = None
    invalidated: bool = False
    observers: int = 0
    in_flight: "Future[Any] | None" = None
    fetch_count: int = 0
    # Bumped by invalidate(); a fetch started under an older value never commits
    generation: int = 0


class QueryClient:
    """
    Cache of remote reads keyed by tuples.

    Usage:
        client = QueryClient()
        accounts = client.fetch(("accounts",), service.get_all, QueryOptions(retry=0))
        client.invalidate(("accounts",))

    Concurrent reads of one key share a single request. Results are served
    from cache while fresh. invalidate() marks keys stale and refetches the
    ones being watched.
    """

    def __init__(
        self,
        notifier: Notifier | None = None,
        clock: Callable[[], float] = time.monotonic,
        retry_delay: Callable[[int], float] = default_retry_delay,
        max_workers: int = 8,
    ) -> None:
        self.notifier = notifier or Notifier()
        self._clock = clock
        self._retry_delay = retry_delay
        self._max_workers = max_workers
        self._entries: dict[QueryKey, _Entry] = {}
        self._lock = threading.RLock()

    def _is_fresh(self, entry: _Entry) -> bool:
        if entry.updated_at is None or entry.invalidated or entry.error is not None:
            return False
        return self._clock() - entry.updated_at < entry.options.stale_time

    def fetch(
        self,
        key: Hashable | Iterable[Hashable],
        fetcher: Callable[[], T],
        options: QueryOptions | None = None,
    ) -> T:
        """Return cached data for key, or fetch it.

        Raises:
            Exception: Whatever the fetcher raised on its last attempt
        """
        query_key = as_key(key)
        options = options or QueryOptions()

        with self._lock:
            entry = self._entries.get(query_key)
            if entry is None:
                entry = _Entry(options=options)
                self._entries[query_key] = entry
            entry.fetcher = fetcher
            entry.options = options

            if self._is_fresh(entry):
                logger.debug("cache hit %s", query_key)
                return entry.data  # type: ignore[no-any-return]

            joined = entry.in_flight
            if joined is None:
                future: Future[Any] = Future()
                entry.in_flight = future
                generation = entry.generation

        if joined is not None:
            logger.debug("joining in-flight request %s", query_key)
            return joined.result()  # type: ignore[no-any-return]

        self._run(query_key, entry, fetcher, options, future, generation)
        return future.result()  # type: ignore[no-any-return]

    def _release(self, entry: _Entry, future: "Future[Any]") -> None:
        if entry.in_flight is future:
            entry.in_flight = None

    def _run(
        self,
        key: QueryKey,
        entry: _Entry,
        fetcher: Callable[[], Any],
        options: QueryOptions,
        future: "Future[Any]",
        generation: int,
    ) -> None:
        attempt = 0
        while True:
            try:
                data = fetcher()
            except Exception as e:
                if attempt < options.retry and is_retryable(e):
                    attempt += 1
                    delay = self._retry_delay(attempt)
                    logger.info("retrying %s (attempt %d) in %.1fs: %s", key, attempt, delay, e)
                    time.sleep(delay)
                    continue
                logger.debug("query %s failed: %s", key, e)
                with self._lock:
                    if entry.generation == generation:
                        entry.error = e
                    entry.fetch_count += 1
                    self._release(entry, future)
                future.set_exception(e)
                return

            with self._lock:
                if entry.generation == generation:
                    entry.data = data
                    entry.error = None
                    entry.updated_at = self._clock()
                    entry.invalidated = False
                else:
                    logger.debug("discarding result of %s fetched before invalidation", key)
                entry.fetch_count += 1
                self._release(entry, future)
            future.set_result(data)
            return

    def query(
        self,
        key: Hashable | Iterable[Hashable],
        fetcher: Callable[[], T],
        options: QueryOptions | None = None,
    ) -> QueryResult[T]:
        """Like fetch, but report failure in the result instead of raising."""
        query_key = as_key(key)
        try:
            data = self.fetch(query_key, fetcher, options)
        except Exception as e:
            return QueryResult(query_key, QueryStatus.ERROR, error=e)
        return QueryResult(query_key, QueryStatus.SUCCESS, data=data)

    def fetch_many(self, requests: Mapping[str, QueryRequest]) -> dict[str, QueryResult[Any]]:
        """Run independent queries concurrently.

        Each result carries its own status; one failing query does not
        affect the others.
        """
        if not requests:
            return {}
        workers = min(self._max_workers, len(requests))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = {
                name: pool.submit(self.query, req.key, req.fetcher, req.options)
                for name, req in requests.items()
            }
            return {name: future.result() for name, future in futures.items()}

    def watch(
        self,
        key: Hashable | Iterable[Hashable],
        fetcher: Callable[[], T],
        options: QueryOptions | None = None,
    ) -> QueryResult[T]:
        """Fetch and keep key refreshed on invalidation until unwatch()."""
        query_key = as_key(key)
        with self._lock:
            entry = self._entries.setdefault(query_key, _Entry(options=options or QueryOptions()))
            entry.observers += 1
        return self.query(query_key, fetcher, options)

    def unwatch(self, key: Hashable | Iterable[Hashable]) -> None:
        query_key = as_key(key)
        with self._lock:
            entry = self._entries.get(query_key)
            if entry is not None and entry.observers > 0:
                entry.observers -= 1

    def invalidate(self, prefix: Hashable | Iterable[Hashable]) -> list[QueryKey]:
        """Mark every key under prefix stale and refetch the watched ones.

        A read already running for a matched key still answers its own
        callers, but its result is not cached.

        Returns:
            The keys that were marked stale
        """
        query_prefix = as_key(prefix)
        with self._lock:
            matched = [key for key in self._entries if key_matches(key, query_prefix)]
            refetch: list[tuple[QueryKey, Callable[[], Any], QueryOptions]] = []
            for key in matched:
                entry = self._entries[key]
                entry.invalidated = True
                entry.generation += 1
                # Later reads must not join a request that predates the write
                entry.in_flight = None
                if entry.observers > 0 and entry.fetcher is not None:
                    refetch.append((key, entry.fetcher, entry.options))

        if matched:
            logger.debug("invalidated %s", matched)
        for key, fetcher, options in refetch:
            result = self.query(key, fetcher, options)
            if result.is_error:
                logger.warning("refetch of %s failed: %s", key, result.error)
        return matched

    def mutate(
        self,
        call: Callable[[], T],
        invalidates: Iterable[QueryKey] = (),
        success_message: str | None = None,
        error_message: str | None = None,
    ) -> T:
        """Run a write, then invalidate the keys it affects.

        Invalidation happens only after the write succeeded. Failures are
        notified with error_message and re-raised; a rejected token is not
        notified twice since the session already reported it.
        """
        try:
            result = call()
        except AuthenticationError:
            raise
        except Exception:
            if error_message:
                self.notifier.error(error_message)
            raise

        for prefix in invalidates:
            self.invalidate(prefix)
        if success_message:
            self.notifier.success(success_message)
        return result

    def get_data(self, key: Hashable | Iterable[Hashable]) -> Any:
        entry = self._entries.get(as_key(key))
        return entry.data if entry is not None else None

    def set_data(self, key: Hashable | Iterable[Hashable], data: Any) -> None:
        with self._lock:
            entry = self._entries.setdefault(as_key(key), _Entry(options=QueryOptions()))
            entry.data = data
            entry.error = None
            entry.updated_at = self._clock()
            entry.invalidated = False

    def is_stale(self, key: Hashable | Iterable[Hashable]) -> bool:
        entry = self._entries.get(as_key(key))
        return entry is None or not self._is_fresh(entry)

    def is_invalidated(self, key: Hashable | Iterable[Hashable]) -> bool:
        """Whether key was invalidated and not refetched since."""
        entry = self._entries.get(as_key(key))
        return entry is not None and entry.invalidated

    def fetch_count(self, key: Hashable | Iterable[Hashable]) -> int:
        """Number of completed fetches for key (cache hits not counted)."""
        entry = self._entries.get(as_key(key))
        return entry.fetch_count if entry is not None else 0

    def keys(self) -> list[QueryKey]:
        with self._lock:
            return list(self._entries)

    def clear(self) -> None:
        """Drop all cached data, e.g. after logout."""
        with self._lock:
            self._entries = {}
