"""
In-flight request tracking for search-as-you-type.

Every keystroke in a search box issues a request, and responses can
arrive out of order.  ``InFlightRequests`` keeps at most one live
request per key:

* submitting the same arguments again while the request is pending
  returns the pending future instead of issuing a new request;
* submitting different arguments supersedes the pending request.  It is
  cancelled if it has not started yet, otherwise its result is dropped
  when it arrives.

``on_result`` callbacks run on the worker thread, before the future
completes, and only for the latest request of a key.  Waiting on the
returned future therefore guarantees the state it feeds is up to date.
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Dict, Hashable, Optional, Tuple

logger = logging.getLogger(__name__)


class _Pending:
    __slots__ = ("args", "generation", "future")

    def __init__(self, args: Tuple[Any, ...], generation: int, future: Future) -> None:
        self.args = args
        self.generation = generation
        self.future = future


class InFlightRequests:
    """Per-key de-duplication and cancellation of background requests."""

    def __init__(self, executor: Optional[ThreadPoolExecutor] = None, max_workers: int = 4) -> None:
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="geojot-search"
        )
        self._lock = threading.RLock()
        self._pending: Dict[Hashable, _Pending] = {}
        self._generations: Dict[Hashable, int] = {}

    def submit(
        self,
        key: Hashable,
        fn: Callable[..., Any],
        *args: Any,
        on_result: Optional[Callable[[Any], None]] = None,
    ) -> Future:
        """Run ``fn(*args)`` in the background as the current request for ``key``.

        Returns the future of the request that will answer it: either a
        new one or the identical request already pending.
        """
        with self._lock:
            current = self._pending.get(key)
            if current is not None and current.args == args and not current.future.done():
                logger.debug("Reusing in-flight request for %r", key)
                return current.future
            if current is not None and not current.future.done():
                if current.future.cancel():
                    logger.debug("Cancelled queued request for %r", key)
                else:
                    logger.debug("Superseding running request for %r", key)
            generation = self._generations.get(key, 0) + 1
            self._generations[key] = generation
            future = self._executor.submit(self._run, key, generation, fn, args, on_result)
            self._pending[key] = _Pending(args, generation, future)
            return future

    def is_current(self, key: Hashable, generation: int) -> bool:
        with self._lock:
            return self._generations.get(key) == generation

    def pending(self, key: Hashable) -> bool:
        """Whether the latest request for ``key`` is still running."""
        with self._lock:
            current = self._pending.get(key)
            return current is not None and not current.future.done()

    def cancel(self, key: Hashable) -> None:
        """Drop the request for ``key``; a running one finishes unobserved."""
        with self._lock:
            current = self._pending.pop(key, None)
            self._generations[key] = self._generations.get(key, 0) + 1
        if current is not None:
            current.future.cancel()

    def shutdown(self, wait: bool = True) -> None:
        with self._lock:
            keys = list(self._pending)
        for key in keys:
            self.cancel(key)
        if self._owns_executor:
            self._executor.shutdown(wait=wait)

    def _run(
        self,
        key: Hashable,
        generation: int,
        fn: Callable[..., Any],
        args: Tuple[Any, ...],
        on_result: Optional[Callable[[Any], None]],
    ) -> Any:
        result = fn(*args)
        with self._lock:
            if self._generations.get(key) != generation:
                logger.debug("Discarding stale result for %r", key)
                return result
            if on_result is not None:
                on_result(result)
        return result
