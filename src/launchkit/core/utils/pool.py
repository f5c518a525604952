"""Bounded, elastic thread pool for blocking background I/O.

Worker threads are started on demand up to ``max_workers`` and leave after
``idle_timeout`` seconds without work, so an unused pool holds no threads.
All workers are daemon threads: they never keep the interpreter alive.

The work queue is unbounded. ``submit`` never blocks; under sustained
overload the queue grows instead of rejecting work.
"""
from __future__ import annotations

import itertools
import logging
import threading
from collections import deque
from concurrent.futures import Future
from typing import Any, Callable, Deque, Optional, Set

from launchkit.core.exceptions import ConfigError, PoolShutdownError

logger = logging.getLogger(__name__)

_pool_ids = itertools.count(1)


class _WorkItem:
    def __init__(self, future: Future, fn: Callable[..., Any], args: tuple, kwargs: dict) -> None:
        self.future = future
        self.fn = fn
        self.args = args
        self.kwargs = kwargs

    def run(self) -> None:
        if not self.future.set_running_or_notify_cancel():
            return
        try:
            result = self.fn(*self.args, **self.kwargs)
        except BaseException as exc:
            self.future.set_exception(exc)
        else:
            self.future.set_result(result)


class WorkerPool:
    """Thread pool with lazily started, self-reclaiming daemon workers.

    Args:
        max_workers: Upper bound on worker threads. Defaults to the
            ``launcher.thread.pool`` setting (16).
        idle_timeout: Seconds an idle worker waits before exiting. Defaults
            to ``launcher.thread.idle_timeout_seconds`` (30).
        thread_name: Prefix for worker thread names.

    Raises:
        ConfigError: If ``max_workers`` is less than 1.
    """

    def __init__(
        self,
        max_workers: Optional[int] = None,
        idle_timeout: Optional[float] = None,
        thread_name: Optional[str] = None,
    ) -> None:
        if max_workers is None or idle_timeout is None or thread_name is None:
            from launchkit.core.config.domains.threads import ThreadsConfig

            cfg = ThreadsConfig()
            max_workers = cfg.pool_size if max_workers is None else max_workers
            idle_timeout = cfg.idle_timeout_seconds if idle_timeout is None else idle_timeout
            thread_name = cfg.thread_name if thread_name is None else thread_name

        if max_workers < 1:
            raise ConfigError(
                f"max_workers must be at least 1, got {max_workers}",
                context={"max_workers": max_workers},
            )

        self.max_workers = int(max_workers)
        self.idle_timeout = float(idle_timeout)
        self.thread_name = f"{thread_name}-{next(_pool_ids)}"

        self._work: Deque[_WorkItem] = deque()
        self._cond = threading.Condition()
        self._threads: Set[threading.Thread] = set()
        self._thread_ids = itertools.count(1)
        # Workers blocked waiting for work, and threads started but not yet waiting.
        self._idle_workers = 0
        self._starting_workers = 0
        self._shutdown = False

    @property
    def thread_count(self) -> int:
        """Number of live worker threads."""
        with self._cond:
            return len(self._threads)

    @property
    def is_shutdown(self) -> bool:
        with self._cond:
            return self._shutdown

    def submit(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Future:
        """Queue ``fn(*args, **kwargs)`` and return its future.

        The future is the task's result/error channel: exceptions raised by
        ``fn`` are stored on it, never raised in the worker.

        Raises:
            PoolShutdownError: If the pool has been shut down.
        """
        with self._cond:
            if self._shutdown:
                raise PoolShutdownError(
                    "cannot submit to a pool that has been shut down",
                    context={"pool": self.thread_name},
                )
            future: Future = Future()
            self._work.append(_WorkItem(future, fn, args, kwargs))
            self._adjust_thread_count()
            self._cond.notify()
        return future

    def __call__(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Future:
        return self.submit(fn, *args, **kwargs)

    def _adjust_thread_count(self) -> None:
        # Caller holds self._cond. Every queued item needs a worker that is
        # either waiting or about to wait.
        if len(self._work) <= self._idle_workers + self._starting_workers:
            return
        if len(self._threads) >= self.max_workers:
            return
        t = threading.Thread(
            target=self._worker,
            name=f"{self.thread_name}-{next(self._thread_ids)}",
            daemon=True,
        )
        self._threads.add(t)
        self._starting_workers += 1
        t.start()

    def _next_item(self, current: threading.Thread) -> Optional[_WorkItem]:
        with self._cond:
            while not self._work and not self._shutdown:
                self._idle_workers += 1
                try:
                    notified = self._cond.wait(self.idle_timeout)
                finally:
                    self._idle_workers -= 1
                if not notified and not self._work and not self._shutdown:
                    self._threads.discard(current)
                    logger.debug("Worker %s idle for %.1fs, exiting", current.name, self.idle_timeout)
                    return None
            if not self._work:
                self._threads.discard(current)
                return None
            return self._work.popleft()

    def _worker(self) -> None:
        current = threading.current_thread()
        with self._cond:
            self._starting_workers -= 1
        while True:
            item = self._next_item(current)
            if item is None:
                return
            item.run()
            del item

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting work; workers exit once the queue is drained.

        Args:
            wait: Block until every worker thread has exited.
        """
        with self._cond:
            self._shutdown = True
            threads = list(self._threads)
            self._cond.notify_all()
        if wait:
            for t in threads:
                if t is not threading.current_thread():
                    t.join()

    def __enter__(self) -> "WorkerPool":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.shutdown(wait=True)


_default_pool: Optional[WorkerPool] = None
_default_pool_lock = threading.Lock()


def get_default_pool() -> WorkerPool:
    """Return the process-wide pool, building it from settings on first use."""
    global _default_pool
    with _default_pool_lock:
        if _default_pool is None:
            _default_pool = WorkerPool()
            logger.debug(
                "Created default worker pool %s (max_workers=%d)",
                _default_pool.thread_name,
                _default_pool.max_workers,
            )
        return _default_pool


def reset_default_pool() -> None:
    """Drop the process-wide pool; the next caller builds a fresh one.

    The old pool is shut down without waiting; queued work still runs.
    """
    global _default_pool
    with _default_pool_lock:
        pool, _default_pool = _default_pool, None
    if pool is not None:
        pool.shutdown(wait=False)


def _register_cache_clearer() -> None:
    from launchkit.core.config.cache import register_cache_clearer

    register_cache_clearer("worker_pool", reset_default_pool)


_register_cache_clearer()


__all__ = ["WorkerPool", "get_default_pool", "reset_default_pool"]
