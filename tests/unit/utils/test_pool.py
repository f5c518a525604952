from __future__ import annotations

import threading
import time

import pytest

from launchkit.core.config.cache import clear_all_caches
from launchkit.core.exceptions import ConfigError, PoolShutdownError
from launchkit.core.utils.pool import WorkerPool, get_default_pool, reset_default_pool


def _wait_until(predicate, timeout: float = 5.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


def test_more_tasks_than_workers_all_complete() -> None:
    with WorkerPool(max_workers=2, idle_timeout=5.0, thread_name="t") as pool:
        futures = [pool.submit(lambda i=i: i * i) for i in range(50)]
        results = [f.result(timeout=10) for f in futures]

    assert results == [i * i for i in range(50)]


def test_thread_count_never_exceeds_max_workers() -> None:
    release = threading.Event()
    running = []
    lock = threading.Lock()

    def task():
        with lock:
            running.append(threading.current_thread().name)
        release.wait(5)

    pool = WorkerPool(max_workers=3, idle_timeout=5.0, thread_name="t")
    try:
        futures = [pool.submit(task) for _ in range(10)]
        assert _wait_until(lambda: len(running) >= 3)
        assert pool.thread_count == 3
        release.set()
        for f in futures:
            f.result(timeout=10)
    finally:
        release.set()
        pool.shutdown()


def test_concurrent_tasks_each_get_a_worker() -> None:
    # Two tasks that wait on each other deadlock unless both run at once.
    a_ready = threading.Event()
    b_ready = threading.Event()

    def a():
        a_ready.set()
        return b_ready.wait(5)

    def b():
        b_ready.set()
        return a_ready.wait(5)

    with WorkerPool(max_workers=2, idle_timeout=5.0, thread_name="t") as pool:
        fa = pool.submit(a)
        fb = pool.submit(b)
        assert fa.result(timeout=10) is True
        assert fb.result(timeout=10) is True


def test_future_carries_task_exception() -> None:
    def boom():
        raise ValueError("task failed")

    with WorkerPool(max_workers=1, idle_timeout=5.0, thread_name="t") as pool:
        future = pool.submit(boom)
        with pytest.raises(ValueError, match="task failed"):
            future.result(timeout=5)
        # The worker survives the failure.
        assert pool.submit(lambda: "still alive").result(timeout=5) == "still alive"


def test_workers_are_daemon_threads() -> None:
    with WorkerPool(max_workers=1, idle_timeout=5.0, thread_name="t") as pool:
        assert pool.submit(lambda: threading.current_thread().daemon).result(timeout=5) is True


def test_idle_workers_are_reclaimed_and_pool_recovers() -> None:
    pool = WorkerPool(max_workers=2, idle_timeout=0.1, thread_name="t")
    try:
        assert pool.submit(lambda: 1).result(timeout=5) == 1
        assert pool.submit(lambda: 2).result(timeout=5) == 2
        assert _wait_until(lambda: pool.thread_count == 0)

        assert pool.submit(lambda: 3).result(timeout=5) == 3
    finally:
        pool.shutdown()


def test_submit_after_shutdown_is_rejected() -> None:
    pool = WorkerPool(max_workers=1, idle_timeout=5.0, thread_name="t")
    pool.shutdown()

    with pytest.raises(PoolShutdownError):
        pool.submit(lambda: None)


def test_shutdown_drains_queued_work() -> None:
    pool = WorkerPool(max_workers=1, idle_timeout=5.0, thread_name="t")
    futures = [pool.submit(time.sleep, 0.01) for _ in range(5)]

    pool.shutdown(wait=True)

    assert all(f.done() for f in futures)
    assert pool.thread_count == 0


def test_invalid_size_is_rejected() -> None:
    with pytest.raises(ConfigError):
        WorkerPool(max_workers=0, idle_timeout=1.0, thread_name="t")


def test_pool_is_callable_like_submit() -> None:
    with WorkerPool(max_workers=1, idle_timeout=5.0, thread_name="t") as pool:
        assert pool(lambda x: x + 1, 41).result(timeout=5) == 42


def test_default_pool_reads_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LAUNCHKIT_launcher__thread__pool", "3")
    monkeypatch.setenv("LAUNCHKIT_launcher__thread__idle_timeout_seconds", "2.5")
    clear_all_caches()

    pool = get_default_pool()

    assert pool.max_workers == 3
    assert pool.idle_timeout == 2.5
    assert pool.thread_name.startswith("blocking task")
    assert get_default_pool() is pool


def test_default_pool_defaults_to_sixteen_workers() -> None:
    assert get_default_pool().max_workers == 16
    assert get_default_pool().idle_timeout == 30.0


def test_clearing_settings_cache_replaces_default_pool() -> None:
    first = get_default_pool()
    clear_all_caches()

    assert get_default_pool() is not first
    with pytest.raises(PoolShutdownError):
        first.submit(lambda: None)


def test_reset_default_pool_without_pool_is_noop() -> None:
    reset_default_pool()
    reset_default_pool()
