from __future__ import annotations

"""Subprocess spawning with background stream redirection.

This module provides:
- ``start_process``: spawn a child and wire its standard streams to caller
  streams through worker pool tasks
- ``system``: run a child to completion, capturing stdout/stderr in memory
- ``launch``: the non-blocking form, reporting through a callback
- No shell=True (commands are argument vectors)

Redirection tasks are fire-and-forget. Their failures (a child that exits
without reading its input, a caller stream that rejects writes) are kept on
the task futures and logged at debug level; the exit code is the
authoritative result. ``system`` and ``launch`` wait for output to drain
after the child exits, but only for ``launcher.io.drain_timeout_seconds``:
a background grandchild that inherited the pipes can keep them open long
after the child is gone.

Each child uses up to four pool threads at once (three streams plus the
exit wait). A pool smaller than that can starve a child of its own
redirection tasks.
"""

import io
import logging
import shlex
import subprocess
from concurrent.futures import Future, wait as wait_futures
from pathlib import Path
from typing import IO, Any, Callable, Dict, List, MutableMapping, NamedTuple, Optional, Sequence, Union

from launchkit.core.exceptions import PoolShutdownError, ProcessSpawnError
from launchkit.core.utils.io import copy, using
from launchkit.core.utils.pool import WorkerPool, get_default_pool

logger = logging.getLogger(__name__)

StdinSource = Union[bytes, bytearray, memoryview, IO[bytes]]
ExitCallback = Callable[[int], Any]
CompletionCallback = Callable[[int, bytes, bytes], Any]


class ProcessResult(NamedTuple):
    """Outcome of a finished child: ``(exit_code, stdout, stderr)``."""

    exit_code: int
    stdout: bytes
    stderr: bytes


def _flatten_cmd(cmd: Any) -> List[str]:
    if isinstance(cmd, (list, tuple)):
        return [str(p) for p in cmd]
    return shlex.split(str(cmd))


def _to_cwd(cwd: Optional[Path | str]) -> Optional[str]:
    """Convert Path or str cwd to str for subprocess."""
    if cwd is None:
        return None
    return str(cwd)


def _feed(source: IO[bytes], pipe: IO[bytes]) -> int:
    return using(pipe, lambda p: copy(source, p))


def _drain(pipe: IO[bytes], target: IO[bytes]) -> int:
    return using(pipe, lambda p: copy(p, target))


def _drain_timeout(drain_timeout: Optional[float]) -> float:
    if drain_timeout is not None:
        return drain_timeout
    from launchkit.core.config.domains.io import IOConfig

    return IOConfig().drain_timeout_seconds


def _abandon(process: subprocess.Popen) -> None:
    """Kill a child nobody will redirect, then release its pipes."""
    process.kill()
    process.wait()
    for pipe in (process.stdin, process.stdout, process.stderr):
        if pipe is None:
            continue
        try:
            pipe.close()
        except OSError as exc:
            logger.debug("Failed to close pipe of abandoned pid %s: %s", process.pid, exc)


class ProcessHandle:
    """A running child plus the pool tasks redirecting its streams.

    Attributes:
        process: The underlying ``subprocess.Popen``.
        argv: The argument vector the child was started with.
        redirections: Futures of the redirection tasks, keyed by stream
            name (``"stdin"``, ``"stdout"``, ``"stderr"``). Each holds the
            number of bytes copied or the error that stopped the copy.
        exit_future: Future of the completion task registered by
            :func:`launch`, if any.
    """

    def __init__(self, process: subprocess.Popen, argv: Sequence[str], pool: WorkerPool) -> None:
        self.process = process
        self.argv = list(argv)
        self.redirections: Dict[str, Future] = {}
        self.exit_future: Optional[Future] = None
        self._pool = pool

    def __repr__(self) -> str:
        return f"ProcessHandle(pid={self.pid}, argv={self.argv!r})"

    @property
    def pid(self) -> int:
        return self.process.pid

    @property
    def returncode(self) -> Optional[int]:
        """Exit code, or None while the child is running."""
        return self.process.poll()

    def wait(self) -> int:
        """Block until the child exits and return its exit code."""
        return self.process.wait()

    def on_exit(self, callback: ExitCallback) -> Future:
        """Run ``callback(exit_code)`` on a pool thread once the child exits.

        Redirection tasks are not joined first: output may still be flowing
        when the callback runs.
        """

        def _wait_then_notify() -> Any:
            return callback(self.process.wait())

        return self._pool.submit(_wait_then_notify)

    def wait_redirections(self, timeout: Optional[float] = None) -> Dict[str, BaseException]:
        """Wait for the redirection tasks and return their errors by stream."""
        wait_futures(list(self.redirections.values()), timeout=timeout)
        return self.redirection_errors()

    def redirection_errors(self) -> Dict[str, BaseException]:
        """Errors of the redirection tasks that have finished so far."""
        errors: Dict[str, BaseException] = {}
        for name, future in self.redirections.items():
            if future.done() and not future.cancelled():
                exc = future.exception()
                if exc is not None:
                    errors[name] = exc
        return errors

    def _redirect(self, name: str, fn: Callable[..., int], *args: Any) -> None:
        future = self._pool.submit(fn, *args)
        future.add_done_callback(lambda f: self._log_discarded(name, f))
        self.redirections[name] = future

    def _log_discarded(self, name: str, future: Future) -> None:
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            logger.debug("Discarding %s redirection error for pid %s (%s): %s", name, self.pid, self.argv[0], exc)


def _join_redirections(handle: ProcessHandle, timeout: float) -> None:
    handle.wait_redirections(timeout)
    pending = [name for name, f in handle.redirections.items() if not f.done()]
    if pending:
        logger.debug(
            "pid %s (%s) exited but %s still open after %.1fs; returning captured output",
            handle.pid,
            handle.argv[0],
            ", ".join(pending),
            timeout,
        )


def start_process(
    command: Union[str, Sequence[str]],
    *,
    stdout: Optional[IO[bytes]] = None,
    stderr: Optional[IO[bytes]] = None,
    stdin: Optional[StdinSource] = None,
    cwd: Optional[Path | str] = None,
    env: Optional[MutableMapping[str, str]] = None,
    pool: Optional[WorkerPool] = None,
) -> ProcessHandle:
    """Spawn ``command`` and redirect its standard streams in the background.

    - ``stdin`` (bytes or a binary stream) is fed to the child, then the
      child's input is closed. Without it the child reads EOF at once.
    - ``stdout`` receives the child's output; without it output is discarded.
    - ``stderr`` receives the child's error output. When ``stderr is
      stdout`` the two are merged at OS level before spawning and a single
      task drains both; without it error output is discarded.

    Args:
        command: Argument vector, or a string split with :mod:`shlex`
            (never run through a shell).
        stdout: Binary stream receiving standard output
        stderr: Binary stream receiving standard error
        stdin: Bytes or binary stream to feed as standard input
        cwd: Working directory (Path or str)
        env: Environment variables
        pool: Worker pool for the redirection tasks (default pool if None)

    Returns:
        ProcessHandle for the running child

    Raises:
        ProcessSpawnError: If the child cannot be started.
        PoolShutdownError: If ``pool`` no longer accepts work. The child is
            then never started, or killed before this is raised.
    """
    argv = _flatten_cmd(command)
    if not argv:
        raise ProcessSpawnError("Cannot start an empty command", argv=argv)
    pool = pool or get_default_pool()
    if pool.is_shutdown:
        raise PoolShutdownError(
            f"Cannot start {argv[0]!r}: worker pool has been shut down",
            context={"pool": pool.thread_name, "argv": argv},
        )

    if isinstance(stdin, (bytes, bytearray, memoryview)):
        stdin = io.BytesIO(bytes(stdin))

    merge = stdout is stderr
    if merge and stdout is not None:
        stderr_mode = subprocess.STDOUT
    elif stderr is not None and not merge:
        stderr_mode = subprocess.PIPE
    else:
        stderr_mode = subprocess.DEVNULL

    try:
        process = subprocess.Popen(
            argv,
            cwd=_to_cwd(cwd),
            env=env,
            stdin=subprocess.PIPE if stdin is not None else subprocess.DEVNULL,
            stdout=subprocess.PIPE if stdout is not None else subprocess.DEVNULL,
            stderr=stderr_mode,
        )
    except OSError as exc:
        raise ProcessSpawnError(
            f"Failed to start {argv[0]!r}: {exc.strerror or exc}",
            argv=argv,
            errno=exc.errno,
            context={"cwd": _to_cwd(cwd)},
        ) from exc

    logger.debug("Started pid %s: %s", process.pid, argv)
    handle = ProcessHandle(process, argv, pool)

    try:
        if stdin is not None:
            handle._redirect("stdin", _feed, stdin, process.stdin)
        if stdout is not None:
            handle._redirect("stdout", _drain, process.stdout, stdout)
        if stderr is not None and not merge:
            handle._redirect("stderr", _drain, process.stderr, stderr)
    except PoolShutdownError:
        # Pool shut down after the check above; the child must not outlive it.
        _abandon(process)
        raise
    return handle


def system(
    command: Union[str, Sequence[str]],
    *,
    stdin: Optional[StdinSource] = None,
    cwd: Optional[Path | str] = None,
    env: Optional[MutableMapping[str, str]] = None,
    pool: Optional[WorkerPool] = None,
    drain_timeout: Optional[float] = None,
) -> ProcessResult:
    """Run ``command`` to completion and capture its output.

    Blocks the calling thread until the child exits, then waits up to
    ``drain_timeout`` seconds (default ``launcher.io.drain_timeout_seconds``)
    for its output to drain. Output still in flight after that is not
    included.

    Returns:
        ProcessResult: ``(exit_code, stdout, stderr)``

    Raises:
        ProcessSpawnError: If the child cannot be started.

    Example:
        >>> system(["echo", "hi"])
        ProcessResult(exit_code=0, stdout=b'hi\\n', stderr=b'')
    """
    out = io.BytesIO()
    err = io.BytesIO()
    handle = start_process(command, stdout=out, stderr=err, stdin=stdin, cwd=cwd, env=env, pool=pool)
    exit_code = handle.wait()
    _join_redirections(handle, _drain_timeout(drain_timeout))
    return ProcessResult(exit_code, out.getvalue(), err.getvalue())


def launch(
    command: Union[str, Sequence[str]],
    callback: CompletionCallback,
    *,
    stdin: Optional[StdinSource] = None,
    cwd: Optional[Path | str] = None,
    env: Optional[MutableMapping[str, str]] = None,
    pool: Optional[WorkerPool] = None,
    drain_timeout: Optional[float] = None,
) -> ProcessHandle:
    """Start ``command`` and return at once.

    ``callback(exit_code, stdout, stderr)`` runs on a pool thread after the
    child exits and its output has drained, or ``drain_timeout`` seconds
    later at most (see :func:`system`). An exception raised by the callback
    is stored on ``handle.exit_future`` and logged.

    Raises:
        ProcessSpawnError: If the child cannot be started.
    """
    out = io.BytesIO()
    err = io.BytesIO()
    handle = start_process(command, stdout=out, stderr=err, stdin=stdin, cwd=cwd, env=env, pool=pool)
    timeout = _drain_timeout(drain_timeout)

    def _complete(exit_code: int) -> Any:
        _join_redirections(handle, timeout)
        return callback(exit_code, out.getvalue(), err.getvalue())

    def _log_callback_failure(future: Future) -> None:
        exc = future.exception() if not future.cancelled() else None
        if exc is not None:
            logger.warning("Exit callback for pid %s (%s) failed: %s", handle.pid, handle.argv[0], exc)

    try:
        handle.exit_future = handle.on_exit(_complete)
    except PoolShutdownError:
        _abandon(handle.process)
        raise
    handle.exit_future.add_done_callback(_log_callback_failure)
    return handle


__all__ = [
    "ProcessHandle",
    "ProcessResult",
    "StdinSource",
    "ExitCallback",
    "CompletionCallback",
    "start_process",
    "system",
    "launch",
]
