"""Front-end execution context.

User actions and animation completions are delivered one at a time, in FIFO
order, on a single front-end thread. The autoplay timer thread marshals its
move step onto that same context instead of mutating shared state from its
own thread.

``SerialDispatcher`` is the threaded context used by running games;
``ImmediateDispatcher`` runs work inline on the caller's thread and is used
by tests and the CLI dry-run paths.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Protocol

logger = logging.getLogger(__name__)


class Dispatcher(Protocol):
    def submit(self, fn: Callable[..., Any], *args: Any) -> Future: ...

    def is_dispatch_thread(self) -> bool: ...

    def shutdown(self, wait: bool = True) -> None: ...


class SerialDispatcher:
    """Single worker thread executing submitted callables in FIFO order."""

    def __init__(self, name: str = "hanoi-frontend") -> None:
        self._name = name
        self._executor: ThreadPoolExecutor | None = ThreadPoolExecutor(
            max_workers=1,
            thread_name_prefix=name,
        )
        self._thread_ident: int | None = None
        self._lock = threading.Lock()
        # Record the worker identity so is_dispatch_thread() can answer.
        self._executor.submit(self._capture_thread).result()

    def _capture_thread(self) -> None:
        self._thread_ident = threading.get_ident()

    def submit(self, fn: Callable[..., Any], *args: Any) -> Future:
        with self._lock:
            if self._executor is None:
                raise RuntimeError(f"{self._name} dispatcher is shut down")
            return self._executor.submit(self._run, fn, *args)

    def _run(self, fn: Callable[..., Any], *args: Any) -> Any:
        try:
            return fn(*args)
        except Exception:
            logger.exception("Front-end task %r failed", fn)
            raise

    def is_dispatch_thread(self) -> bool:
        return threading.get_ident() == self._thread_ident

    def drain(self, timeout: float | None = None) -> None:
        """Block until everything submitted so far has run."""
        self.submit(lambda: None).result(timeout=timeout)

    def shutdown(self, wait: bool = True) -> None:
        with self._lock:
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=wait and not self.is_dispatch_thread())


class ImmediateDispatcher:
    """Runs each callable on the submitting thread."""

    def submit(self, fn: Callable[..., Any], *args: Any) -> Future:
        fut: Future = Future()
        try:
            fut.set_result(fn(*args))
        except Exception as exc:
            logger.exception("Inline task %r failed", fn)
            fut.set_exception(exc)
        return fut

    def is_dispatch_thread(self) -> bool:
        return True

    def drain(self, timeout: float | None = None) -> None:
        return None

    def shutdown(self, wait: bool = True) -> None:
        return None
