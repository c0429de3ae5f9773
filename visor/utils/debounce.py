"""Debounce helpers that coalesce bursts of calls into one trailing call."""

from __future__ import annotations

import asyncio
import inspect
import logging
import threading
from collections.abc import Callable
from typing import Any, Protocol

LOG = logging.getLogger(__name__)


class _Cancellable(Protocol):
    def cancel(self) -> None: ...


class DebounceGate:
    """Wraps a callback so only the last call of a burst runs.

    Each call cancels the pending scheduled call and schedules a new one with
    the latest arguments after ``delay`` seconds. Inside a running event loop
    the call is scheduled with ``loop.call_later``; elsewhere a daemon
    ``threading.Timer`` is used. Coroutine functions are started as tasks
    when they fire.
    """

    def __init__(self, func: Callable[..., Any], delay: float = 0.15) -> None:
        self._func = func
        self._delay = delay
        self._lock = threading.Lock()
        self._handle: _Cancellable | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._pending_call: tuple[tuple[Any, ...], dict[str, Any]] | None = None
        self._generation = 0
        self._tasks: set[asyncio.Task[Any]] = set()
        self.__wrapped__ = func

    @property
    def delay(self) -> float:
        return self._delay

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._pending_call is not None

    def __call__(self, *args: Any, **kwargs: Any) -> None:
        with self._lock:
            if self._handle is not None:
                self._handle.cancel()
            self._pending_call = (args, kwargs)
            self._generation += 1
            generation = self._generation
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                timer = threading.Timer(self._delay, self._fire, args=(generation,))
                timer.daemon = True
                self._loop = None
                self._handle = timer
                timer.start()
            else:
                self._loop = loop
                self._handle = loop.call_later(self._delay, self._fire, generation)

    def cancel(self) -> None:
        """Drop the pending call, if any."""

        with self._lock:
            if self._handle is not None:
                self._handle.cancel()
            self._handle = None
            self._pending_call = None

    def flush(self) -> None:
        """Run the pending call immediately."""

        with self._lock:
            if self._handle is not None:
                self._handle.cancel()
            generation = self._generation
        self._fire(generation)

    def _fire(self, generation: int) -> None:
        with self._lock:
            # A timer cancelled too late must not run a newer call early.
            if generation != self._generation:
                return
            call = self._pending_call
            loop = self._loop
            self._pending_call = None
            self._handle = None
        if call is None:
            return
        args, kwargs = call
        if inspect.iscoroutinefunction(self._func) and loop is not None and loop.is_running():
            task = loop.create_task(self._func(*args, **kwargs))
            self._tasks.add(task)
            task.add_done_callback(self._task_done)
            return
        try:
            result = self._func(*args, **kwargs)
            if inspect.iscoroutine(result):
                asyncio.run(result)
        except Exception:
            LOG.exception("Debounced call to %r failed", self._func)

    def _task_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            LOG.error("Debounced call to %r failed", self._func, exc_info=exc)


def debounce(delay: float = 0.15) -> Callable[[Callable[..., Any]], DebounceGate]:
    """Decorator form of :class:`DebounceGate`."""

    def _decorate(func: Callable[..., Any]) -> DebounceGate:
        return DebounceGate(func, delay)

    return _decorate


__all__ = ["DebounceGate", "debounce"]
