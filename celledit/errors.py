"""
Shared error-reporting sink.

Failures of asynchronous work started from command handlers (saves, error
detail fetches) end up here rather than propagating into the event loop.
The sink logs them and notifies subscribed listeners, which is how a UI
layer would surface them to the user.
"""

import asyncio
from typing import Any, Callable, List

from .config.logging_config import get_logger

logger = get_logger(__name__)

ErrorListener = Callable[[BaseException], None]


class ErrorReporter:
    """Collects and dispatches errors from asynchronous editor operations."""

    def __init__(self) -> None:
        self._listeners: List[ErrorListener] = []

    def add_listener(self, listener: ErrorListener) -> Callable[[], None]:
        """Subscribe to reported errors. Returns a function that unsubscribes."""
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)
        return remove

    def report(self, error: BaseException) -> None:
        logger.error("Editor operation failed", error=str(error),
                     error_type=type(error).__name__)
        for listener in list(self._listeners):
            try:
                listener(error)
            except Exception as e:
                logger.warning("Error listener failed", error=str(e))


_reporter = ErrorReporter()


def get_error_reporter() -> ErrorReporter:
    return _reporter


def report_error(error: BaseException) -> None:
    """Report an error to the shared sink."""
    _reporter.report(error)


def report_failures(future: "asyncio.Future") -> "asyncio.Future":
    """Arrange for a failure of `future` to be reported instead of raised.

    Returns the same future so callers may still chain on it.
    """
    def _on_done(fut: "asyncio.Future") -> None:
        if fut.cancelled():
            return
        error = fut.exception()
        if error is not None:
            report_error(error)

    future.add_done_callback(_on_done)
    return future


def on_success(future: "asyncio.Future", callback: Callable[[Any], None]) -> None:
    """Call `callback(result)` once `future` succeeds; report its failure otherwise."""
    def _on_done(fut: "asyncio.Future") -> None:
        if fut.cancelled():
            return
        error = fut.exception()
        if error is not None:
            report_error(error)
            return
        try:
            callback(fut.result())
        except Exception as e:
            report_error(e)

    future.add_done_callback(_on_done)
