"""
Event channels and observable values.

Delivery is synchronous and in subscription order. Late subscribers do not
see past events. Every subscription returns a `Listener` handle; disposing
it detaches the callback.
"""

from typing import Any, Callable, Generic, List, Optional, TypeVar

from .config.logging_config import get_logger
from .disposable import Disposable

logger = get_logger(__name__)

T = TypeVar("T")


class Listener(Disposable):
    """Handle for one subscription to an Emitter or Observable."""

    def __init__(self, emitter: "Emitter", callback: Callable[..., Any]) -> None:
        super().__init__()
        self.callback = callback
        self._emitter: Optional["Emitter"] = emitter
        self.on_dispose(self._detach)

    def _detach(self) -> None:
        if self._emitter is not None:
            self._emitter._remove(self)
            self._emitter = None


class Emitter(Disposable):
    """A typed event channel for one kind of event."""

    def __init__(self) -> None:
        super().__init__()
        self._listeners: List[Listener] = []
        self.on_dispose(self._listeners.clear)

    def add_listener(self, callback: Callable[..., Any]) -> Listener:
        listener = Listener(self, callback)
        if self._disposed:
            listener.dispose()
        else:
            self._listeners.append(listener)
        return listener

    def has_listeners(self) -> bool:
        return bool(self._listeners)

    def emit(self, *args: Any) -> None:
        # Listeners may unsubscribe (or dispose the emitter) while we iterate
        for listener in list(self._listeners):
            if listener.is_disposed():
                continue
            listener.callback(*args)

    def _remove(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)


class Observable(Emitter, Generic[T]):
    """A value that notifies listeners with (new_value, old_value) on change."""

    def __init__(self, value: T) -> None:
        super().__init__()
        self._value = value

    def get(self) -> T:
        return self._value

    def set(self, value: T) -> None:
        if value == self._value and type(value) is type(self._value):
            return
        prev, self._value = self._value, value
        self.emit(value, prev)
