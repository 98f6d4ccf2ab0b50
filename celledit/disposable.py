"""
Ownership helpers for objects that hold resources until disposed.

A `Disposable` runs its registered cleanup callbacks exactly once, in
reverse order of registration. Disposal is idempotent and may be triggered
from inside one of the callbacks it ends up running.
"""

from typing import Any, Callable, Generic, List, Optional, TypeVar

from .config.logging_config import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class Disposable:
    """Base class for objects owning listeners, widgets and other resources."""

    def __init__(self) -> None:
        self._disposers: List[Callable[[], None]] = []
        self._disposed = False

    def on_dispose(self, callback: Callable[[], None]) -> None:
        """Run `callback` when this object is disposed."""
        if self._disposed:
            callback()
            return
        self._disposers.append(callback)

    def auto_dispose(self, obj: T) -> T:
        """Take ownership of `obj`; it is disposed together with this object.

        `obj` may be a Disposable, anything with a `dispose()` method, or a
        plain callable used as a detach function.
        """
        if hasattr(obj, "dispose"):
            self.on_dispose(obj.dispose)
        elif callable(obj):
            self.on_dispose(obj)
        else:
            raise TypeError(f"Cannot take ownership of {type(obj).__name__}")
        return obj

    def is_disposed(self) -> bool:
        return self._disposed

    def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        disposers, self._disposers = self._disposers, []
        for callback in reversed(disposers):
            try:
                callback()
            except Exception as e:
                logger.warning("Error while disposing", owner=type(self).__name__, error=str(e))


class Holder(Disposable, Generic[T]):
    """A single owned slot.

    Setting a new value disposes the previous occupant first. Reading an
    empty slot returns None.
    """

    def __init__(self) -> None:
        super().__init__()
        self._value: Optional[T] = None
        self.on_dispose(self.clear)

    def get(self) -> Optional[T]:
        return self._value

    def is_empty(self) -> bool:
        return self._value is None

    def clear(self) -> None:
        value, self._value = self._value, None
        _dispose_value(value)

    def set(self, value: T) -> T:
        if self._disposed:
            _dispose_value(value)
            raise RuntimeError("Cannot place a value into a disposed Holder")
        if value is not self._value:
            self.clear()
            self._value = value
        return value


def _dispose_value(value: Any) -> None:
    if value is not None and hasattr(value, "dispose"):
        value.dispose()
