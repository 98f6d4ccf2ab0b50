"""
The application surface an editor lives in: focus events, the page-leave
guard and the tooltip that offers formula conversion.
"""

from typing import Awaitable, Callable, List, Optional

from ..config.logging_config import get_logger
from ..disposable import Disposable
from ..errors import report_error
from ..observable import Emitter

logger = get_logger(__name__)

LeaveCheck = Callable[[], Awaitable[None]]


class _GuardRegistration(Disposable):
    def __init__(self, guard: "NavigationGuard", check: LeaveCheck) -> None:
        super().__init__()
        self.check = check
        self.on_dispose(lambda: guard._remove(self))


class NavigationGuard:
    """Protects against leaving the page while something is unsaved.

    Each registration is an async callback that makes it safe to leave,
    typically by saving.
    """

    def __init__(self) -> None:
        self._registrations: List[_GuardRegistration] = []

    def register(self, check: LeaveCheck) -> Disposable:
        registration = _GuardRegistration(self, check)
        self._registrations.append(registration)
        return registration

    def has_unsaved_changes(self) -> bool:
        return bool(self._registrations)

    async def confirm_leave(self) -> bool:
        """Run all callbacks. Returns False if any of them failed."""
        ok = True
        for registration in list(self._registrations):
            try:
                await registration.check()
            except Exception as e:
                report_error(e)
                ok = False
        return ok

    def _remove(self, registration: _GuardRegistration) -> None:
        if registration in self._registrations:
            self._registrations.remove(registration)


class FormulaConversionOffer:
    """Tooltip offering to turn what was typed into a formula.

    Only one offer is shown at a time; `accept()` runs the callback of the
    current one and closes it.
    """

    def __init__(self) -> None:
        self.anchor = None
        self._on_accept: Optional[Callable[[], None]] = None

    def show(self, anchor, on_accept: Callable[[], None]) -> None:
        self.anchor = anchor
        self._on_accept = on_accept

    @property
    def is_shown(self) -> bool:
        return self._on_accept is not None

    def accept(self) -> bool:
        on_accept, self._on_accept = self._on_accept, None
        self.anchor = None
        if on_accept is None:
            return False
        on_accept()
        return True

    def close(self, on_accept: Optional[Callable[[], None]] = None) -> None:
        """Close the offer. Given `on_accept`, only if it is that callback's offer."""
        if on_accept is not None and self._on_accept != on_accept:
            return
        self._on_accept = None
        self.anchor = None


class AppHost:
    """Application-wide hooks an editor registers with."""

    def __init__(self) -> None:
        # Fired when focus returns to the grid's clipboard element (click-away)
        self.clipboard_focus = Emitter()
        self.navigation_guard = NavigationGuard()
        self.formula_offer = FormulaConversionOffer()

    def focus_clipboard(self) -> None:
        logger.debug("Focus returned to clipboard")
        self.clipboard_focus.emit()
