"""
What closes an editor besides its own commands.

An editable editor saves when focus returns to the grid (click-away) and
asks to be saved before the page is left. A read-only editor just closes on
click-away. Either way the field leaves formula-editing mode when the
editor goes away.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable

from ..disposable import Disposable
from ..errors import report_failures
from ..models.column_model import ViewField

if TYPE_CHECKING:
    from .context import DocumentContext


class CleanupPolicy(ABC):
    """Wires external close triggers to an editor owned by `owner`.

    Every hook registered here is detached when `owner` is disposed.
    """

    @abstractmethod
    def setup(self, owner: Disposable, doc: "DocumentContext", field: ViewField) -> None:
        pass

    @staticmethod
    def _reset_formula_flag(owner: Disposable, field: ViewField) -> None:
        owner.on_dispose(lambda: field.editing_formula.set(False))


class EditableCleanup(CleanupPolicy):
    """Save on click-away; save before leaving the page."""

    def __init__(self, save: Callable[[], "asyncio.Future[Any]"]) -> None:
        self._save = save

    def setup(self, owner: Disposable, doc: "DocumentContext", field: ViewField) -> None:
        def save_on_focus() -> None:
            report_failures(self._save())

        async def save_before_leaving() -> None:
            # TODO: only register while the editor value differs from the cell;
            # an unchanged open editor currently counts as unsaved.
            await self._save()

        owner.auto_dispose(doc.host.clipboard_focus.add_listener(save_on_focus))
        owner.auto_dispose(doc.host.navigation_guard.register(save_before_leaving))
        self._reset_formula_flag(owner, field)


class ReadonlyCleanup(CleanupPolicy):
    """Cancel on click-away."""

    def __init__(self, cancel: Callable[[], None]) -> None:
        self._cancel = cancel

    def setup(self, owner: Disposable, doc: "DocumentContext", field: ViewField) -> None:
        owner.auto_dispose(doc.host.clipboard_focus.add_listener(self._cancel))
        self._reset_formula_flag(owner, field)


