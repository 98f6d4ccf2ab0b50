"""
Command tables of an open cell editor.

Two fixed variants exist: one for editable cells and one for read-only
cells. An edit session picks one when it opens and never changes it.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Dict, Optional

from ..errors import on_success, report_failures
from .commands import CommandHandler, CommandRouter, EditCommand

if TYPE_CHECKING:
    from .session import EditSession


class EditCommands(ABC):
    """Handlers for every EditCommand. Return True to let a command propagate."""

    def __init__(self, session: "EditSession", router: CommandRouter) -> None:
        self._session = session
        self._router = router

    def handlers(self) -> Dict[EditCommand, CommandHandler]:
        return {
            EditCommand.CONFIRM_HERE: self.confirm_here,
            EditCommand.CONFIRM_AND_ADVANCE: self.confirm_and_advance,
            EditCommand.CANCEL: self.cancel,
            EditCommand.PREV_FIELD: self.prev_field,
            EditCommand.NEXT_FIELD: self.next_field,
            EditCommand.ENTER_FORMULA_MODE: self.enter_formula_mode,
            EditCommand.EXIT_FORMULA_MODE: self.exit_formula_mode,
        }

    @abstractmethod
    def confirm_here(self) -> Optional[bool]:
        pass

    @abstractmethod
    def confirm_and_advance(self) -> Optional[bool]:
        pass

    def cancel(self) -> Optional[bool]:
        self._session.cancel()
        return None

    @abstractmethod
    def prev_field(self) -> Optional[bool]:
        pass

    @abstractmethod
    def next_field(self) -> Optional[bool]:
        pass

    @abstractmethod
    def enter_formula_mode(self) -> Optional[bool]:
        pass

    @abstractmethod
    def exit_formula_mode(self) -> Optional[bool]:
        pass


class EditableCommands(EditCommands):
    """Saving variant.

    Saving closes the editor and removes this table, so re-running a
    command afterwards reaches the table below (e.g. the grid moving its
    cursor).
    """

    def confirm_here(self) -> Optional[bool]:
        router = self._router

        def _after_save(jumped: bool) -> None:
            # Don't move the cursor if the row was re-sorted away from it,
            # or after saving a formula.
            if not jumped:
                router.run(EditCommand.CONFIRM_HERE)

        on_success(self._session.save(), _after_save)
        return None

    def confirm_and_advance(self) -> Optional[bool]:
        report_failures(self._session.save())
        return None

    def prev_field(self) -> Optional[bool]:
        self._save_then_run(EditCommand.PREV_FIELD)
        return None

    def next_field(self) -> Optional[bool]:
        self._save_then_run(EditCommand.NEXT_FIELD)
        return None

    def enter_formula_mode(self) -> Optional[bool]:
        return self._session.make_formula()

    def exit_formula_mode(self) -> Optional[bool]:
        return self._session.unmake_formula()

    def _save_then_run(self, command: EditCommand) -> None:
        router = self._router
        on_success(self._session.save(), lambda _jumped: router.run(command))


class ReadonlyCommands(EditCommands):
    """Non-saving variant: anything that would save closes the editor and
    lets the command through to the table below."""

    def confirm_here(self) -> Optional[bool]:
        self._session.cancel()
        return True

    def confirm_and_advance(self) -> Optional[bool]:
        self._session.cancel()
        return True

    def prev_field(self) -> Optional[bool]:
        self._session.cancel()
        return True

    def next_field(self) -> Optional[bool]:
        self._session.cancel()
        return True

    def enter_formula_mode(self) -> Optional[bool]:
        return True

    def exit_formula_mode(self) -> Optional[bool]:
        return True
