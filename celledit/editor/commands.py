"""
Keyboard command routing.

Command tables are stacked: the most recently pushed table sees a command
first. A handler returning a truthy value lets the command continue down
the stack; returning None or False stops it. Disposing the handle returned
by `push` removes the table, so whatever table is below becomes active.
"""

from enum import Enum
from typing import Callable, Dict, List, Mapping, Optional, Union

from ..config.logging_config import get_logger
from ..disposable import Disposable
from ..exceptions import CommandError

logger = get_logger(__name__)

CommandHandler = Callable[[], Optional[bool]]


class EditCommand(str, Enum):
    """Commands that an active cell editor intercepts."""

    # Save; the grid's handler below moves the cursor down when it runs next
    CONFIRM_HERE = "confirm_here"
    CONFIRM_AND_ADVANCE = "confirm_and_advance"
    CANCEL = "cancel"
    PREV_FIELD = "prev_field"
    NEXT_FIELD = "next_field"
    # Typing "=" or backspace at the start of the text
    ENTER_FORMULA_MODE = "enter_formula_mode"
    EXIT_FORMULA_MODE = "exit_formula_mode"


CommandName = Union[EditCommand, str]


def _key(name: CommandName) -> str:
    return name.value if isinstance(name, EditCommand) else name


class CommandGroup(Disposable):
    """A table of handlers pushed onto a CommandRouter."""

    def __init__(self, router: "CommandRouter", handlers: Mapping[CommandName, CommandHandler]):
        super().__init__()
        self._router = router
        self.handlers: Dict[str, CommandHandler] = {}
        for name, handler in handlers.items():
            if not callable(handler):
                raise CommandError(f"Handler for {_key(name)!r} is not callable")
            self.handlers[_key(name)] = handler
        self.on_dispose(lambda: router._remove(self))

    def get(self, name: CommandName) -> Optional[CommandHandler]:
        return self.handlers.get(_key(name))


class CommandRouter:
    """Stack of active command tables."""

    def __init__(self) -> None:
        self._stack: List[CommandGroup] = []

    def push(self, handlers: Mapping[CommandName, CommandHandler]) -> CommandGroup:
        group = CommandGroup(self, handlers)
        self._stack.append(group)
        return group

    def is_active(self, group: CommandGroup) -> bool:
        return bool(self._stack) and self._stack[-1] is group

    def depth(self) -> int:
        return len(self._stack)

    def run(self, name: CommandName) -> bool:
        """Dispatch a command. Returns True if some handler stopped its propagation."""
        key = _key(name)
        # Handlers may dispose their own group; walk a snapshot and skip
        # groups that are gone by the time we reach them.
        for group in reversed(list(self._stack)):
            if group.is_disposed():
                continue
            handler = group.get(key)
            if handler is None:
                continue
            if not handler():
                return True
        logger.debug("Command not handled", command=key)
        return False

    def _remove(self, group: CommandGroup) -> None:
        if group in self._stack:
            self._stack.remove(group)
