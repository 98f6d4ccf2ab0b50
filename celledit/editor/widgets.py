"""
Editor widgets.

An editor widget is what the user types into while a cell is being edited.
The edit session only relies on the capabilities of `EditorWidget`; the
concrete classes here keep their text in memory, which is all a headless
host (or a test) needs. A rendering layer would subclass them.
"""

import asyncio
import sys
from abc import ABC, abstractmethod
from typing import Any, Callable, ClassVar, Optional

from pydantic import BaseModel, ConfigDict

from ..disposable import Disposable
from ..models.column_model import ViewField
from ..observable import Observable

# Cursor position meaning "after the last character"
END_OF_TEXT = sys.maxsize

QuickAccept = Callable[[Optional[str], Any], Any]


class _NotHandled:
    def __repr__(self) -> str:
        return "NOT_HANDLED"


# Returned by a quick_accept hook when the keystroke should open the editor
NOT_HANDLED = _NotHandled()


class EditorOptions(BaseModel):
    """Everything an editor widget is constructed with."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    field: ViewField
    cell_value: Any = None
    formula_error: Optional[Observable] = None
    # Text typed to open the editor; None when opened without typing
    edit_value: Optional[str] = None
    cursor_pos: int = END_OF_TEXT
    # Snapshot previously emitted by this kind of editor, to restore it
    state: Any = None
    readonly: bool = False
    css_class: Optional[str] = None


class CellAnchor:
    """The place in the grid an editor is attached to."""

    def __init__(self, name: str = "") -> None:
        self.name = name
        self.widget: Optional["EditorWidget"] = None

    def attach(self, widget: "EditorWidget") -> None:
        self.widget = widget

    def detach(self, widget: "EditorWidget") -> None:
        if self.widget is widget:
            self.widget = None

    def __repr__(self) -> str:
        return f"CellAnchor({self.name!r})"


class EditorWidget(Disposable, ABC):
    """Capabilities an edit session needs from an editor widget."""

    # Optional fast path: given the typed text and the cell's current value,
    # return the value to save without opening the editor, or NOT_HANDLED.
    quick_accept: ClassVar[Optional[QuickAccept]] = None

    def __init__(self, options: EditorOptions) -> None:
        super().__init__()
        self.options = options
        self._anchor: Optional[CellAnchor] = None
        # Live state channel; None for editors that don't report changes
        self.editor_state: Optional[Observable] = None
        if options.formula_error is not None:
            self.auto_dispose(options.formula_error)
        self.on_dispose(self.detach)

    def attach(self, anchor: CellAnchor) -> None:
        self.detach()
        self._anchor = anchor
        anchor.attach(self)

    def detach(self) -> None:
        if self._anchor is not None:
            self._anchor.detach(self)
            self._anchor = None

    def get_dom(self) -> Optional[CellAnchor]:
        return self._anchor

    @abstractmethod
    def get_cell_value(self) -> Any:
        """The value to save."""

    @abstractmethod
    def get_text_value(self) -> str:
        """The text as currently typed."""

    @abstractmethod
    def get_cursor_pos(self) -> int:
        pass

    async def prepare_for_save(self) -> None:
        """Finish any pending input before the value is read."""


class TextEditor(EditorWidget):
    """Plain text editing with a cursor. The state snapshot is the text."""

    def __init__(self, options: EditorOptions) -> None:
        super().__init__(options)
        if options.state is not None:
            text = str(options.state)
        elif options.edit_value is not None:
            text = options.edit_value
        else:
            text = self.format_value(options.cell_value)
        self._text = text
        self._cursor = max(0, min(options.cursor_pos, len(text)))
        self.editor_state = self.auto_dispose(Observable(text))

    @staticmethod
    def format_value(value: Any) -> str:
        if value is None:
            return ""
        if isinstance(value, bool):
            return "true" if value else "false"
        return str(value)

    def get_cell_value(self) -> Any:
        return self._text

    def get_text_value(self) -> str:
        return self._text

    def get_cursor_pos(self) -> int:
        return self._cursor

    def set_cursor(self, pos: int) -> None:
        self._cursor = max(0, min(pos, len(self._text)))

    def type_text(self, text: str) -> None:
        """Insert text at the cursor."""
        if self.options.readonly:
            return
        self._set_text(self._text[:self._cursor] + text + self._text[self._cursor:],
                       self._cursor + len(text))

    def backspace(self) -> None:
        if self.options.readonly or self._cursor == 0:
            return
        self._set_text(self._text[:self._cursor - 1] + self._text[self._cursor:],
                       self._cursor - 1)

    def set_text(self, text: str) -> None:
        """Replace the whole text, leaving the cursor at the end."""
        if self.options.readonly:
            return
        self._set_text(text, len(text))

    def _set_text(self, text: str, cursor: int) -> None:
        self._text = text
        self._cursor = cursor
        self._on_user_edit()
        self.editor_state.set(text)

    def _on_user_edit(self) -> None:
        pass


class NumericEditor(TextEditor):
    """Saves numbers as int or float; unparsable text is saved as typed."""

    def get_cell_value(self) -> Any:
        text = self._text.strip()
        if text == "":
            return None
        try:
            return int(text)
        except ValueError:
            pass
        try:
            return float(text)
        except ValueError:
            return self._text


_TRUE_WORDS = {"true", "yes", "y", "1"}
_FALSE_WORDS = {"false", "no", "n", "0", ""}


def _toggle_on_space(typed: Optional[str], previous: Any) -> Any:
    if typed == " ":
        return not bool(previous)
    return NOT_HANDLED


class CheckBoxEditor(TextEditor):
    """Boolean cells. Typing a space toggles the cell without opening an editor."""

    quick_accept = staticmethod(_toggle_on_space)

    def get_cell_value(self) -> Any:
        word = self._text.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
        return self._text


class FormulaEditor(TextEditor):
    """
    Formula text editing.

    The first user edit raises `field.editing_formula`, which the edit
    session relies on to save the text as a formula. A pending autocomplete
    suggestion is accepted by `prepare_for_save`.
    """

    def __init__(self, options: EditorOptions) -> None:
        super().__init__(options)
        self.formula_error: Optional[Observable] = options.formula_error
        self._completion: Optional[str] = None

    def show_completion(self, completion: str) -> None:
        """Offer text to insert at the cursor, as autocomplete would."""
        self._completion = completion

    async def prepare_for_save(self) -> None:
        # Give the completion popup a chance to settle first
        await asyncio.sleep(0)
        completion, self._completion = self._completion, None
        if completion and not self.is_disposed():
            self.type_text(completion)

    def _on_user_edit(self) -> None:
        if not self.options.readonly:
            self.options.field.editing_formula.set(True)
