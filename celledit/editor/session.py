"""
The edit session of a single cell.

An EditSession opens when the user starts editing a cell (double-click,
Enter, or typing into it) and closes exactly once: by cancel, by a
completed save, or by its owner disposing it. While open it owns one
editor widget, switching between the column's value editor and the formula
editor as the user types "=" or backspaces over it.
"""

import asyncio
from typing import Any, Optional, Type

from ..config.logging_config import LoggerMixin
from ..disposable import Disposable, Holder
from ..document.doc_data import DocData
from ..errors import report_failures
from ..models.cell_model import is_censored
from ..models.cursor_model import CellPosition, Cursor
from ..models.column_model import ViewField
from ..models.lifecycle_model import EditSessionState, LifecycleEvent
from ..models.row_model import DataRow
from ..observable import Emitter
from .cleanup import EditableCleanup, ReadonlyCleanup
from .context import DocumentContext
from .edit_commands import EditableCommands, ReadonlyCommands
from .formula_error import get_formula_error
from .formula_mode import (
    EnterDecision, can_exit, decide_enter, initial_mode, restore_formula_prefix,
    strip_formula_prefix,
)
from .save_coordinator import SaveCoordinator
from .widgets import END_OF_TEXT, CellAnchor, EditorOptions, EditorWidget, FormulaEditor


class EditSession(Disposable, LoggerMixin):
    """Lifecycle of one cell edit: open, switch modes, then save or cancel."""

    def __init__(self, doc: DocumentContext, field: ViewField, cursor: Cursor,
                 edit_row: DataRow, anchor: CellAnchor, editor_ctor: Type[EditorWidget],
                 start_val: Optional[str] = None, state: Any = None, readonly: bool = False,
                 formula_editor_ctor: Type[EditorWidget] = FormulaEditor) -> None:
        super().__init__()
        self.save_emitter = self.auto_dispose(Emitter())
        self.cancel_emitter = self.auto_dispose(Emitter())
        self.change_emitter = self.auto_dispose(Emitter())

        self._doc = doc
        self._field = field
        self._cursor = cursor
        self._edit_row = edit_row
        self._anchor = anchor
        self._editor_ctor = editor_ctor
        self._formula_editor_ctor = formula_editor_ctor
        self._readonly = readonly
        self._editor_holder: Holder[EditorWidget] = self.auto_dispose(Holder())
        self._save_edit = SaveCoordinator(self._do_save_edit, name="cell edit save")
        self._editor_has_changed = False
        self._edit_value: Optional[str] = None
        self._cursor_pos = END_OF_TEXT
        self._offer_shown = False

        column = field.column
        mode = initial_mode(start_val, is_real_formula=column.is_real_formula,
                            is_empty=column.is_empty, readonly=readonly)
        self._is_formula = mode.is_formula

        commands = (ReadonlyCommands(self, doc.router) if readonly
                    else EditableCommands(self, doc.router))
        self.auto_dispose(doc.router.push(commands.handlers()))

        self.rebuild_editor(mode.edit_value, END_OF_TEXT, state)

        if mode.offer_formula:
            self._offer_to_make_formula()

        # Lets the editor be reopened with its state after a reload
        doc.editor_monitor.monitor_editor(self)

        cleanup = ReadonlyCleanup(self.cancel) if readonly else EditableCleanup(self.save)
        cleanup.setup(self, doc, field)

    @property
    def editor(self) -> Optional[EditorWidget]:
        return self._editor_holder.get()

    @property
    def state(self) -> EditSessionState:
        return EditSessionState(
            is_formula=self._is_formula,
            is_readonly=self._readonly,
            has_changed=self._editor_has_changed,
            edit_value=self._edit_value,
            cursor_pos=self._cursor_pos,
        )

    def rebuild_editor(self, edit_value: Optional[str], cursor_pos: int, state: Any = None) -> None:
        """Replace the editor widget, e.g. after switching to or from formula mode.

        `cursor_pos` is the caret position within the new editor's text.
        """
        editor_ctor = self._formula_editor_ctor if self._is_formula else self._editor_ctor

        column = self._field.column
        cell_current_value = self._doc.doc_data.get_cell(self._edit_row, column.col_id)
        if column.is_formula:
            cell_value = column.formula
        elif is_censored(cell_current_value):
            # Hidden by access rules. Show a blank rather than the marker.
            cell_value = ""
        else:
            cell_value = cell_current_value

        self._editor_holder.clear()
        error = get_formula_error(self._doc, self._edit_row, column)

        if not self._readonly:
            # Formula-editing mode (clicking a column inserts its id) starts right
            # away only when the editor was opened by typing. On double-click it
            # waits until the user types something.
            self._field.editing_formula.set(self._is_formula and edit_value is not None)

        self._editor_has_changed = False
        self._edit_value = edit_value
        self._cursor_pos = cursor_pos
        editor = self._editor_holder.set(editor_ctor(EditorOptions(
            field=self._field,
            cell_value=cell_value,
            formula_error=error,
            edit_value=edit_value,
            cursor_pos=cursor_pos,
            state=state,
            readonly=self._readonly,
        )))

        if editor.editor_state is not None:
            editor.auto_dispose(editor.editor_state.add_listener(self._on_editor_state))

        editor.attach(self._anchor)

    def get_dom(self) -> Optional[CellAnchor]:
        editor = self._editor_holder.get()
        return editor.get_dom() if editor is not None else None

    def cell_position(self) -> CellPosition:
        return CellPosition(
            row_id=self._edit_row.row_id,
            col_ref=self._field.col_ref,
            section_id=self._field.section_id,
        )

    def save(self) -> "asyncio.Future[bool]":
        """Save the edit and close. Every call returns the same future.

        It resolves to True when the grid should NOT move its cursor on
        after the save.
        """
        return self._save_edit()

    def cancel(self) -> None:
        """Close without saving. Does nothing if already closed."""
        if self.is_disposed():
            return
        editor = self._editor_holder.get()
        try:
            self.cancel_emitter.emit(self._make_event(self._current_state(editor)))
        finally:
            self.dispose()

    def make_formula(self) -> bool:
        """Handle "=" typed in the editor. Returns True to let the keystroke through."""
        editor = self._editor_holder.get()
        if editor is None:
            return True
        decision = decide_enter(editor.get_cursor_pos(), self._field.editing_formula.get(),
                                self._field.column.is_empty)
        if decision == EnterDecision.SWITCH:
            self._is_formula = True
            self.rebuild_editor(editor.get_text_value(), 0)
            return False
        if decision == EnterDecision.OFFER:
            self._offer_to_make_formula()
        return True

    def unmake_formula(self) -> bool:
        """Handle backspace at the start of a formula. Returns True to let it through."""
        editor = self._editor_holder.get()
        if editor is None:
            return True
        if not can_exit(editor.get_cursor_pos(), self._field.editing_formula.get(),
                        self._field.column.is_real_formula):
            return True
        # Put back a literal "=" so that "=" can still start a value; a second
        # backspace deletes it.
        self._is_formula = False
        text, cursor_pos = restore_formula_prefix(editor.get_text_value())
        self.rebuild_editor(text, cursor_pos)
        return False

    def _offer_to_make_formula(self) -> None:
        editor_dom = self.get_dom()
        if editor_dom is None:
            return
        offer = self._doc.host.formula_offer
        offer.show(editor_dom, self._convert_editor_to_formula)
        if not self._offer_shown:
            self._offer_shown = True
            # Leave alone an offer some other editor has put up since
            self.on_dispose(lambda: offer.close(self._convert_editor_to_formula))

    def _convert_editor_to_formula(self) -> None:
        if self.is_disposed():
            return
        editor = self._editor_holder.get()
        if editor is None:
            return
        self._is_formula = True
        self.rebuild_editor(strip_formula_prefix(editor.get_text_value()), 0)

    def _on_editor_state(self, current_state: Any, _prev: Any = None) -> None:
        self._editor_has_changed = True
        self.change_emitter.emit(self._make_event(current_state))

    def _current_state(self, editor: Optional[EditorWidget]) -> Any:
        if editor is None or editor.editor_state is None:
            return None
        return editor.editor_state.get()

    def _make_event(self, current_state: Any) -> LifecycleEvent:
        return LifecycleEvent(
            position=self.cell_position(),
            was_modified=self._editor_has_changed,
            current_state=current_state,
            type=self._field.column.pure_type,
        )

    async def _do_save_edit(self) -> bool:
        editor = self._editor_holder.get()
        if editor is None:
            return False
        save_index = self._cursor.row_index
        try:
            await editor.prepare_for_save()
        except Exception:
            self.dispose()
            raise
        if self.is_disposed():
            self.logger.warning("Unable to finish saving edited cell", col_id=self._field.col_id,
                                row_id=self._edit_row.row_id)
            return False

        cursor = self._cursor
        # The UI flag decides, not self._is_formula: opening a formula cell by
        # double-click leaves the flag off until the user types.
        is_formula = self._field.editing_formula.get()
        col = self._field.column
        doc_data = self._doc.doc_data
        pending: Optional[asyncio.Future] = None

        try:
            if is_formula:
                formula = editor.get_cell_value()
                if is_formula != col.is_formula or formula != col.formula:
                    edit_row = self._edit_row
                    pending = asyncio.ensure_future(doc_data.bundle_actions(
                        "Edit formula",
                        lambda: _save_formula(doc_data, col.col_ref, edit_row, formula)))
            else:
                value = editor.get_cell_value()
                if col.is_real_formula:
                    self.logger.warning("Cannot save a plain value into a formula column",
                                        col_id=col.col_id, formula_mode=self._is_formula)
                else:
                    # An empty column is still is_formula; the data engine turns it
                    # into a data column on the first value, so no need to toggle it.
                    pending = asyncio.ensure_future(
                        doc_data.set_if_changed(self._edit_row, col.col_id, value))

            self.save_emitter.emit(self._make_event(self._current_state(editor)))
        except Exception:
            # The write already started; nobody awaits it now
            if pending is not None:
                report_failures(pending)
            raise
        finally:
            # Closes the editor. Nothing below may touch `self`.
            self.dispose()

        if pending is not None:
            await pending
        return is_formula or save_index != cursor.row_index

async def _save_formula(doc_data: DocData, col_ref: int, edit_row: DataRow, formula: str) -> None:
    writes = [doc_data.update_column_values(col_ref, {"is_formula": True, "formula": formula})]
    if edit_row.is_add_row and formula != "":
        # Add a record so the user sees what the new formula calculates
        writes.append(doc_data.update_row_values(edit_row, {}))
    await asyncio.gather(*writes)
