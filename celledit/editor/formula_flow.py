"""
Formula editing outside the grid, e.g. in the column properties panel.
"""

import asyncio
from typing import Awaitable, Callable, Optional, Type

from ..config.logging_config import LoggerMixin
from ..disposable import Disposable
from ..errors import report_failures
from ..models.column_model import Column, ViewField
from ..models.row_model import DataRow
from .cleanup import CleanupPolicy, EditableCleanup
from .commands import EditCommand
from .context import DocumentContext
from .formula_error import get_formula_error
from .save_coordinator import SaveCoordinator
from .widgets import END_OF_TEXT, CellAnchor, EditorOptions, EditorWidget, FormulaEditor

OnSave = Callable[[Column, str], Awaitable[None]]


class FormulaEditSession(Disposable, LoggerMixin):
    """Owns a formula editor opened over `anchor` until it is saved or cancelled."""

    def __init__(self, doc: DocumentContext, field: ViewField, anchor: CellAnchor, *,
                 edit_row: Optional[DataRow] = None,
                 edit_value: Optional[str] = None,
                 on_save: Optional[OnSave] = None,
                 on_cancel: Optional[Callable[[], None]] = None,
                 cleanup: Callable[[Callable], CleanupPolicy] = EditableCleanup,
                 formula_editor_ctor: Type[EditorWidget] = FormulaEditor) -> None:
        super().__init__()
        self._doc = doc
        self._column = field.column
        self._on_save = on_save
        self._on_cancel = on_cancel
        self._save_edit = SaveCoordinator(self._do_save, name="formula save")

        self.auto_dispose(doc.router.push({
            EditCommand.CONFIRM_HERE: self._confirm,
            EditCommand.CONFIRM_AND_ADVANCE: self._confirm,
            EditCommand.CANCEL: self.cancel,
        }))

        self.editor = self.auto_dispose(formula_editor_ctor(EditorOptions(
            field=field,
            cell_value=self._column.formula,
            formula_error=(get_formula_error(doc, edit_row, self._column)
                           if edit_row is not None else None),
            edit_value=edit_value,
            cursor_pos=END_OF_TEXT,
            readonly=False,
            css_class="formula_editor_sidepane",
        )))
        self.editor.attach(anchor)

        # Highlight formula affordances right away: this panel is used to
        # switch a column's behavior, so there is no deferred mode here.
        if not self._column.formula:
            field.editing_formula.set(True)

        cleanup(self._save_edit).setup(self, doc, field)

    def save(self) -> "asyncio.Future[None]":
        return self._save_edit()

    def cancel(self) -> None:
        if self.is_disposed():
            return
        self.dispose()
        if self._on_cancel is not None:
            self._on_cancel()

    def _confirm(self) -> None:
        report_failures(self._save_edit())

    async def _do_save(self) -> None:
        if self.is_disposed():
            self.logger.warning("Formula editor closed before saving", col_id=self._column.col_id)
            return
        formula = self.editor.get_cell_value()
        self.logger.debug("Saving formula", col_id=self._column.col_id,
                          custom_save=self._on_save is not None)
        try:
            if self._on_save is not None:
                await self._on_save(self._column, formula)
            elif formula != self._column.formula:
                await self._doc.doc_data.update_column_values(
                    self._column.col_ref, {"formula": formula})
        finally:
            self.dispose()


def open_formula_editor(doc: DocumentContext, field: ViewField, anchor: CellAnchor,
                        **options) -> FormulaEditSession:
    """Open a formula editor. The returned session owns it; dispose it to close."""
    return FormulaEditSession(doc, field, anchor, **options)
