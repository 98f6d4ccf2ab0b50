"""
Saving a cell directly from a keystroke, without opening an editor.
"""

import asyncio
from typing import Any, Optional, Type

from ..document.doc_data import DocData
from ..errors import report_failures
from ..models.column_model import ViewField
from ..models.row_model import DataRow
from .widgets import NOT_HANDLED, EditorWidget


async def set_and_save(doc_data: DocData, edit_row: DataRow, field: ViewField, value: Any) -> bool:
    """Save `value` into the field's cell, only if it differs from the current value."""
    return await doc_data.set_if_changed(edit_row, field.col_id, value)


def maybe_accept_without_editor(doc_data: DocData, editor_ctor: Type[EditorWidget],
                                edit_row: DataRow, field: ViewField,
                                typed_val: Optional[str]) -> bool:
    """
    Check whether the typed text changes the cell without opening the editor
    (e.g. a space toggles a checkbox). If so, start the save and return True.
    """
    # Formulas are always edited in the formula editor
    if field.column.is_real_formula or editor_ctor.quick_accept is None:
        return False
    previous = doc_data.get_cell(edit_row, field.col_id)
    value = editor_ctor.quick_accept(typed_val, previous)
    if value is NOT_HANDLED:
        return False
    report_failures(asyncio.ensure_future(set_and_save(doc_data, edit_row, field, value)))
    return True
