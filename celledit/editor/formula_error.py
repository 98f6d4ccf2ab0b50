"""
Error details for formula cells that raised an exception.
"""

import asyncio
from typing import TYPE_CHECKING, Any, Optional

from ..config.logging_config import get_logger
from ..errors import report_error
from ..models.cell_model import is_raised_exception
from ..models.column_model import Column
from ..models.row_model import DataRow
from ..observable import Observable

if TYPE_CHECKING:
    from .context import DocumentContext

logger = get_logger(__name__)


def get_formula_error(doc: "DocumentContext", edit_row: DataRow,
                      column: Column) -> Optional[Observable]:
    """
    If the cell holds an exception raised by its formula, return an
    observable seeded with the stored exception value and start fetching
    the detailed error (e.g. traceback) to replace it with.
    """
    col_id = column.col_id
    cell_value = doc.doc_data.get_cell(edit_row, col_id)
    is_formula = column.is_formula or column.has_trigger_formula
    if not (is_formula and is_raised_exception(cell_value)):
        return None

    formula_error: Observable[Any] = Observable(cell_value)
    if not doc.settings.FETCH_FORMULA_ERROR_DETAILS:
        return formula_error

    fetch = asyncio.ensure_future(
        doc.doc_data.get_formula_error(column.table_id, col_id, edit_row.row_id))

    def _on_fetched(fut: "asyncio.Future") -> None:
        if fut.cancelled():
            return
        error = fut.exception()
        if error is not None:
            report_error(error)
        elif formula_error.is_disposed():
            logger.debug("Editor closed before error details arrived", col_id=col_id)
        else:
            formula_error.set(fut.result())

    fetch.add_done_callback(_on_fetched)
    return formula_error
