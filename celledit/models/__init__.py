from .cell_model import CellMarker, is_censored, is_raised_exception, make_exception, values_equal
from .row_model import ADD_ROW_ID, DataRow, RowId
from .cursor_model import CellPosition, Cursor
from .column_model import Column, ViewField
from .lifecycle_model import EditSessionState, LifecycleEvent
from .operation_model import Operation, OperationStatus, OperationType
from .history_model import CommandHistory, HistoryEntry, HistoryEntryType

__all__ = [
    # Cell values
    "CellMarker",
    "is_censored",
    "is_raised_exception",
    "make_exception",
    "values_equal",

    # Rows, cursor and columns
    "ADD_ROW_ID",
    "DataRow",
    "RowId",
    "CellPosition",
    "Cursor",
    "Column",
    "ViewField",

    # Edit session
    "EditSessionState",
    "LifecycleEvent",

    # Operations and history
    "Operation",
    "OperationStatus",
    "OperationType",
    "CommandHistory",
    "HistoryEntry",
    "HistoryEntryType",
]
