"""
In-memory document data: one table of columns and rows, with undo.

This is the mutation layer editors write through. Every write is recorded
as an Operation; writes issued inside `bundle_actions` are grouped into a
single history entry so that they undo as one unit.
"""

import asyncio
from contextvars import ContextVar
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple, TypeVar, Union

from ..config.logging_config import LoggerMixin
from ..exceptions import FormulaErrorLookupError, PersistenceError
from ..models.cell_model import values_equal
from ..models.column_model import Column
from ..models.history_model import CommandHistory, HistoryEntry
from ..models.operation_model import Operation, OperationType
from ..models.row_model import DataRow, RowId

T = TypeVar("T")

# (doc, operations) of the bundle open in the current task context. Tasks
# spawned inside a bundle (e.g. by asyncio.gather) inherit it.
_current_bundle: ContextVar[Optional[Tuple["DocData", List[Operation]]]] = \
    ContextVar("current_bundle", default=None)


class DocData(LoggerMixin):
    """
    Storage for a single table. Values of formula columns are whatever was
    last stored for them; computing formulas is not this layer's job.
    """

    def __init__(self, table_id: str = "Table1", latency: float = 0.0,
                 max_history_size: int = 100):
        self.table_id = table_id
        # Seconds each write takes to settle
        self.latency = latency
        self.history = CommandHistory(max_history_size=max_history_size)
        self.write_count = 0

        self._columns: Dict[int, Column] = {}
        self._rows: Dict[int, Dict[str, Any]] = {}
        self._next_col_ref = 1
        self._next_row_id = 1
        self._formula_errors: Dict[Tuple[str, RowId], Any] = {}

    # ---- Setup (not recorded in history) ----

    def add_column(self, col_id: str, *, pure_type: str = "Any", is_formula: bool = False,
                   formula: str = "", has_trigger_formula: bool = False) -> Column:
        column = Column(
            col_ref=self._next_col_ref,
            col_id=col_id,
            table_id=self.table_id,
            pure_type=pure_type,
            is_formula=is_formula,
            formula=formula,
            has_trigger_formula=has_trigger_formula,
        )
        self._next_col_ref += 1
        self._columns[column.col_ref] = column
        for values in self._rows.values():
            values.setdefault(col_id, None)
        return column

    def add_row(self, values: Optional[Dict[str, Any]] = None) -> DataRow:
        row_id = self._insert_row(values or {})
        return DataRow(row_id=row_id)

    def set_formula_error_detail(self, col_id: str, row_id: RowId, detail: Any) -> None:
        """Register the detailed error returned by `get_formula_error`."""
        self._formula_errors[(col_id, row_id)] = detail

    # ---- Reads ----

    def get_column(self, col_ref: int) -> Column:
        try:
            return self._columns[col_ref]
        except KeyError:
            raise PersistenceError(f"Unknown column reference: {col_ref}")

    def get_column_by_id(self, col_id: str) -> Column:
        for column in self._columns.values():
            if column.col_id == col_id:
                return column
        raise PersistenceError(f"Unknown column: {col_id}")

    def get_cell(self, row: Union[DataRow, RowId], col_id: str) -> Any:
        row_id = row.row_id if isinstance(row, DataRow) else row
        self.get_column_by_id(col_id)
        if row_id not in self._rows:
            # The add-row placeholder and deleted rows have no values
            return None
        return self._rows[row_id].get(col_id)

    def row_ids(self) -> List[int]:
        return list(self._rows)

    # ---- Writes ----

    async def update_column_values(self, col_ref: int, values: Dict[str, Any]) -> None:
        await self._settle()
        column = self.get_column(col_ref)
        new_values = dict(values)
        try:
            old_values = column.apply(new_values)
        except KeyError as e:
            raise PersistenceError(f"Cannot update column field {e}")
        self._record(Operation.create_column_update(col_ref, new_values, old_values))

    async def update_row_values(self, row: DataRow, values: Dict[str, Any]) -> DataRow:
        """Update a row; on the add-row placeholder this creates a new record."""
        await self._settle()
        for col_id in values:
            self.get_column_by_id(col_id)
        if row.is_add_row:
            row_id = self._insert_row(values)
            self._record(Operation.create_row_add(row_id, dict(self._rows[row_id])))
            return DataRow(row_id=row_id)

        current = self._get_row_values(row.row_id)
        for col_id, value in values.items():
            op = Operation.create_cell_update(row.row_id, col_id, value, current.get(col_id))
            current[col_id] = value
            self._record(op)
        return row

    async def set_if_changed(self, row: DataRow, col_id: str, value: Any) -> bool:
        """Write a single cell unless the value is unchanged. Returns whether it wrote."""
        current = self.get_cell(row, col_id)
        if values_equal(value, current):
            return False
        await self.update_row_values(row, {col_id: value})
        return True

    async def bundle_actions(self, label: Optional[str],
                             fn: Callable[[], Awaitable[T]]) -> T:
        """Run `fn`, grouping all writes it issues into one undoable entry."""
        outer = _current_bundle.get()
        if outer is not None and outer[0] is self:
            return await fn()

        operations: List[Operation] = []
        token = _current_bundle.set((self, operations))
        try:
            return await fn()
        finally:
            _current_bundle.reset(token)
            if operations:
                self.history.add_entry(HistoryEntry.create_batch_entry(operations, label))
                self.logger.debug("Bundled actions", label=label, operations=len(operations))

    async def undo(self) -> bool:
        """Revert the most recent undoable entry. Returns False if there was none."""
        entry = self.history.pop_undoable()
        if entry is None:
            return False
        await self._settle()
        for op in entry.create_undo_operations():
            self._apply_inverse(op)
        self.logger.debug("Undid history entry", description=entry.description)
        return True

    async def get_formula_error(self, table_id: str, col_id: str, row_id: RowId) -> Any:
        """Fetch the detailed error for a formula cell that raised an exception."""
        await self._settle()
        if table_id != self.table_id:
            raise FormulaErrorLookupError(f"Unknown table: {table_id}")
        try:
            return self._formula_errors[(col_id, row_id)]
        except KeyError:
            raise FormulaErrorLookupError(
                f"No error details for {table_id}.{col_id} row {row_id}")

    # ---- Internals ----

    async def _settle(self) -> None:
        await asyncio.sleep(self.latency)

    def _insert_row(self, values: Dict[str, Any]) -> int:
        row_id = self._next_row_id
        self._next_row_id += 1
        row_values = {column.col_id: None for column in self._columns.values()}
        row_values.update(values)
        self._rows[row_id] = row_values
        return row_id

    def _get_row_values(self, row_id: RowId) -> Dict[str, Any]:
        try:
            return self._rows[row_id]
        except KeyError:
            raise PersistenceError(f"Unknown row: {row_id}")

    def _record(self, op: Operation) -> None:
        op.mark_completed()
        self.write_count += 1
        bundle = _current_bundle.get()
        if bundle is not None and bundle[0] is self:
            bundle[1].append(op)
        else:
            self.history.add_entry(HistoryEntry.create_operation_entry(op))
        self.logger.debug("Recorded write", operation=op.operation_type.value, target=op.target)

    def _apply_inverse(self, op: Operation) -> None:
        data = op.data
        if op.operation_type == OperationType.UPDATE_CELL:
            self._get_row_values(data["row_id"])[data["col_id"]] = data["value"]
        elif op.operation_type == OperationType.UPDATE_COLUMN:
            self.get_column(data["col_ref"]).apply(data["values"])
        elif op.operation_type == OperationType.REMOVE_ROW:
            self._rows.pop(data["row_id"], None)
        elif op.operation_type == OperationType.ADD_ROW:
            self._rows[data["row_id"]] = dict(data["values"])
