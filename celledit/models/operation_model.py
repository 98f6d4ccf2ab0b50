"""
Document operations, recorded for undo.
"""

from enum import Enum
from typing import Any, Dict, Optional
from datetime import datetime, timezone
from pydantic import BaseModel, Field
import uuid


class OperationType(str, Enum):
    """Types of writes the document layer performs."""

    UPDATE_CELL = "update_cell"
    UPDATE_COLUMN = "update_column"
    ADD_ROW = "add_row"
    REMOVE_ROW = "remove_row"


class OperationStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"


class Operation(BaseModel):
    """
    A single write to the document, with enough previous state to invert it.
    """

    operation_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    operation_type: OperationType

    # "cell:<row_id>:<col_id>", "column:<col_ref>" or "row:<row_id>"
    target: str
    data: Dict[str, Any] = Field(default_factory=dict)
    previous_data: Optional[Dict[str, Any]] = None

    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    status: OperationStatus = OperationStatus.PENDING
    parent_operation_id: Optional[str] = None

    def mark_completed(self) -> None:
        self.status = OperationStatus.COMPLETED

    def can_undo(self) -> bool:
        return self.status == OperationStatus.COMPLETED and self.previous_data is not None

    def create_undo_operation(self) -> 'Operation':
        """Create the inverse operation for undo."""
        if not self.can_undo():
            raise ValueError("Operation cannot be undone")

        undo_type_map = {
            OperationType.UPDATE_CELL: OperationType.UPDATE_CELL,
            OperationType.UPDATE_COLUMN: OperationType.UPDATE_COLUMN,
            OperationType.ADD_ROW: OperationType.REMOVE_ROW,
            OperationType.REMOVE_ROW: OperationType.ADD_ROW,
        }

        return Operation(
            operation_type=undo_type_map[self.operation_type],
            target=self.target,
            data=dict(self.previous_data),
            previous_data=dict(self.data),
            parent_operation_id=self.operation_id
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "operation_id": self.operation_id,
            "operation_type": self.operation_type.value,
            "target": self.target,
            "data": self.data,
            "previous_data": self.previous_data,
            "timestamp": self.timestamp.isoformat(),
            "status": self.status.value,
            "parent_operation_id": self.parent_operation_id,
        }

    @classmethod
    def create_cell_update(cls, row_id: Any, col_id: str, new_value: Any,
                           old_value: Any) -> 'Operation':
        return cls(
            operation_type=OperationType.UPDATE_CELL,
            target=f"cell:{row_id}:{col_id}",
            data={"row_id": row_id, "col_id": col_id, "value": new_value},
            previous_data={"row_id": row_id, "col_id": col_id, "value": old_value},
        )

    @classmethod
    def create_column_update(cls, col_ref: int, new_values: Dict[str, Any],
                             old_values: Dict[str, Any]) -> 'Operation':
        return cls(
            operation_type=OperationType.UPDATE_COLUMN,
            target=f"column:{col_ref}",
            data={"col_ref": col_ref, "values": new_values},
            previous_data={"col_ref": col_ref, "values": old_values},
        )

    @classmethod
    def create_row_add(cls, row_id: int, values: Dict[str, Any]) -> 'Operation':
        return cls(
            operation_type=OperationType.ADD_ROW,
            target=f"row:{row_id}",
            data={"row_id": row_id, "values": values},
            previous_data={"row_id": row_id, "values": values},
        )
