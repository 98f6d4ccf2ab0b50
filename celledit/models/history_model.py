from enum import Enum
from typing import Any, Dict, List, Optional
from datetime import datetime, timezone
from pydantic import BaseModel, Field
import uuid

from .operation_model import Operation


class HistoryEntryType(str, Enum):
    """Types of history entries."""
    OPERATION = "operation"
    BATCH = "batch"


class HistoryEntryStatus(str, Enum):
    ACTIVE = "active"
    UNDONE = "undone"


class HistoryEntry(BaseModel):
    """
    One undoable unit: a single operation, or a bundle of operations that
    were issued together and are undone together.
    """

    entry_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    entry_type: HistoryEntryType
    operations: List[Operation] = Field(default_factory=list)
    description: Optional[str] = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    status: HistoryEntryStatus = HistoryEntryStatus.ACTIVE
    sequence_number: int = 0

    @property
    def is_undoable(self) -> bool:
        return (
            self.status == HistoryEntryStatus.ACTIVE and
            bool(self.operations) and
            all(op.can_undo() for op in self.operations)
        )

    def get_targets(self) -> List[str]:
        return sorted({op.target for op in self.operations})

    def create_undo_operations(self) -> List[Operation]:
        """Inverse operations, in the order they must be applied."""
        return [op.create_undo_operation() for op in reversed(self.operations)]

    def mark_undone(self) -> None:
        self.status = HistoryEntryStatus.UNDONE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "entry_id": self.entry_id,
            "entry_type": self.entry_type.value,
            "description": self.description,
            "timestamp": self.timestamp.isoformat(),
            "status": self.status.value,
            "sequence_number": self.sequence_number,
            "targets": self.get_targets(),
            "operations": [op.to_dict() for op in self.operations],
        }

    @classmethod
    def create_operation_entry(cls, operation: Operation,
                               description: str = None) -> 'HistoryEntry':
        return cls(
            entry_type=HistoryEntryType.OPERATION,
            operations=[operation],
            description=description or f"{operation.operation_type.value} on {operation.target}"
        )

    @classmethod
    def create_batch_entry(cls, operations: List[Operation],
                           description: str = None) -> 'HistoryEntry':
        return cls(
            entry_type=HistoryEntryType.BATCH,
            operations=operations,
            description=description or f"Batch of {len(operations)} operations"
        )


class CommandHistory(BaseModel):
    """
    Undo history of a document.
    """

    max_history_size: int = Field(
        default=100, description="Maximum number of history entries")
    entries: List[HistoryEntry] = Field(default_factory=list)
    sequence_counter: int = 0

    def add_entry(self, entry: HistoryEntry) -> None:
        self.sequence_counter += 1
        entry.sequence_number = self.sequence_counter
        self.entries.append(entry)
        self._cleanup_history()

    def can_undo(self) -> bool:
        return any(entry.is_undoable for entry in self.entries)

    def pop_undoable(self) -> Optional[HistoryEntry]:
        """Return the most recent undoable entry, marking it undone."""
        for entry in reversed(self.entries):
            if entry.is_undoable:
                entry.mark_undone()
                return entry
        return None

    def _cleanup_history(self) -> None:
        if len(self.entries) > self.max_history_size:
            self.entries = self.entries[-self.max_history_size:]
