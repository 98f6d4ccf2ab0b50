"""
Models describing an edit session and the events it emits.
"""

from typing import Any, Dict, Optional
from pydantic import BaseModel, Field

from .cursor_model import CellPosition


class LifecycleEvent(BaseModel):
    """
    Emitted on save, cancel and every live change of an editor.
    Consumed by the editor monitor (to reopen an editor after reload) and by
    live previews of the formula being edited.
    """

    position: CellPosition
    was_modified: bool
    # Editor-specific serializable snapshot, as produced by the widget
    current_state: Any = None
    type: str = Field(..., description="Declared value type of the cell's column")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "position": self.position.to_dict(),
            "wasModified": self.was_modified,
            "currentState": self.current_state,
            "type": self.type,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LifecycleEvent":
        pos = data["position"]
        return cls(
            position=CellPosition(row_id=pos["rowId"], col_ref=pos["colRef"],
                                  section_id=pos["sectionId"]),
            was_modified=data["wasModified"],
            current_state=data.get("currentState"),
            type=data["type"],
        )


class EditSessionState(BaseModel):
    """Snapshot of an edit session's mode and editing state."""

    is_formula: bool
    is_readonly: bool
    has_changed: bool
    edit_value: Optional[str] = None
    cursor_pos: int = 0
