"""
Cursor and cell position models.
"""

from typing import Any, Dict, Union
from pydantic import BaseModel, ConfigDict, Field

from .row_model import RowId


class CellPosition(BaseModel):
    """Identifies a cell uniquely within a view section."""

    model_config = ConfigDict(frozen=True)

    row_id: RowId
    col_ref: int
    section_id: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rowId": self.row_id,
            "colRef": self.col_ref,
            "sectionId": self.section_id,
        }


class Cursor(BaseModel):
    """The grid cursor: index of the row and of the field within the section.

    `row_index` is the row's position in the current sort order, so it can
    change under a saved edit when the edited row gets re-sorted.
    """

    row_index: int = Field(default=0, ge=0)
    field_index: int = Field(default=0, ge=0)

    def move_to(self, row_index: int, field_index: int) -> None:
        self.row_index = max(0, row_index)
        self.field_index = max(0, field_index)

    def move_by(self, row_delta: int, field_delta: int) -> None:
        self.move_to(self.row_index + row_delta, self.field_index + field_delta)

    def move_down(self, steps: int = 1) -> None:
        self.move_by(steps, 0)

    def move_left(self, steps: int = 1) -> None:
        self.move_by(0, -steps)

    def move_right(self, steps: int = 1) -> None:
        self.move_by(0, steps)

    def to_dict(self) -> Dict[str, Union[int, str]]:
        return {"row_index": self.row_index, "field_index": self.field_index}
