"""
Column records and the view fields that display them.
"""

from typing import Any, Dict

from pydantic import BaseModel, Field

from ..observable import Observable


class Column(BaseModel):
    """
    A table column. Formula columns with an empty formula are "empty": they
    hold no data yet and may still become either a data or a formula column.
    """

    col_ref: int = Field(..., description="Row id of the column's metadata record")
    col_id: str = Field(..., description="Identifier used in formulas and row dicts")
    table_id: str
    pure_type: str = Field(default="Any", description="Declared value type, e.g. Text, Bool")
    is_formula: bool = False
    formula: str = ""
    # A data column may carry a formula used to compute values on triggers
    has_trigger_formula: bool = False

    @property
    def is_empty(self) -> bool:
        return self.is_formula and self.formula == ""

    @property
    def is_real_formula(self) -> bool:
        return self.is_formula and self.formula != ""

    def apply(self, values: Dict[str, Any]) -> Dict[str, Any]:
        """Apply column updates, returning the previous values of the changed keys."""
        previous = {}
        for key, value in values.items():
            if key not in ("is_formula", "formula", "pure_type", "has_trigger_formula"):
                raise KeyError(key)
            previous[key] = getattr(self, key)
            setattr(self, key, value)
        return previous

    def to_dict(self) -> Dict[str, Any]:
        return {
            "col_ref": self.col_ref,
            "col_id": self.col_id,
            "table_id": self.table_id,
            "type": self.pure_type,
            "is_formula": self.is_formula,
            "formula": self.formula,
        }


class ViewField:
    """A column as shown in one view section.

    `editing_formula` is the UI flag that highlights formula-entry
    affordances (column headers insert their id on click). It is set by
    editors and cleared when they close.
    """

    def __init__(self, column: Column, section_id: int) -> None:
        self.column = column
        self.section_id = section_id
        self.editing_formula: Observable[bool] = Observable(False)

    @property
    def col_ref(self) -> int:
        return self.column.col_ref

    @property
    def col_id(self) -> str:
        return self.column.col_id

    def __repr__(self) -> str:
        return f"ViewField(col_id={self.col_id!r}, section_id={self.section_id})"
