"""
Row references.
"""

from typing import Union
from pydantic import BaseModel

# Id of the placeholder row shown at the bottom of a table for adding records
ADD_ROW_ID = "new"

RowId = Union[int, str]


class DataRow(BaseModel):
    """The row a cell editor is working on."""

    row_id: RowId

    @property
    def is_add_row(self) -> bool:
        return self.row_id == ADD_ROW_ID

    @classmethod
    def add_row(cls) -> "DataRow":
        return cls(row_id=ADD_ROW_ID)
