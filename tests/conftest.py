"""Shared test fixtures."""

from typing import Dict, List

import pytest

from celledit.config.logging_config import configure_test_logging
from celledit.document.doc_data import DocData
from celledit.editor import (
    CellAnchor, CommandRouter, DocumentContext, EditCommand, EditSession, TextEditor,
)
from celledit.errors import get_error_reporter
from celledit.models import Cursor, DataRow, ViewField, make_exception

configure_test_logging()

SECTION_ID = 7


class GridCommands:
    """Stands in for the grid's own command table underneath any editor."""

    def __init__(self, router: CommandRouter, cursor: Cursor) -> None:
        self.calls: List[EditCommand] = []
        self._cursor = cursor
        self.group = router.push({command: self._handler(command) for command in EditCommand})

    def _handler(self, command: EditCommand):
        def handle():
            self.calls.append(command)
            if command == EditCommand.CONFIRM_HERE:
                self._cursor.move_down()
            elif command == EditCommand.NEXT_FIELD:
                self._cursor.move_right()
            elif command == EditCommand.PREV_FIELD:
                self._cursor.move_left()
        return handle


@pytest.fixture()
def doc_data() -> DocData:
    """A table with data, formula, empty and boolean columns and two rows."""
    data = DocData(table_id="Orders")
    data.add_column("Name", pure_type="Text")
    data.add_column("Amount", pure_type="Numeric")
    data.add_column("Done", pure_type="Bool")
    data.add_column("Total", pure_type="Numeric", is_formula=True, formula="$Amount * 2")
    data.add_column("Notes", pure_type="Any", is_formula=True, formula="")
    data.add_row({"Name": "apple", "Amount": 3, "Done": False, "Total": 6})
    data.add_row({"Name": "pear", "Amount": 0, "Done": True,
                  "Total": make_exception("ZeroDivisionError")})
    return data


@pytest.fixture()
def doc(doc_data: DocData) -> DocumentContext:
    return DocumentContext(doc_data, doc_id="doc1")


@pytest.fixture()
def cursor() -> Cursor:
    return Cursor()


@pytest.fixture()
def grid(doc: DocumentContext, cursor: Cursor) -> GridCommands:
    return GridCommands(doc.router, cursor)


@pytest.fixture()
def fields(doc_data: DocData) -> Dict[str, ViewField]:
    return {
        col_id: ViewField(doc_data.get_column_by_id(col_id), section_id=SECTION_ID)
        for col_id in ("Name", "Amount", "Done", "Total", "Notes")
    }


@pytest.fixture()
def anchor() -> CellAnchor:
    return CellAnchor("cell")


@pytest.fixture()
def first_row() -> DataRow:
    return DataRow(row_id=1)


@pytest.fixture()
def open_editor(doc, fields, cursor, anchor, grid, first_row):
    """Open an EditSession on a column of the first row (or `row`)."""
    def _open(col_id: str, *, start_val=None, state=None, readonly=False,
              editor_ctor=TextEditor, row=None) -> EditSession:
        return EditSession(doc, fields[col_id], cursor, row or first_row, anchor, editor_ctor,
                           start_val=start_val, state=state, readonly=readonly)
    return _open


@pytest.fixture()
def reported_errors():
    errors = []
    remove = get_error_reporter().add_listener(errors.append)
    yield errors
    remove()
