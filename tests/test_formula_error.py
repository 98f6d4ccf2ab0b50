"""
Tests for fetching error details of formula cells.
"""

import asyncio

from celledit.config import Settings
from celledit.editor import DocumentContext, FormulaEditor
from celledit.editor.formula_error import get_formula_error
from celledit.exceptions import FormulaErrorLookupError
from celledit.models import DataRow, make_exception

ERROR_ROW = DataRow(row_id=2)


async def drain(steps=10):
    for _ in range(steps):
        await asyncio.sleep(0)


class TestGetFormulaError:

    def test_plain_value_has_no_error(self, doc, doc_data):
        column = doc_data.get_column_by_id("Total")
        assert get_formula_error(doc, DataRow(row_id=1), column) is None

    def test_data_column_has_no_error(self, doc, doc_data):
        row = doc_data.add_row({"Name": make_exception("ValueError")})
        assert get_formula_error(doc, row, doc_data.get_column_by_id("Name")) is None

    def test_details_replace_stored_exception(self, doc, doc_data):
        doc_data.set_formula_error_detail("Total", 2, "ZeroDivisionError: division by zero")

        async def scenario():
            error = get_formula_error(doc, ERROR_ROW, doc_data.get_column_by_id("Total"))
            assert error.get() == ["E", "ZeroDivisionError"]
            await drain()
            return error.get()

        assert asyncio.run(scenario()) == "ZeroDivisionError: division by zero"

    def test_trigger_formula_column(self, doc, doc_data):
        column = doc_data.add_column("Stamp", has_trigger_formula=True)
        row = doc_data.add_row({"Stamp": make_exception("NameError")})
        doc_data.set_formula_error_detail("Stamp", row.row_id, "NameError: NOW")

        async def scenario():
            error = get_formula_error(doc, row, column)
            await drain()
            return error.get()

        assert asyncio.run(scenario()) == "NameError: NOW"

    def test_fetch_failure_is_reported(self, doc, doc_data, reported_errors):
        async def scenario():
            error = get_formula_error(doc, ERROR_ROW, doc_data.get_column_by_id("Total"))
            await drain()
            return error.get()

        assert asyncio.run(scenario()) == ["E", "ZeroDivisionError"]
        assert len(reported_errors) == 1
        assert isinstance(reported_errors[0], FormulaErrorLookupError)

    def test_details_arriving_after_close_are_dropped(self, doc, doc_data):
        doc_data.set_formula_error_detail("Total", 2, "late")
        changes = []

        async def scenario():
            error = get_formula_error(doc, ERROR_ROW, doc_data.get_column_by_id("Total"))
            error.add_listener(lambda *args: changes.append(args))
            error.dispose()
            await drain()
            return error.get()

        assert asyncio.run(scenario()) == ["E", "ZeroDivisionError"]
        assert changes == []

    def test_details_fetch_can_be_disabled(self, doc_data):
        doc_data.set_formula_error_detail("Total", 2, "detail")
        doc = DocumentContext(doc_data, settings=Settings(FETCH_FORMULA_ERROR_DETAILS=False))

        async def scenario():
            error = get_formula_error(doc, ERROR_ROW, doc_data.get_column_by_id("Total"))
            await drain()
            return error.get()

        assert asyncio.run(scenario()) == ["E", "ZeroDivisionError"]


class TestEditorIntegration:

    def test_formula_editor_receives_details(self, open_editor, doc_data):
        doc_data.set_formula_error_detail("Total", 2, "division by zero")

        async def scenario():
            session = open_editor("Total", row=ERROR_ROW)
            assert isinstance(session.editor, FormulaEditor)
            await drain()
            return session.editor.formula_error.get()

        assert asyncio.run(scenario()) == "division by zero"

    def test_closing_editor_releases_error(self, open_editor, doc_data):
        doc_data.set_formula_error_detail("Total", 2, "division by zero")

        async def scenario():
            session = open_editor("Total", row=ERROR_ROW)
            error = session.editor.formula_error
            session.cancel()
            await drain()
            return error

        error = asyncio.run(scenario())
        assert error.is_disposed()
        assert error.get() == ["E", "ZeroDivisionError"]
