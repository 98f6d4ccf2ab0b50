"""
Tests for the formula editor opened outside the grid.
"""

import asyncio

from celledit.editor import EditCommand, FormulaEditor, open_formula_editor
from celledit.models import DataRow


async def drain(steps=10):
    for _ in range(steps):
        await asyncio.sleep(0)


class TestOpenFormulaEditor:

    def test_empty_column_starts_in_formula_mode(self, doc, fields, anchor):
        async def scenario():
            return open_formula_editor(doc, fields["Notes"], anchor)

        session = asyncio.run(scenario())
        assert isinstance(session.editor, FormulaEditor)
        assert session.editor.options.css_class == "formula_editor_sidepane"
        assert anchor.widget is session.editor
        assert fields["Notes"].editing_formula.get() is True

    def test_existing_formula_is_shown(self, doc, fields, anchor):
        async def scenario():
            return open_formula_editor(doc, fields["Total"], anchor)

        session = asyncio.run(scenario())
        assert session.editor.get_text_value() == "$Amount * 2"
        assert fields["Total"].editing_formula.get() is False

    def test_confirm_saves_formula(self, doc, doc_data, fields, anchor, grid):
        async def scenario():
            session = open_formula_editor(doc, fields["Notes"], anchor)
            session.editor.type_text("$Amount + 1")
            assert doc.router.run(EditCommand.CONFIRM_HERE)
            await drain()
            return session

        session = asyncio.run(scenario())
        assert doc_data.get_column_by_id("Notes").formula == "$Amount + 1"
        assert session.is_disposed()
        assert anchor.widget is None
        assert fields["Notes"].editing_formula.get() is False
        assert grid.calls == []

    def test_save_after_cancel_writes_nothing(self, doc, doc_data, fields, anchor):
        async def scenario():
            session = open_formula_editor(doc, fields["Notes"], anchor, edit_value="1+1")
            session.cancel()
            await session.save()

        asyncio.run(scenario())
        assert doc_data.get_column_by_id("Notes").formula == ""
        assert doc_data.write_count == 0

    def test_unchanged_formula_is_not_written(self, doc, doc_data, fields, anchor):
        async def scenario():
            await open_formula_editor(doc, fields["Total"], anchor).save()

        asyncio.run(scenario())
        assert doc_data.write_count == 0

    def test_custom_save(self, doc, doc_data, fields, anchor):
        saved = []

        async def on_save(column, formula):
            saved.append((column.col_id, formula))

        async def scenario():
            session = open_formula_editor(doc, fields["Total"], anchor, on_save=on_save)
            session.editor.set_text("$Amount * 4")
            await session.save()
            return session

        session = asyncio.run(scenario())
        assert saved == [("Total", "$Amount * 4")]
        assert doc_data.write_count == 0
        assert session.is_disposed()

    def test_cancel_calls_back_once(self, doc, doc_data, fields, anchor):
        cancelled = []

        async def scenario():
            session = open_formula_editor(doc, fields["Notes"], anchor,
                                          on_cancel=lambda: cancelled.append(True))
            session.editor.type_text("1")
            doc.router.run(EditCommand.CANCEL)
            session.cancel()
            return session

        session = asyncio.run(scenario())
        assert cancelled == [True]
        assert session.is_disposed()
        assert doc_data.get_column_by_id("Notes").formula == ""
        assert fields["Notes"].editing_formula.get() is False

    def test_click_away_saves(self, doc, doc_data, fields, anchor):
        async def scenario():
            session = open_formula_editor(doc, fields["Notes"], anchor)
            session.editor.type_text("2 * 2")
            doc.host.focus_clipboard()
            await drain()

        asyncio.run(scenario())
        assert doc_data.get_column_by_id("Notes").formula == "2 * 2"

    def test_error_details_for_row(self, doc, doc_data, fields, anchor):
        doc_data.set_formula_error_detail("Total", 2, "division by zero")

        async def scenario():
            session = open_formula_editor(doc, fields["Total"], anchor,
                                          edit_row=DataRow(row_id=2))
            await drain()
            return session.editor.formula_error.get()

        assert asyncio.run(scenario()) == "division by zero"
