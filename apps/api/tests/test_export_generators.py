"""Tests for export generators (CSV, Excel)."""

from __future__ import annotations

import io

from openpyxl import load_workbook

from celltrack.exports.export_generators import CSVGenerator, ExcelGenerator, flatten_text

COLUMNS = ["Week", "Member", "Notes"]


class TestCSVGenerator:
    def test_generate_csv_with_data(self):
        results = [
            {"Week": "2024-03-10", "Member": "Alice", "Notes": "ok"},
            {"Week": "2024-03-10", "Member": "Bob", "Notes": ""},
        ]
        lines = CSVGenerator.generate(results, COLUMNS).decode().splitlines()
        assert lines == ["Week,Member,Notes", "2024-03-10,Alice,ok", "2024-03-10,Bob,"]

    def test_empty_still_has_header(self):
        assert CSVGenerator.generate([], COLUMNS).decode().strip() == "Week,Member,Notes"

    def test_flattened_notes_keep_rows_intact(self):
        results = [{"Week": "2024-03-10", "Member": "Alice", "Notes": "sick, away\nback soon"}]
        lines = CSVGenerator.generate(results, COLUMNS, flatten=["Notes"]).decode().splitlines()
        assert lines[1] == "2024-03-10,Alice,sick; away back soon"


def test_flatten_text():
    assert flatten_text(None) == ""
    assert flatten_text("a,b\r\nc") == "a;b c"


class TestExcelGenerator:
    def test_bold_header_and_fixed_widths(self):
        results = [{"Week": "2024-03-10", "Member": "Alice", "Notes": "ok"}]
        content = ExcelGenerator.generate(
            results, COLUMNS, sheet_name="Reports", column_widths=[12, 20, 40]
        )

        sheet = load_workbook(io.BytesIO(content))["Reports"]
        assert [c.value for c in sheet[1]] == COLUMNS
        assert all(c.font.bold for c in sheet[1])
        assert sheet["B2"].value == "Alice"
        assert sheet.column_dimensions["A"].width == 12
        assert sheet.column_dimensions["C"].width == 40

    def test_empty_sheet_keeps_header(self):
        content = ExcelGenerator.generate([], COLUMNS, sheet_name="Reports")
        sheet = load_workbook(io.BytesIO(content))["Reports"]
        assert [c.value for c in sheet[1]] == COLUMNS
        assert sheet.max_row == 1

    def test_auto_width_is_capped(self):
        content = ExcelGenerator.generate([{"Week": "x" * 200, "Member": "", "Notes": ""}], COLUMNS)
        sheet = load_workbook(io.BytesIO(content))["Data"]
        assert sheet.column_dimensions["A"].width == 50
