"""Export generators for CSV and Excel formats."""

from __future__ import annotations

import io
import logging
from typing import Any, Optional, Sequence

import pandas as pd
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

logger = logging.getLogger(__name__)


def flatten_text(value: Any) -> str:
    """Make free text safe for a naive comma-separated consumer."""
    if value is None:
        return ""
    return (
        str(value)
        .replace(",", ";")
        .replace("\r\n", " ")
        .replace("\r", " ")
        .replace("\n", " ")
    )


class CSVGenerator:
    """Generate CSV exports from query results."""

    @staticmethod
    def generate(
        results: list[dict[str, Any]],
        columns: Sequence[str],
        flatten: Sequence[str] = (),
    ) -> bytes:
        """
        Generate a CSV file from query results.

        Args:
            results: List of result dictionaries keyed by column header
            columns: Column headers, in output order; always written
            flatten: Columns whose text gets commas and line breaks replaced

        Returns:
            CSV file content as bytes
        """
        df = pd.DataFrame(results, columns=list(columns))
        for column in flatten:
            df[column] = df[column].map(flatten_text)

        buffer = io.BytesIO()
        df.to_csv(buffer, index=False, encoding="utf-8", lineterminator="\n")
        buffer.seek(0)
        return buffer.read()


class ExcelGenerator:
    """Generate Excel exports from query results."""

    @staticmethod
    def generate(
        results: list[dict[str, Any]],
        columns: Sequence[str],
        sheet_name: str = "Data",
        column_widths: Optional[Sequence[int]] = None,
    ) -> bytes:
        """
        Generate an Excel workbook with a single sheet.

        Args:
            results: List of result dictionaries keyed by column header
            columns: Column headers, in output order
            sheet_name: Sheet name
            column_widths: Fixed widths per column; auto-sized when omitted

        Returns:
            Excel file content as bytes
        """
        df = pd.DataFrame(results, columns=list(columns))

        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
            df.to_excel(writer, sheet_name=sheet_name, index=False)

            worksheet = writer.sheets[sheet_name]
            for cell in worksheet[1]:
                cell.font = Font(bold=True)

            for index, column in enumerate(columns):
                letter = get_column_letter(index + 1)
                if column_widths:
                    width = column_widths[index]
                else:
                    longest = max(
                        [len(str(column))] + [len(str(v)) for v in df[column].tolist()]
                    )
                    width = min(longest + 2, 50)
                worksheet.column_dimensions[letter].width = width

        buffer.seek(0)
        logger.debug(f"Generated {sheet_name} workbook with {len(df)} rows")
        return buffer.read()
