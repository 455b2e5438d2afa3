"""Download routes: spreadsheets, CSV and printable meeting notes."""

from __future__ import annotations

import logging
from typing import Literal, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from celltrack.auth.dependencies import get_current_user, require_admin
from celltrack.common.db import get_db
from celltrack.common.weeks import parse_optional_week
from celltrack.exports.document_generator import MeetingNoteDocument
from celltrack.exports.export_generators import CSVGenerator, ExcelGenerator
from celltrack.exports.service import (
    REPORT_COLUMNS,
    REPORT_COLUMN_WIDTHS,
    SUMMARY_COLUMNS,
    ExportService,
)
from celltrack.meeting_notes.service import MeetingNoteService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/export", tags=["export"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _download(content: bytes | str, media_type: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@router.get("/excel", dependencies=[Depends(require_admin)])
async def export_excel(
    cell_group_id: Optional[UUID] = Query(None),
    week_start: Optional[str] = Query(None),
    week_end: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    rows = ExportService.report_rows(
        db,
        cell_group_id=cell_group_id,
        week_start=parse_optional_week(week_start, "week_start"),
        week_end=parse_optional_week(week_end, "week_end"),
    )
    content = ExcelGenerator.generate(
        rows,
        columns=REPORT_COLUMNS,
        sheet_name="Reports",
        column_widths=REPORT_COLUMN_WIDTHS,
    )
    logger.info(f"Exported {len(rows)} reports to Excel")
    return _download(content, XLSX_MEDIA_TYPE, "cell-group-reports.xlsx")


@router.get("/csv", dependencies=[Depends(require_admin)])
async def export_csv(
    cell_group_id: Optional[UUID] = Query(None),
    week_start: Optional[str] = Query(None),
    week_end: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    rows = ExportService.report_rows(
        db,
        cell_group_id=cell_group_id,
        week_start=parse_optional_week(week_start, "week_start"),
        week_end=parse_optional_week(week_end, "week_end"),
    )
    content = CSVGenerator.generate(rows, columns=REPORT_COLUMNS, flatten=["Notes"])
    logger.info(f"Exported {len(rows)} reports to CSV")
    return _download(content, "text/csv", "cell-group-reports.csv")


@router.get("/summary", dependencies=[Depends(require_admin)])
async def export_summary(
    week_start: Optional[str] = Query(None),
    week_end: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    """Per-group totals and per-member averages as a workbook."""
    rows = ExportService.summary_rows(
        db,
        week_start=parse_optional_week(week_start, "week_start"),
        week_end=parse_optional_week(week_end, "week_end"),
    )
    content = ExcelGenerator.generate(rows, columns=SUMMARY_COLUMNS, sheet_name="Summary")
    return _download(content, XLSX_MEDIA_TYPE, "cell-group-summary.xlsx")


@router.get("/meeting-note/{note_id}/pdf", dependencies=[Depends(get_current_user)])
async def export_meeting_note(
    note_id: UUID,
    output_format: Literal["pdf", "html"] = Query("pdf", alias="format"),
    db: Session = Depends(get_db),
):
    """Download a meeting note as a PDF, or as its printable HTML page."""
    document = MeetingNoteDocument(MeetingNoteService.require_note(db, note_id))
    if output_format == "html":
        return _download(
            document.render_html(), "text/html", f"{document.filename_stem}.html"
        )
    return _download(
        document.render_pdf(), "application/pdf", f"{document.filename_stem}.pdf"
    )
