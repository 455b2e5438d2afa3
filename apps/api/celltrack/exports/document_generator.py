"""Printable meeting note documents: a styled HTML view and a reportlab PDF."""

from __future__ import annotations

import html
import io
import logging
from datetime import date, datetime
from string import Template
from typing import Optional

from bs4 import BeautifulSoup, Comment, NavigableString, Tag
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.platypus import (
    HRFlowable,
    ListFlowable,
    ListItem,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
)

from celltrack.common.models import MeetingNote
from celltrack.common.sanitize import sanitize_html

logger = logging.getLogger(__name__)

HTML_TEMPLATE = Template("""<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
    <title>$title</title>
    <style>
        body {
            font-family: 'Segoe UI', Arial, sans-serif;
            max-width: 800px;
            margin: 0 auto;
            padding: 40px;
            line-height: 1.6;
            color: #333;
        }
        .header { border-bottom: 2px solid #6366f1; padding-bottom: 20px; margin-bottom: 30px; }
        .title { font-size: 28px; font-weight: bold; color: #1e1e2f; margin-bottom: 10px; }
        .date { color: #64748b; font-size: 14px; }
        .content { font-size: 14px; }
        .content h1 { font-size: 24px; margin-top: 20px; }
        .content h2 { font-size: 20px; margin-top: 18px; }
        .content h3 { font-size: 16px; margin-top: 16px; }
        .content ul, .content ol { margin-left: 20px; margin-bottom: 15px; }
        .content li { margin-bottom: 8px; }
        .content p { margin-bottom: 12px; }
        .content mark { background-color: #fef08a; padding: 2px 4px; border-radius: 2px; }
        .footer {
            margin-top: 40px;
            padding-top: 20px;
            border-top: 1px solid #e2e8f0;
            font-size: 12px;
            color: #94a3b8;
            text-align: center;
        }
    </style>
</head>
<body>
    <div class="header">
        <div class="title">$title</div>
        <div class="date">Week of $week</div>
    </div>
    <div class="content">
        $content
    </div>
    <div class="footer">
        Generated on $generated
    </div>
</body>
</html>
""")

INLINE_TAGS = {
    "strong": "b",
    "b": "b",
    "em": "i",
    "i": "i",
    "u": "u",
    "s": "strike",
}

HEADING_STYLES = {"h1": "NoteH1", "h2": "NoteH2", "h3": "NoteH3", "h4": "NoteH3"}

BLOCK_TAGS = {"p", "div", "blockquote", "ul", "ol"} | set(HEADING_STYLES)


def long_date(value: date) -> str:
    """``March 3, 2024``"""
    return f"{value.strftime('%B')} {value.day}, {value.year}"


class MeetingNoteDocument:
    """Render one meeting note for printing or download."""

    def __init__(self, note: MeetingNote, generated_on: Optional[date] = None):
        self.note = note
        self.generated_on = generated_on or datetime.now().date()
        self.content = sanitize_html(note.content)
        self.styles = getSampleStyleSheet()
        self._setup_custom_styles()

    def _setup_custom_styles(self):
        self.styles.add(
            ParagraphStyle(
                name="NoteTitle",
                parent=self.styles["Title"],
                fontSize=24,
                leading=28,
                textColor=colors.HexColor("#1e1e2f"),
                alignment=0,
                spaceAfter=6,
            )
        )
        self.styles.add(
            ParagraphStyle(
                name="NoteDate",
                parent=self.styles["Normal"],
                textColor=colors.HexColor("#64748b"),
                spaceAfter=12,
            )
        )
        for name, parent, size in (
            ("NoteH1", "Heading1", 18),
            ("NoteH2", "Heading2", 15),
            ("NoteH3", "Heading3", 13),
        ):
            self.styles.add(
                ParagraphStyle(name=name, parent=self.styles[parent], fontSize=size)
            )
        self.styles.add(
            ParagraphStyle(
                name="NoteBody",
                parent=self.styles["Normal"],
                fontSize=11,
                leading=16,
                spaceAfter=8,
            )
        )
        self.styles.add(
            ParagraphStyle(
                name="NoteFooter",
                parent=self.styles["Normal"],
                fontSize=9,
                textColor=colors.HexColor("#94a3b8"),
                alignment=TA_CENTER,
            )
        )

    @property
    def filename_stem(self) -> str:
        return f"meeting-note-{self.note.id}"

    def render_html(self) -> str:
        """The standalone print view; the browser turns it into a PDF."""
        return HTML_TEMPLATE.substitute(
            title=html.escape(self.note.title),
            week=long_date(self.note.week_date),
            content=self.content,
            generated=long_date(self.generated_on),
        )

    def render_pdf(self) -> bytes:
        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            rightMargin=50,
            leftMargin=50,
            topMargin=50,
            bottomMargin=50,
            title=self.note.title,
        )

        story = [
            Paragraph(html.escape(self.note.title), self.styles["NoteTitle"]),
            Paragraph(
                f"Week of {long_date(self.note.week_date)}", self.styles["NoteDate"]
            ),
            HRFlowable(width="100%", thickness=2, color=colors.HexColor("#6366f1")),
            Spacer(1, 18),
        ]
        story.extend(self.body_flowables())
        story.extend(
            [
                Spacer(1, 30),
                HRFlowable(width="100%", thickness=0.5, color=colors.HexColor("#e2e8f0")),
                Spacer(1, 6),
                Paragraph(
                    f"Generated on {long_date(self.generated_on)}",
                    self.styles["NoteFooter"],
                ),
            ]
        )

        doc.build(story)
        buffer.seek(0)
        logger.debug(f"Rendered PDF for meeting note {self.note.id}")
        return buffer.read()

    def body_flowables(self) -> list:
        return self._flowables(BeautifulSoup(self.content, "html.parser"))

    def _flowables(self, node: Tag) -> list:
        """Block-level flowables for the children of ``node``.

        Loose text and inline tags between blocks are gathered into one
        body paragraph.
        """
        flowables = []
        pending: list[str] = []

        def flush():
            markup = "".join(pending).strip()
            pending.clear()
            if markup:
                flowables.append(Paragraph(markup, self.styles["NoteBody"]))

        for child in node.children:
            if isinstance(child, Tag) and child.name in BLOCK_TAGS:
                flush()
                flowables.extend(self._block(child))
            else:
                pending.append(self._inline(child))
        flush()
        return flowables

    def _block(self, tag: Tag) -> list:
        if tag.name in HEADING_STYLES:
            text = self._inline(tag).strip()
            return [Paragraph(text, self.styles[HEADING_STYLES[tag.name]])] if text else []
        if tag.name in ("ul", "ol"):
            return self._list(tag)
        # p, div, blockquote may hold nested blocks of their own
        return self._flowables(tag)

    def _list(self, tag: Tag) -> list:
        """A list flowable; loose content between items joins the item before it."""
        lead: list = []
        items: list[list] = []
        pending: list[str] = []

        def target() -> list:
            return items[-1] if items else lead

        def flush():
            markup = "".join(pending).strip()
            pending.clear()
            if markup:
                target().append(Paragraph(markup, self.styles["NoteBody"]))

        for child in tag.children:
            if isinstance(child, Tag) and child.name == "li":
                flush()
                items.append(self._flowables(child))
            elif isinstance(child, Tag) and child.name in BLOCK_TAGS:
                flush()
                target().extend(self._block(child))
            else:
                pending.append(self._inline(child))
        flush()

        if not items:
            return lead
        return lead + [
            ListFlowable(
                [
                    ListItem(item or [Paragraph("", self.styles["NoteBody"])])
                    for item in items
                ],
                bulletType="1" if tag.name == "ol" else "bullet",
                leftIndent=18,
            )
        ]

    def _inline(self, node) -> str:
        """reportlab paragraph markup for an inline node."""
        if isinstance(node, Comment):
            return ""
        if isinstance(node, NavigableString):
            return html.escape(str(node), quote=False)
        if not isinstance(node, Tag):
            return ""

        inner = "".join(self._inline(child) for child in node.children)
        if node.name == "br":
            return "<br/>"
        if node.name in INLINE_TAGS:
            wrapper = INLINE_TAGS[node.name]
            return f"<{wrapper}>{inner}</{wrapper}>"
        if node.name == "a" and node.get("href"):
            href = html.escape(node["href"], quote=True)
            return f'<a href="{href}" color="blue">{inner}</a>'
        if node.name == "li":
            return inner + "<br/>"
        return inner
