"""PDF export of the digital maturity report.

Implements the IReportRenderer interface with reportlab's platypus layout:
title block, identity fields, overall score, one table per pillar and the
narrative text. The narrative arrives as markdown with HTML already stripped;
headings, bullet lists and **bold** spans are mapped to reportlab styles and
everything else is escaped before it reaches a Paragraph.
"""

import re
from io import BytesIO
from xml.sax.saxutils import escape as xml_escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import LETTER
from reportlab.lib.styles import ParagraphStyle, StyleSheet1, getSampleStyleSheet
from reportlab.platypus import Flowable, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from madurez_digital.core.dashboard import (
    ReportDocument,
    maturity_level_label,
    percentage,
)
from madurez_digital.core.scoring import round_score
from madurez_digital.observability import get_logger

logger = get_logger(__name__)

_HEADING_PATTERN = re.compile(r"^(#{1,6})\s+(.*)$")
_BULLET_PATTERN = re.compile(r"^\s*(?:[-*+]|\d+[.)])\s+(.*)$")
_BOLD_PATTERN = re.compile(r"\*\*(.+?)\*\*")

_PRIMARY = colors.HexColor("#1f3b73")


def _build_styles() -> StyleSheet1:
    styles = getSampleStyleSheet()
    styles.add(
        ParagraphStyle(
            name="ReportTitle",
            parent=styles["Title"],
            fontName="Helvetica-Bold",
            fontSize=20,
            leading=24,
            textColor=_PRIMARY,
            spaceAfter=6,
        )
    )
    styles.add(
        ParagraphStyle(
            name="SectionHeading",
            parent=styles["Heading2"],
            fontName="Helvetica-Bold",
            fontSize=14,
            textColor=_PRIMARY,
            spaceBefore=12,
            spaceAfter=6,
        )
    )
    styles.add(
        ParagraphStyle(
            name="NarrativeBullet",
            parent=styles["BodyText"],
            leftIndent=14,
            bulletIndent=4,
        )
    )
    return styles


def _inline_markup(text: str) -> str:
    """Escape text for a Paragraph and turn **bold** spans into <b> tags."""
    return _BOLD_PATTERN.sub(r"<b>\1</b>", xml_escape(text))


def narrative_flowables(narrative: str, styles: StyleSheet1) -> list[Flowable]:
    """Convert markdown narrative text into reportlab flowables.

    Args:
        narrative: Narrative markdown with HTML tags removed.
        styles: Stylesheet from _build_styles().

    Returns:
        Flowables in reading order. Empty text yields an empty list.
    """
    heading_styles = {1: "Heading2", 2: "Heading3", 3: "Heading4"}
    flowables: list[Flowable] = []
    paragraph_lines: list[str] = []

    def flush_paragraph() -> None:
        if paragraph_lines:
            text = " ".join(line.strip() for line in paragraph_lines)
            flowables.append(Paragraph(_inline_markup(text), styles["BodyText"]))
            paragraph_lines.clear()

    for line in narrative.replace("\r\n", "\n").split("\n"):
        if not line.strip():
            flush_paragraph()
            continue

        heading = _HEADING_PATTERN.match(line)
        if heading:
            flush_paragraph()
            style_name = heading_styles.get(len(heading.group(1)), "Heading4")
            flowables.append(Paragraph(_inline_markup(heading.group(2)), styles[style_name]))
            continue

        bullet = _BULLET_PATTERN.match(line)
        if bullet:
            flush_paragraph()
            flowables.append(
                Paragraph(
                    _inline_markup(bullet.group(1)),
                    styles["NarrativeBullet"],
                    bulletText="•",
                )
            )
            continue

        paragraph_lines.append(line)

    flush_paragraph()
    return flowables


def _pillar_table(categories: tuple[tuple[str, float], ...], styles: StyleSheet1) -> Table:
    rows: list[list[object]] = [["Categoría", "Puntaje", "%"]]
    for label, value in categories:
        rows.append(
            [
                Paragraph(xml_escape(label), styles["BodyText"]),
                f"{value:.2f}",
                f"{percentage(value):.0f}%",
            ]
        )

    table = Table(rows, colWidths=[300, 80, 60], hAlign="LEFT")
    table.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, 0), _PRIMARY),
                ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                ("ALIGN", (1, 0), (-1, -1), "RIGHT"),
                ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
                ("GRID", (0, 0), (-1, -1), 0.25, colors.grey),
                ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.whitesmoke]),
            ]
        )
    )
    return table


class PdfReportRenderer:
    """Renders a ReportDocument into PDF bytes."""

    media_type: str = "application/pdf"

    def render(self, document: ReportDocument) -> bytes:
        """Lay out the document and return the PDF bytes.

        Args:
            document: Content assembled by build_report_document().

        Returns:
            Raw PDF bytes.
        """
        styles = _build_styles()
        buffer = BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=LETTER,
            leftMargin=36,
            rightMargin=36,
            topMargin=36,
            bottomMargin=36,
            title=document.title,
            author=document.user_name or "",
        )

        story: list[Flowable] = [Paragraph(xml_escape(document.title), styles["ReportTitle"])]
        if document.user_name:
            story.append(
                Paragraph(f"<b>Nombre:</b> {xml_escape(document.user_name)}", styles["Normal"])
            )
        if document.company_name:
            story.append(
                Paragraph(f"<b>Empresa:</b> {xml_escape(document.company_name)}", styles["Normal"])
            )

        overall_level = maturity_level_label(document.overall_average)
        overall_line = f"<b>Madurez Digital:</b> {round_score(document.overall_average):.2f} / 5"
        if overall_level:
            overall_line += f" ({xml_escape(overall_level)})"
        story.append(Spacer(1, 6))
        story.append(Paragraph(overall_line, styles["Normal"]))

        for index, pillar in enumerate(document.pillars, start=1):
            story.append(
                Paragraph(
                    f"{index}. {xml_escape(pillar.label)}: {round_score(pillar.average):.2f}",
                    styles["SectionHeading"],
                )
            )
            story.append(_pillar_table(pillar.categories, styles))

        narrative = narrative_flowables(document.narrative, styles)
        if narrative:
            story.append(Paragraph("Análisis", styles["SectionHeading"]))
            story.extend(narrative)

        def _footer(canvas, doc_) -> None:  # type: ignore[no-untyped-def]
            canvas.saveState()
            canvas.setFont("Helvetica", 8)
            width, _height = doc_.pagesize
            canvas.drawString(36, 20, document.title)
            canvas.drawRightString(width - 36, 20, f"Página {doc_.page}")
            canvas.restoreState()

        doc.build(story, onFirstPage=_footer, onLaterPages=_footer)
        pdf_bytes = buffer.getvalue()
        buffer.close()

        logger.debug(
            "PDF report rendered",
            pillar_count=len(document.pillars),
            size_bytes=len(pdf_bytes),
        )
        return pdf_bytes
