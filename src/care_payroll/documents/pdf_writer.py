"""
Render receipt documents to PDF using reportlab.

Layout:
  - Title centered at top
  - Header key/value block
  - One styled table per receipt table, footer row in bold
  - Summary lines right-aligned, then notes and footer text
"""

from __future__ import annotations

import io
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_RIGHT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from care_payroll.documents.types import ReceiptDocument, ReceiptTable

HEADER_BG = colors.HexColor("#2c3e50")
FOOTER_BG = colors.HexColor("#ecf0f1")
GRID = colors.HexColor("#dddddd")


class PdfDocumentWriter:
    """Writes a receipt document as PDF bytes.

    Output is produced in reportlab's invariant mode, so the same document
    always yields the same bytes.
    """

    media_type = "application/pdf"
    extension = "pdf"

    def __init__(self, pagesize: tuple[float, float] = A4):
        self.pagesize = pagesize
        styles = getSampleStyleSheet()
        self.title_style = ParagraphStyle(
            "title", parent=styles["Normal"], fontName="Helvetica-Bold",
            fontSize=18, alignment=TA_CENTER, spaceAfter=4 * mm,
        )
        self.section_style = ParagraphStyle(
            "section", parent=styles["Normal"], fontName="Helvetica-Bold", fontSize=12,
        )
        self.normal = ParagraphStyle(
            "normal", parent=styles["Normal"], fontName="Helvetica", fontSize=10,
        )
        self.right_bold = ParagraphStyle(
            "right_bold", parent=styles["Normal"], fontName="Helvetica-Bold",
            fontSize=12, alignment=TA_RIGHT,
        )
        self.small = ParagraphStyle(
            "small", parent=styles["Normal"], fontName="Helvetica", fontSize=8,
            textColor=colors.grey, alignment=TA_CENTER,
        )

    def write(self, document: ReceiptDocument) -> bytes:
        buf = io.BytesIO()
        doc = SimpleDocTemplate(
            buf,
            pagesize=self.pagesize,
            leftMargin=20 * mm,
            rightMargin=20 * mm,
            topMargin=15 * mm,
            bottomMargin=15 * mm,
            title=document.title,
            invariant=1,
        )
        page_width = self.pagesize[0] - 40 * mm

        story = [Paragraph(escape(document.title), self.title_style)]

        if document.header_lines:
            header = Table(
                [
                    [Paragraph(f"<b>{escape(key)}:</b>", self.normal),
                     Paragraph(escape(value), self.normal)]
                    for key, value in document.header_lines
                ],
                colWidths=[page_width * 0.3, page_width * 0.7],
            )
            header.setStyle(TableStyle([
                ("TOPPADDING", (0, 0), (-1, -1), 2),
                ("BOTTOMPADDING", (0, 0), (-1, -1), 2),
            ]))
            story.append(header)
            story.append(Spacer(1, 5 * mm))

        for table in document.tables:
            if table.title:
                story.append(Paragraph(escape(table.title), self.section_style))
                story.append(Spacer(1, 2 * mm))
            story.append(self._table(table, page_width))
            story.append(Spacer(1, 5 * mm))

        for key, value in document.summary_lines:
            story.append(Paragraph(f"{escape(key)}: {escape(value)}", self.right_bold))

        if document.notes:
            story.append(Spacer(1, 5 * mm))
            story.append(Paragraph("<b>Notes:</b>", self.normal))
            story.append(Paragraph(escape(document.notes), self.normal))

        if document.footer:
            story.append(Spacer(1, 8 * mm))
            story.append(Paragraph(escape(document.footer), self.small))

        doc.build(story)
        return buf.getvalue()

    def _table(self, table: ReceiptTable, page_width: float) -> Table:
        data = [list(table.columns)]
        data.extend(list(row) for row in table.rows)
        if table.footer_row is not None:
            data.append(list(table.footer_row))

        col_width = page_width / max(len(table.columns), 1)
        tbl = Table(data, colWidths=[col_width] * len(table.columns), repeatRows=1)

        style_cmds = [
            ("BACKGROUND", (0, 0), (-1, 0), HEADER_BG),
            ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
            ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
            ("FONTSIZE", (0, 0), (-1, -1), 9),
            ("INNERGRID", (0, 0), (-1, -1), 0.25, GRID),
            ("BOX", (0, 0), (-1, -1), 0.5, GRID),
            ("ALIGN", (1, 1), (-1, -1), "RIGHT"),
            ("TOPPADDING", (0, 0), (-1, -1), 4),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
        ]
        if table.footer_row is not None:
            style_cmds += [
                ("BACKGROUND", (0, -1), (-1, -1), FOOTER_BG),
                ("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"),
            ]
        tbl.setStyle(TableStyle(style_cmds))
        return tbl
