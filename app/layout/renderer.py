"""
app/layout/renderer.py

Draws a LayoutPlan onto a reportlab canvas and returns the PDF bytes.
"""

from __future__ import annotations

import io

from reportlab.pdfgen import canvas

from app.layout.plan import (
    FOOTER_OFFSET,
    FOOTER_SIZE,
    MARGIN,
    PAGE_HEIGHT,
    PAGE_WIDTH,
    REGULAR_FONT,
    REPORT_TITLE,
    LayoutPage,
    LayoutPlan,
    PlacedLine,
)


def render_plan(plan: LayoutPlan) -> bytes:
    """
    Serialize the plan as a PDF.

    The canvas is created with ``invariant=1`` so the same plan always
    produces the same bytes.
    """

    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=(PAGE_WIDTH, PAGE_HEIGHT), invariant=1)
    pdf.setTitle(REPORT_TITLE)
    pdf.setAuthor("Rival Report")

    for page in plan.pages:
        _draw_page(pdf, page, plan)
        pdf.showPage()

    pdf.save()
    return buffer.getvalue()


def _draw_page(pdf: canvas.Canvas, page: LayoutPage, plan: LayoutPlan) -> None:
    for line in page.lines:
        baseline = PAGE_HEIGHT - line.top - line.font_size
        pdf.setFont(line.font_name, line.font_size)
        if line.align == "center":
            pdf.drawCentredString(PAGE_WIDTH / 2, baseline, line.text)
        else:
            pdf.drawString(MARGIN, baseline, line.text)

        if line.anchor is not None:
            pdf.bookmarkHorizontal(line.anchor, 0, PAGE_HEIGHT - line.top)
            pdf.addOutlineEntry(line.text, line.anchor, level=0)

        # reportlab refuses to save links to undefined destinations.
        if line.link is not None and line.link in plan.anchors:
            pdf.linkRect("", line.link, _line_rect(pdf, line), relative=0, thickness=0)

    pdf.setFont(REGULAR_FONT, FOOTER_SIZE)
    pdf.drawCentredString(PAGE_WIDTH / 2, FOOTER_OFFSET - FOOTER_SIZE, page.footer)


def _line_rect(pdf: canvas.Canvas, line: PlacedLine) -> tuple[float, float, float, float]:
    width = pdf.stringWidth(line.text, line.font_name, line.font_size)
    x1 = MARGIN if line.align != "center" else (PAGE_WIDTH - width) / 2
    top = PAGE_HEIGHT - line.top
    return (x1, top - line.height, x1 + width, top)
