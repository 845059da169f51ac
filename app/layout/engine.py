"""
app/layout/engine.py

Pagination of free narrative text into a fixed-size page plan.

The plan is computed in two passes. The content pass walks the title, the
table of contents and every narrative line, breaking pages whenever the
vertical cursor would run past the bottom margin. Once padding has fixed the
final page count N, the footer pass stamps "Page i of N" on every page.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from reportlab.lib.utils import simpleSplit
from reportlab.pdfbase.pdfmetrics import stringWidth

from app.domain.report import REPORT_FORMATS
from app.layout.plan import (
    BODY_SIZE,
    BODY_SPACE,
    BOLD_FONT,
    BULLET,
    CONTENT_WIDTH,
    HEADER_SIZE,
    HEADER_SPACE,
    LINE_HEIGHT_FACTOR,
    MARGIN,
    MIN_DETAILED_PAGES,
    PAGE_HEIGHT,
    PRESENTATION_BODY_SIZE,
    REGULAR_FONT,
    REPORT_TITLE,
    TITLE_SIZE,
    TOC_ENTRY_SIZE,
    TOC_HEADING,
    TOC_HEADING_SIZE,
    LayoutError,
    LayoutPage,
    LayoutPlan,
    PlacedLine,
    TocEntry,
)
from app.layout.renderer import render_plan


def normalize_heading(value: str) -> str:
    """
    Strip markdown heading decoration so titles compare on their words.
    """

    text = value.strip().lstrip("#").strip()
    text = text.strip("*_").strip()
    text = text.rstrip(":").strip()
    text = text.strip("*_").strip()
    return re.sub(r"\s+", " ", text).casefold()


def match_section(line: str, sections: Sequence[str]) -> int | None:
    """
    Return the index of the requested section this line is the header of.

    A line is a header only when its normalized text equals a section title;
    partial overlaps such as "Market" and "Market Overview" never match. When
    the same title is requested twice the earliest index wins.
    """

    candidate = normalize_heading(line)
    if not candidate:
        return None
    for index, section in enumerate(sections):
        if normalize_heading(section) == candidate:
            return index
    return None


def section_destination(index: int) -> str:
    return f"section{index + 1}"


def wrap_text(text: str, font_name: str, font_size: float) -> list[str]:
    """
    Wrap at whitespace, then break any token still wider than the content
    area character by character.
    """

    lines: list[str] = []
    for chunk in simpleSplit(text, font_name, font_size, CONTENT_WIDTH):
        if stringWidth(chunk, font_name, font_size) <= CONTENT_WIDTH:
            lines.append(chunk)
            continue
        piece = ""
        for char in chunk:
            if piece and stringWidth(piece + char, font_name, font_size) > CONTENT_WIDTH:
                lines.append(piece)
                piece = ""
            piece += char
        if piece:
            lines.append(piece)
    return lines


class _PageCursor:
    """
    Tracks the current page and the vertical write position on it.
    """

    def __init__(self, plan: LayoutPlan) -> None:
        self._plan = plan
        self.top = MARGIN
        self.new_page()

    @property
    def page(self) -> LayoutPage:
        return self._plan.pages[-1]

    @property
    def bottom(self) -> float:
        return PAGE_HEIGHT - MARGIN

    def new_page(self) -> None:
        self._plan.pages.append(LayoutPage(index=len(self._plan.pages)))
        self.top = MARGIN

    def ensure_space(self, needed: float) -> None:
        if self.top + needed > self.bottom:
            self.new_page()

    def move_down(self, font_size: float, lines: float = 1.0) -> None:
        self.top += font_size * LINE_HEIGHT_FACTOR * lines

    def write(
        self,
        text: str,
        *,
        kind: str,
        font_name: str,
        font_size: float,
        align: str = "left",
        link: str | None = None,
        anchor: str | None = None,
    ) -> None:
        wrapped = wrap_text(text, font_name, font_size) if text.strip() else []
        if not wrapped:
            wrapped = [""]

        line_height = font_size * LINE_HEIGHT_FACTOR
        for position, chunk in enumerate(wrapped):
            if self.top + line_height > self.bottom:
                self.new_page()
            line_anchor = anchor if position == 0 else None
            self.page.lines.append(
                PlacedLine(
                    text=chunk,
                    kind=kind,
                    font_name=font_name,
                    font_size=font_size,
                    top=self.top,
                    align=align,
                    link=link,
                    anchor=line_anchor,
                )
            )
            if line_anchor is not None:
                self._plan.anchors[line_anchor] = self.page.index
            self.top += line_height


class DocumentLayoutEngine:
    """
    Lays out a narrative into pages and renders it as a PDF.
    """

    def plan(self, text: str, sections: Sequence[str], report_format: str) -> LayoutPlan:
        if report_format not in REPORT_FORMATS:
            raise LayoutError(f"Unsupported report format {report_format!r}.")

        plan = LayoutPlan(report_format=report_format)
        cursor = _PageCursor(plan)

        cursor.write(
            REPORT_TITLE,
            kind="title",
            font_name=BOLD_FONT,
            font_size=TITLE_SIZE,
            align="center",
        )
        cursor.move_down(TITLE_SIZE)

        if report_format != "presentation":
            self._write_table_of_contents(cursor, plan, sections)

        for line in text.splitlines():
            index = match_section(line, sections)
            if index is not None:
                self._write_header(cursor, plan, line, section_destination(index))
            else:
                cursor.ensure_space(BODY_SPACE)
                if report_format == "presentation":
                    body = f"{BULLET}{line}" if line.strip() else line
                    cursor.write(
                        body,
                        kind="body",
                        font_name=REGULAR_FONT,
                        font_size=PRESENTATION_BODY_SIZE,
                    )
                else:
                    cursor.write(line, kind="body", font_name=REGULAR_FONT, font_size=BODY_SIZE)

        if report_format == "detailed":
            while plan.page_count < MIN_DETAILED_PAGES:
                cursor.new_page()

        total = plan.page_count
        for page in plan.pages:
            page.footer = f"Page {page.index + 1} of {total}"
        return plan

    def render(self, text: str, sections: Sequence[str], report_format: str) -> bytes:
        return render_plan(self.plan(text, sections, report_format))

    @staticmethod
    def _write_table_of_contents(
        cursor: _PageCursor,
        plan: LayoutPlan,
        sections: Sequence[str],
    ) -> None:
        cursor.write(
            TOC_HEADING,
            kind="toc_heading",
            font_name=BOLD_FONT,
            font_size=TOC_HEADING_SIZE,
        )
        cursor.move_down(TOC_HEADING_SIZE, 0.5)
        for index, section in enumerate(sections):
            entry = TocEntry(title=section, destination=section_destination(index))
            plan.toc_entries.append(entry)
            cursor.write(
                section,
                kind="toc_entry",
                font_name=REGULAR_FONT,
                font_size=TOC_ENTRY_SIZE,
                link=entry.destination,
            )
        cursor.move_down(TOC_ENTRY_SIZE)

    @staticmethod
    def _write_header(
        cursor: _PageCursor,
        plan: LayoutPlan,
        line: str,
        destination: str,
    ) -> None:
        # Repeated headers render normally but only the first one is a target.
        anchor = None if destination in plan.anchors else destination
        cursor.ensure_space(HEADER_SPACE)
        cursor.write(
            line.strip(),
            kind="header",
            font_name=BOLD_FONT,
            font_size=HEADER_SIZE,
            anchor=anchor,
        )
        cursor.move_down(HEADER_SIZE)
