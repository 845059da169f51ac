"""
app/layout/plan.py

Page geometry and the page-plan data model shared by pagination and rendering.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from reportlab.lib.pagesizes import A4

PAGE_WIDTH, PAGE_HEIGHT = A4
MARGIN = 50.0
CONTENT_WIDTH = PAGE_WIDTH - 2 * MARGIN
CONTENT_HEIGHT = PAGE_HEIGHT - 2 * MARGIN
LINE_HEIGHT_FACTOR = 1.2

REPORT_TITLE = "Competitive Intelligence Report"
TOC_HEADING = "Table of Contents"
BULLET = "• "

REGULAR_FONT = "Helvetica"
BOLD_FONT = "Helvetica-Bold"

TITLE_SIZE = 24.0
TOC_HEADING_SIZE = 18.0
TOC_ENTRY_SIZE = 12.0
HEADER_SIZE = 18.0
BODY_SIZE = 12.0
PRESENTATION_BODY_SIZE = 14.0
FOOTER_SIZE = 10.0
FOOTER_OFFSET = 50.0

HEADER_SPACE = 100.0
BODY_SPACE = 20.0
MIN_DETAILED_PAGES = 15


class LayoutError(ValueError):
    """
    Raised when the layout engine receives inputs it cannot lay out.
    """


@dataclass(frozen=True)
class PlacedLine:
    """
    One line of text at a fixed position on a page.

    ``top`` is the distance from the top edge of the page to the top of the
    line box; ``kind`` is one of title, toc_heading, toc_entry, header, body.
    """

    text: str
    kind: str
    font_name: str
    font_size: float
    top: float
    align: str = "left"
    link: str | None = None
    anchor: str | None = None

    @property
    def height(self) -> float:
        return self.font_size * LINE_HEIGHT_FACTOR


@dataclass
class LayoutPage:
    index: int
    lines: list[PlacedLine] = field(default_factory=list)
    footer: str = ""

    def lines_of_kind(self, kind: str) -> list[PlacedLine]:
        return [line for line in self.lines if line.kind == kind]


@dataclass(frozen=True)
class TocEntry:
    title: str
    destination: str


@dataclass
class LayoutPlan:
    """
    Complete page structure of one report.

    ``anchors`` maps each registered destination name to the page index it
    lives on; TOC entries whose destination is absent are dead links.
    """

    report_format: str
    pages: list[LayoutPage] = field(default_factory=list)
    toc_entries: list[TocEntry] = field(default_factory=list)
    anchors: dict[str, int] = field(default_factory=dict)

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def lines_of_kind(self, kind: str) -> list[tuple[int, PlacedLine]]:
        return [(page.index, line) for page in self.pages for line in page.lines_of_kind(kind)]
