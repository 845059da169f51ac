"""
Document layout: pagination plan and PDF rendering.
"""

from app.layout.engine import DocumentLayoutEngine, match_section, normalize_heading
from app.layout.plan import LayoutError, LayoutPage, LayoutPlan, PlacedLine, TocEntry
from app.layout.renderer import render_plan

__all__ = [
    "DocumentLayoutEngine",
    "LayoutError",
    "LayoutPage",
    "LayoutPlan",
    "PlacedLine",
    "TocEntry",
    "match_section",
    "normalize_heading",
    "render_plan",
]
