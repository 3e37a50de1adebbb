"""Reports for traverse reductions (HTML, advisory assessment)."""

from .html_report import render_html_report, save_html_report, group_legs_by_station, StationGroup
from .assessment import (
    SYSTEM_INSTRUCTION,
    assessment_summary,
    build_assessment_prompt,
    field_decision,
)

__all__ = [
    "render_html_report",
    "save_html_report",
    "group_legs_by_station",
    "StationGroup",
    "SYSTEM_INSTRUCTION",
    "assessment_summary",
    "build_assessment_prompt",
    "field_decision",
]
