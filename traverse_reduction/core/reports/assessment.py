"""Accuracy assessment inputs for an external advisory service.

The advisory service (a hosted language model in the field application) is
a one-shot, read-only consumer of a reduction. This module builds what it
reads: a closure snapshot and the prompt text. It never contacts the service.
"""

from __future__ import annotations

from typing import Any, Dict

from ..models.options import TraverseType
from ..results.traverse_result import TraverseResult


SYSTEM_INSTRUCTION = """You are a field intelligence assistant and senior surveying expert.
Your goal is to assist surveyors with field procedures, error analysis, and traverse geometry validation.
Always be concise, professional, and safety-conscious.
If the user presents a survey misclosure, analyze if it meets standard traverse specifications (e.g., 1:10,000 for standard engineering works).
Provide advice on:
1. Instrument Setup
2. Atmospheric corrections
3. Geometry checks (Strength of Figure)
4. Blunder detection"""


def assessment_summary(result: TraverseResult) -> Dict[str, Any]:
    """Closure snapshot of a reduction, rounded as it is presented."""
    return {
        "traverse_type": result.traverse_type.value,
        "total_length": round(result.total_length, 3),
        "misclosure_dist": round(result.misclosure_dist, 4),
        "misclosure_azimuth": round(result.misclosure_azimuth, 1),
        "precision": round(result.precision),
        "delta_e": round(result.delta_e, 4),
        "delta_n": round(result.delta_n, 4),
    }


def field_decision(result: TraverseResult, threshold: float = 10000.0) -> str:
    """ACCEPT if a closed traverse reaches 1:threshold, else REJECT.

    Open traverses carry no closure check and return ``"UNCHECKED"``.
    """
    if result.traverse_type is TraverseType.OPEN:
        return "UNCHECKED"
    return "ACCEPT" if result.precision >= threshold else "REJECT"


def build_assessment_prompt(result: TraverseResult, notes: str = "") -> str:
    """Prompt asking the advisory service to assess a reduction."""
    s = assessment_summary(result)
    return f"""
Analyze the following survey traverse results:

Traverse Type: {s['traverse_type']}
Total Length: {result.total_length:.3f} m
Misclosure Distance: {result.misclosure_dist:.4f} m
Misclosure Azimuth: {result.misclosure_azimuth:.1f} degrees
Relative Precision: 1:{s['precision']}
Closing Error dE: {result.delta_e:.4f}
Closing Error dN: {result.delta_n:.4f}

User Field Notes: "{notes}"

Please provide:
1. An assessment of the accuracy based on standard engineering survey classes (e.g., 1st order to 4th order).
2. Potential causes for error if precision is low (< 1:5000).
3. Recommendations for adjustment or re-observation.
4. A concise "Field Decision": ACCEPT or REJECT.
""".strip()
