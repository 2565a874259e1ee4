"""
analyzer/scoring.py — Impact formulas, severity map and report ordering.

Every rule turns its measurement into an impact score in [0, 100]; severity
is then a function of impact alone (the two-sided material rule is the one
fixed-severity exception and does not go through ``severity_for``).
"""
from typing import Any, Dict, Iterable, List

from models.issue import Category, Issue, Severity

# Severity map: critical above 75, warning above 45, info otherwise.
CRITICAL_ABOVE = 75.0
WARNING_ABOVE = 45.0

TWO_SIDED_IMPACT = 35.0

LOD_REFERENCE_TRIANGLES = 50000
TICK_REFERENCE_NODES = 200
SHADER_INSTRUCTION_BUDGET = 300
BYTES_PER_PIXEL = 4


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def excess_ratio(measured: float, threshold: float) -> float:
    return measured / threshold


def severity_for(impact: float) -> Severity:
    if impact > CRITICAL_ABOVE:
        return Severity.CRITICAL
    if impact > WARNING_ABOVE:
        return Severity.WARNING
    return Severity.INFO


# ── Per-rule impact formulas ───────────────────────────────────────────────────

def high_poly_impact(ratio: float) -> float:
    return clamp(60.0 * (ratio - 1.0) + 10.0, 10.0, 100.0)


def missing_lod_impact(triangles: int) -> float:
    return clamp(40.0 * (triangles / LOD_REFERENCE_TRIANGLES) + 20.0, 20.0, 70.0)


def texture_memory_mb(dimension: int) -> int:
    """Uncompressed RGBA8 footprint of a square texture of ``dimension`` texels, in whole MB."""
    return (dimension * dimension * BYTES_PER_PIXEL) // (1 << 20)


def large_texture_impact(ratio: float, memory_mb: float) -> float:
    return clamp(45.0 * (ratio - 1.0) + min(memory_mb / 8.0, 40.0) + 10.0, 10.0, 100.0)


def texture_samples_impact(ratio: float) -> float:
    return clamp(50.0 * (ratio - 1.0) + 20.0, 20.0, 95.0)


def translucent_impact(sample_count: int) -> float:
    return clamp(8.0 * sample_count, 30.0, 80.0)


def shader_complexity_impact(instructions: int) -> float:
    ratio = excess_ratio(instructions, SHADER_INSTRUCTION_BUDGET)
    return clamp(60.0 * (ratio - 1.0) + 25.0, 25.0, 90.0)


def blueprint_complexity_impact(ratio: float) -> float:
    return clamp(55.0 * (ratio - 1.0) + 15.0, 15.0, 100.0)


def tick_impact(node_count: int) -> float:
    return clamp(60.0 * (node_count / TICK_REFERENCE_NODES) + 25.0, 25.0, 95.0)


def instance_ratio_impact(base_materials: int, instances: int) -> float:
    return clamp(20.0 * (3.0 - instances / base_materials), 25.0, 60.0)


# ── Ordering & summary ─────────────────────────────────────────────────────────

def sort_key(issue: Issue):
    return (-issue.severity.rank, -issue.impact)


def sort_issues(issues: Iterable[Issue]) -> List[Issue]:
    """Severity descending, then impact descending. ``sorted`` is stable, so ties keep emission order."""
    return sorted(issues, key=sort_key)


def summarize(issues: Iterable[Issue]) -> Dict[str, Any]:
    """
    Count issues per severity and per category.

    Returns:
        {
            "total": int,
            "severity_counts": {"critical": n, "warning": n, "info": n},
            "category_counts": {"mesh": n, ...},
            "max_impact": float,
        }
    """
    severity_counts = {s.value: 0 for s in sorted(Severity, key=lambda s: -s.rank)}
    category_counts = {c.value: 0 for c in Category}
    total = 0
    max_impact = 0.0

    for issue in issues:
        total += 1
        severity_counts[issue.severity.value] += 1
        category_counts[issue.category.value] += 1
        max_impact = max(max_impact, issue.impact)

    return {
        "total": total,
        "severity_counts": severity_counts,
        "category_counts": category_counts,
        "max_impact": round(max_impact, 2),
    }


def format_ratio(ratio: float) -> str:
    """At most two decimals, trailing zeros dropped but one kept: 3.2, 1.25, 2.0."""
    text = f"{ratio:.2f}".rstrip("0")
    if text.endswith("."):
        text += "0"
    return text
