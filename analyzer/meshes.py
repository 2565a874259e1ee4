"""
analyzer/meshes.py — Static mesh rules

R1 flags meshes whose LOD 0 triangle count exceeds the configured budget.
R2 flags dense meshes that ship without a LOD chain. Both may fire on the
same mesh.
"""
import logging
from typing import List

from analyzer import scoring
from analyzer.thresholds import Thresholds
from models.issue import Category, Issue
from sources.views import MeshView

logger = logging.getLogger(__name__)

MISSING_LOD_MIN_TRIANGLES = 10000


def check_high_poly(mesh: MeshView, thresholds: Thresholds) -> List[Issue]:
    """Flag a mesh whose LOD 0 triangle count is over the budget."""
    triangles = mesh.triangles
    if triangles is None:
        logger.debug("Mesh %s has no LOD 0 render data", mesh.path)
        return []

    limit = thresholds.max_triangles_per_mesh
    if triangles <= limit:
        return []

    ratio = scoring.excess_ratio(triangles, limit)
    return [_issue(
        "R1", f"High Poly Count: {mesh.name}",
        f"Mesh has {triangles} triangles (threshold: {limit}, "
        f"{scoring.format_ratio(ratio)}x over budget).",
        scoring.high_poly_impact(ratio),
        mesh.path,
        "Reduce the polygon count or author a LOD chain.",
        {"triangles": triangles, "threshold": limit, "ratio": round(ratio, 4)},
    )]


def check_missing_lods(mesh: MeshView, thresholds: Thresholds) -> List[Issue]:
    """Flag a dense mesh that has no LOD chain."""
    if mesh.triangles is None or mesh.lod_count is None:
        return []
    if mesh.lod_count > 1 or mesh.triangles <= MISSING_LOD_MIN_TRIANGLES:
        return []

    return [_issue(
        "R2", f"Missing LODs: {mesh.name}",
        f"Mesh has {mesh.triangles} triangles and {mesh.lod_count} LOD(s); "
        f"meshes above {MISSING_LOD_MIN_TRIANGLES} triangles should have a LOD chain.",
        scoring.missing_lod_impact(mesh.triangles),
        mesh.path,
        "Generate a LOD chain (automatic LOD generation or hand-authored LODs).",
        {"triangles": mesh.triangles, "lod_count": mesh.lod_count},
    )]


def _issue(rule_id, title, description, impact, asset_path, fix, details) -> Issue:
    return Issue(
        rule_id=rule_id,
        title=title,
        description=description,
        category=Category.MESH,
        severity=scoring.severity_for(impact),
        impact=impact,
        asset_path=asset_path,
        suggested_fix=fix,
        details=details,
    )
