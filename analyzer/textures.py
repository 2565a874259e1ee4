"""
analyzer/textures.py — Texture rules

R3 flags textures whose largest dimension exceeds the configured size and
estimates their uncompressed memory footprint.
"""
import logging
from typing import List

from analyzer import scoring
from analyzer.thresholds import Thresholds
from models.issue import Category, Issue
from sources.views import TextureView

logger = logging.getLogger(__name__)


def check_large_texture(texture: TextureView, thresholds: Thresholds) -> List[Issue]:
    """Flag a texture whose largest side is over the size limit."""
    dimension = texture.max_dimension
    if dimension is None:
        logger.debug("Texture %s has unknown dimensions", texture.path)
        return []

    limit = thresholds.max_texture_size
    if dimension <= limit:
        return []

    ratio = scoring.excess_ratio(dimension, limit)
    memory_mb = scoring.texture_memory_mb(dimension)
    impact = scoring.large_texture_impact(ratio, memory_mb)
    return [Issue(
        rule_id="R3",
        title=f"Large Texture: {texture.name}",
        description=(
            f"Texture size: {texture.width}x{texture.height} (threshold: {limit}, "
            f"{scoring.format_ratio(ratio)}x over). Estimated memory: ~{memory_mb} MB uncompressed."
        ),
        category=Category.TEXTURE,
        severity=scoring.severity_for(impact),
        impact=impact,
        asset_path=texture.path,
        suggested_fix="Lower the maximum in-game texture size, use block compression or enable virtual texturing.",
        details={
            "width": texture.width,
            "height": texture.height,
            "threshold": limit,
            "ratio": round(ratio, 4),
            "memory_mb": memory_mb,
        },
    )]
