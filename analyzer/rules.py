"""
analyzer/rules.py — The rule catalogue.

Rules are plain values in a static table keyed by the asset kind they sweep.
Order inside each tuple is the order rules run in for every asset.
"""
from typing import Callable, Dict, List, NamedTuple, Tuple

from analyzer import blueprints, materials, meshes, textures
from analyzer.thresholds import Thresholds
from models.issue import Issue
from sources.views import AssetKind


class Rule(NamedTuple):
    rule_id: str
    name: str
    check: Callable[..., List[Issue]]
    skip_engine_assets: bool = False

    def __call__(self, view, thresholds: Thresholds) -> List[Issue]:
        return self.check(view, thresholds)

    def __str__(self):
        return f"{self.rule_id} ({self.name})"


RULES: Dict[AssetKind, Tuple[Rule, ...]] = {
    AssetKind.MESH: (
        Rule("R1", "High-Poly Mesh", meshes.check_high_poly),
        Rule("R2", "Missing LOD Chain", meshes.check_missing_lods),
    ),
    AssetKind.TEXTURE: (
        Rule("R3", "Oversized Texture", textures.check_large_texture),
    ),
    AssetKind.MATERIAL: (
        Rule("R4", "Material Texture-Sample Count", materials.check_texture_samples, skip_engine_assets=True),
        Rule("R5", "Two-Sided Material", materials.check_two_sided, skip_engine_assets=True),
        Rule("R6", "Complex Translucent Material", materials.check_translucent_complexity, skip_engine_assets=True),
        Rule("R7", "Estimated Shader Complexity", materials.check_shader_complexity, skip_engine_assets=True),
    ),
    AssetKind.BLUEPRINT: (
        Rule("R8", "Complex Blueprint", blueprints.check_complexity, skip_engine_assets=True),
        Rule("R9", "Tick in Complex Blueprint", blueprints.check_tick_usage, skip_engine_assets=True),
    ),
}

# Runs once per catalogue scan on (base material count, instance count).
INSTANCE_RATIO_RULE = Rule("R10", "Under-used Material Instances", materials.check_instance_ratio)
