"""
analyzer/materials.py — Material rules

Per-material checks (R4 to R7) look at texture sample count, two-sidedness,
blend mode and a rough shader instruction estimate. R10 is project-wide and
compares the number of material instances against base materials.

Engine-owned materials are filtered out by the analyzer before these run.
"""
import logging
from typing import List

from analyzer import scoring
from analyzer.thresholds import Thresholds
from models.issue import PROJECT_ASSET_PATH, Category, Issue, Severity
from sources.views import MaterialView

logger = logging.getLogger(__name__)

TRANSLUCENT_MAX_SAMPLES = 5

BASE_INSTRUCTIONS = 50
INSTRUCTIONS_PER_SAMPLE = 15
TRANSLUCENCY_INSTRUCTIONS = 30

MIN_BASE_MATERIALS = 10
INSTANCES_PER_BASE_MATERIAL = 2


def estimate_instructions(material: MaterialView) -> int:
    """Rough pixel shader instruction count: a base cost plus one cost per sample, doubled when two-sided."""
    instructions = BASE_INSTRUCTIONS + INSTRUCTIONS_PER_SAMPLE * material.texture_sample_count
    if material.two_sided:
        instructions *= 2
    if material.blend_mode.is_translucent:
        instructions += TRANSLUCENCY_INSTRUCTIONS
    return instructions


def check_texture_samples(material: MaterialView, thresholds: Thresholds) -> List[Issue]:
    """Flag a material that samples more distinct textures than allowed."""
    samples = material.texture_sample_count
    limit = thresholds.max_texture_samples_per_material
    if samples <= limit:
        return []

    ratio = scoring.excess_ratio(samples, limit)
    return [_issue(
        "R4", f"Too Many Texture Samples: {material.name}",
        f"Material samples {samples} textures (threshold: {limit}, {scoring.format_ratio(ratio)}x over).",
        scoring.texture_samples_impact(ratio),
        material.path,
        "Pack channels into fewer textures or move optional layers into material instances.",
        {"samples": samples, "threshold": limit, "ratio": round(ratio, 4)},
    )]


def check_two_sided(material: MaterialView, thresholds: Thresholds) -> List[Issue]:
    """Flag two-sided materials. Always a warning."""
    if not material.two_sided:
        return []

    return [_issue(
        "R5", f"Two-Sided Material: {material.name}",
        "Two-sided materials render back faces and roughly double pixel shading cost.",
        scoring.TWO_SIDED_IMPACT,
        material.path,
        "Disable two-sided rendering unless the surface is seen from both sides.",
        {},
        severity=Severity.WARNING,
    )]


def check_translucent_complexity(material: MaterialView, thresholds: Thresholds) -> List[Issue]:
    """Flag translucent materials that sample many textures."""
    samples = material.texture_sample_count
    if not material.blend_mode.is_translucent or samples <= TRANSLUCENT_MAX_SAMPLES:
        return []

    return [_issue(
        "R6", f"Complex Translucent Material: {material.name}",
        f"{material.blend_mode.value.title()} material samples {samples} textures "
        f"(limit for translucency: {TRANSLUCENT_MAX_SAMPLES}). Translucent pixels are shaded once per layer of overdraw.",
        scoring.translucent_impact(samples),
        material.path,
        "Reduce texture samples in translucent materials or switch to a masked blend mode.",
        {"samples": samples, "blend_mode": material.blend_mode.value},
    )]


def check_shader_complexity(material: MaterialView, thresholds: Thresholds) -> List[Issue]:
    """Flag a material whose estimated instruction count is over budget."""
    instructions = estimate_instructions(material)
    budget = scoring.SHADER_INSTRUCTION_BUDGET
    if instructions <= budget:
        return []

    ratio = scoring.excess_ratio(instructions, budget)
    return [_issue(
        "R7", f"High Shader Complexity: {material.name}",
        f"Estimated {instructions} shader instructions (budget: {budget}, {scoring.format_ratio(ratio)}x over).",
        scoring.shader_complexity_impact(instructions),
        material.path,
        "Simplify the material graph, bake expensive math into textures or use quality switches.",
        {"instructions": instructions, "budget": budget, "ratio": round(ratio, 4)},
    )]


def check_instance_ratio(base_materials: int, instances: int, thresholds: Thresholds) -> List[Issue]:
    """Flag a project with many base materials and few instances. Runs once per catalogue scan."""
    if base_materials <= MIN_BASE_MATERIALS:
        return []
    if instances >= INSTANCES_PER_BASE_MATERIAL * base_materials:
        return []

    ratio = instances / base_materials
    return [_issue(
        "R10", "Low Material Instance Usage",
        f"Project has {base_materials} base materials but only {instances} material instances "
        f"({ratio:.2f} per material; target: at least {INSTANCES_PER_BASE_MATERIAL}).",
        scoring.instance_ratio_impact(base_materials, instances),
        PROJECT_ASSET_PATH,
        "Create master materials and derive variations as material instances to share compiled shaders.",
        {"base_materials": base_materials, "instances": instances},
    )]


def _issue(rule_id, title, description, impact, asset_path, fix, details, severity=None) -> Issue:
    return Issue(
        rule_id=rule_id,
        title=title,
        description=description,
        category=Category.MATERIAL,
        severity=severity or scoring.severity_for(impact),
        impact=impact,
        asset_path=asset_path,
        suggested_fix=fix,
        details=details,
    )
