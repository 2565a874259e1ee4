"""
analyzer/__init__.py — OptimizationAnalyzer orchestrator.

Runs the rule catalogue over an Asset Source in one of two modes, isolates
rule failures, sorts the merged issue list and hands it to a Report Sink.
"""
import logging
from enum import Enum
from typing import List, Optional, Set

from analyzer import scoring
from analyzer.report import ReportSink
from analyzer.rules import INSTANCE_RATIO_RULE, RULES, Rule
from analyzer.thresholds import Thresholds
from models.issue import Issue
from sources.base import AssetSource
from sources.views import AssetKind, MaterialView, MeshInstance

logger = logging.getLogger(__name__)


class ScanMode(Enum):
    CATALOGUE = "catalogue"
    SCENE = "scene"


# Progress fraction reported once each catalogue sweep is finished.
CATALOGUE_PHASES = [
    (AssetKind.MESH, 0.40, "Scanning textures..."),
    (AssetKind.TEXTURE, 0.70, "Scanning materials..."),
    (AssetKind.MATERIAL, 0.80, "Scanning blueprints..."),
    (AssetKind.BLUEPRINT, 0.90, "Sorting issues..."),
]

SCENE_START = 0.10
SCENE_END = 0.90


class OptimizationAnalyzer:
    """Applies the rule catalogue to one Asset Source."""

    def __init__(self, source: AssetSource):
        self.source = source

    def scan(self, mode, thresholds: Optional[Thresholds] = None,
             sink: Optional[ReportSink] = None) -> List[Issue]:
        mode = ScanMode(mode)
        if mode is ScanMode.SCENE:
            return self.scan_scene(thresholds, sink)
        return self.scan_catalogue(thresholds, sink)

    # ── Whole-catalogue scan ──────────────────────────────────────────────────

    def scan_catalogue(self, thresholds: Optional[Thresholds] = None,
                       sink: Optional[ReportSink] = None) -> List[Issue]:
        thresholds = thresholds or Thresholds()
        sink = sink or ReportSink()
        issues: List[Issue] = []

        self._progress(sink, "Scanning meshes...", 0.10)
        for kind, fraction, next_label in CATALOGUE_PHASES:
            before = len(issues)
            issues.extend(self._sweep(kind, thresholds))
            logger.info("Sweep %s produced %d issue(s)", kind.value, len(issues) - before)

            if kind is AssetKind.MATERIAL:
                issues.extend(self._check_instance_ratio(thresholds))

            self._progress(sink, next_label, fraction)

        return self._finish(issues, sink)

    def _sweep(self, kind: AssetKind, thresholds: Thresholds) -> List[Issue]:
        issues: List[Issue] = []
        for view in self._enumerate(kind):
            for rule in RULES[kind]:
                issues.extend(self._apply(rule, view, thresholds))
        return issues

    def _check_instance_ratio(self, thresholds: Thresholds) -> List[Issue]:
        base_count = len(self._enumerate(AssetKind.MATERIAL))
        instance_count = len(self._enumerate(AssetKind.MATERIAL_INSTANCE))
        logger.debug("Material instances: %d base, %d instances", base_count, instance_count)
        try:
            return INSTANCE_RATIO_RULE.check(base_count, instance_count, thresholds)
        except Exception as exc:
            logger.warning("Rule %s failed: %s", INSTANCE_RATIO_RULE, exc, exc_info=True)
            return []

    # ── Live-scene scan ───────────────────────────────────────────────────────

    def scan_scene(self, thresholds: Optional[Thresholds] = None,
                   sink: Optional[ReportSink] = None) -> List[Issue]:
        thresholds = thresholds or Thresholds()
        sink = sink or ReportSink()

        try:
            actors = self.source.scene()
            actors = list(actors) if actors is not None else None
        except Exception as exc:
            logger.warning("Could not read the active scene: %s", exc, exc_info=True)
            actors = None

        if actors is None:
            logger.warning("Scene scan requested with no active scene")
            self._progress(sink, "No active scene to analyze", 1.0)
            sink.on_complete([])
            return []

        issues: List[Issue] = []
        seen_meshes: Set[str] = set()
        seen_textures: Set[str] = set()

        self._progress(sink, "Scanning scene...", SCENE_START)
        for index, actor in enumerate(actors, start=1):
            label = _display_name(actor)
            try:
                instances = list(actor.instances)
            except Exception as exc:
                logger.warning("Could not read instances of actor %s: %s", label, exc, exc_info=True)
                instances = []
            for instance in instances:
                issues.extend(self._scan_instance(instance, thresholds, seen_meshes, seen_textures))
            fraction = SCENE_START + (SCENE_END - SCENE_START) * index / len(actors)
            self._progress(sink, f"Scanned actor {label} ({index}/{len(actors)})", fraction)

        logger.info("Scene scan: %d actor(s), %d unique mesh(es), %d unique texture(s)",
                    len(actors), len(seen_meshes), len(seen_textures))
        return self._finish(issues, sink)

    def _scan_instance(self, instance: MeshInstance, thresholds: Thresholds,
                       seen_meshes: Set[str], seen_textures: Set[str]) -> List[Issue]:
        """Mesh and texture rules for one placed mesh; unreadable parts are logged and skipped."""
        issues: List[Issue] = []

        try:
            mesh = instance.mesh
            if mesh is not None and mesh.path not in seen_meshes:
                seen_meshes.add(mesh.path)
                for rule in RULES[AssetKind.MESH]:
                    issues.extend(self._apply(rule, mesh, thresholds))
        except Exception as exc:
            logger.warning("Could not resolve the mesh of a scene instance: %s", exc, exc_info=True)

        try:
            materials = list(instance.materials)
        except Exception as exc:
            logger.warning("Could not read the materials of a scene instance: %s", exc, exc_info=True)
            materials = []

        for material in materials:
            try:
                for texture in self._used_textures(material):
                    if texture.path in seen_textures:
                        continue
                    seen_textures.add(texture.path)
                    for rule in RULES[AssetKind.TEXTURE]:
                        issues.extend(self._apply(rule, texture, thresholds))
            except Exception as exc:
                logger.warning("Could not read the textures of %s: %s",
                               _display_name(material), exc, exc_info=True)

        return issues

    # ── Helpers ───────────────────────────────────────────────────────────────

    def _enumerate(self, kind: AssetKind) -> list:
        try:
            return list(self.source.enumerate(kind))
        except Exception as exc:
            logger.warning("Could not enumerate %s assets: %s", kind.value, exc, exc_info=True)
            return []

    def _used_textures(self, material: MaterialView) -> list:
        try:
            return material.unique_textures()
        except Exception as exc:
            logger.warning("Could not resolve textures of %s: %s",
                           _display_name(material), exc, exc_info=True)
            return []

    def _apply(self, rule: Rule, view, thresholds: Thresholds) -> List[Issue]:
        """Run one rule on one asset. A failing rule yields no issues for that asset."""
        try:
            if rule.skip_engine_assets and self.source.is_engine_asset(view.path):
                return []
            return list(rule(view, thresholds))
        except Exception as exc:
            logger.warning("Rule %s failed on %s: %s",
                           rule, getattr(view, "path", view), exc, exc_info=True)
            return []

    def _progress(self, sink: ReportSink, label: str, fraction: float) -> None:
        try:
            sink.on_progress(label, fraction)
        except Exception as exc:
            logger.warning("Report sink failed on progress %r: %s", label, exc, exc_info=True)

    def _finish(self, issues: List[Issue], sink: ReportSink) -> List[Issue]:
        ranked = scoring.sort_issues(issues)
        self._progress(sink, f"Analysis complete! Found {len(ranked)} issues.", 1.0)
        try:
            sink.on_complete(ranked)
        except Exception as exc:
            logger.warning("Report sink failed on completion: %s", exc, exc_info=True)
        return ranked


def _display_name(view) -> str:
    """Name for log lines and progress labels; never raises."""
    try:
        return str(view.name)
    except Exception:
        return type(view).__name__


def run_scan(source: AssetSource, mode, thresholds: Optional[Thresholds] = None,
             sink: Optional[ReportSink] = None) -> List[Issue]:
    return OptimizationAnalyzer(source).scan(mode, thresholds, sink)
