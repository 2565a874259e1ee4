"""tests/test_analyzer.py — Catalogue and scene scans through the orchestrator"""
from collections import Counter

import pytest

from analyzer import OptimizationAnalyzer, ScanMode, scoring
from analyzer.report import CollectingSink
from analyzer.rules import INSTANCE_RATIO_RULE, RULES
from analyzer.thresholds import Thresholds
from models.issue import Severity
from sources import (
    ActorView, AssetKind, BlendMode, BlueprintView, GraphView, InMemoryAssetSource, MaterialInstanceView,
    MaterialView, MeshInstance, MeshView, MissingAssetData, NodeView, TextureView,
    load_manifest,
)


def _glass():
    textures = tuple(TextureView(name=f"T_{i}", path=f"/Game/T_{i}", width=512, height=512) for i in range(10))
    return MaterialView(name="M_Glass", path="/Game/Materials/M_Glass", two_sided=True,
                        blend_mode=BlendMode.TRANSLUCENT, used_textures=textures)


def _assert_report_invariants(issues):
    for issue in issues:
        assert 0.0 <= issue.impact <= 100.0
        if issue.rule_id != "R5":
            assert issue.severity is scoring.severity_for(issue.impact)
    for a, b in zip(issues, issues[1:]):
        assert a.severity.rank >= b.severity.rank
        if a.severity is b.severity:
            assert a.impact >= b.impact


# ── Catalogue scan ───────────────────────────────────────────────────────────

def test_material_issues_are_ranked():
    source = InMemoryAssetSource(materials=[_glass()])
    issues = OptimizationAnalyzer(source).scan_catalogue()
    assert [i.rule_id for i in issues] == ["R6", "R7", "R5", "R4"]
    assert [i.severity for i in issues] == [
        Severity.CRITICAL, Severity.WARNING, Severity.WARNING, Severity.INFO,
    ]


def test_catalogue_progress_phases_and_completion():
    sink = CollectingSink()
    source = _small_catalogue()
    issues = OptimizationAnalyzer(source).scan_catalogue(Thresholds(), sink)

    fractions = [fraction for _, fraction in sink.progress]
    assert fractions == [0.10, 0.40, 0.70, 0.80, 0.90, 1.0]
    assert sink.completions == 1
    assert sink.issues == issues
    assert "Found" in sink.status


def test_catalogue_scan_on_manifest(manifest_dict):
    issues = OptimizationAnalyzer(load_manifest(manifest_dict)).scan_catalogue()
    by_rule = Counter(i.rule_id for i in issues)
    assert by_rule == Counter({
        "R1": 1, "R2": 1, "R3": 1,
        "R4": 1, "R5": 1, "R6": 1, "R7": 1,
        "R8": 1, "R9": 1,
    })
    _assert_report_invariants(issues)


def test_engine_assets_are_skipped(manifest_dict):
    source = load_manifest(manifest_dict)
    issues = OptimizationAnalyzer(source).scan_catalogue()
    for issue in issues:
        if issue.rule_id in {"R4", "R5", "R6", "R7", "R8", "R9"}:
            assert not source.is_engine_asset(issue.asset_path)


def test_engine_blueprint_skipped():
    nodes = tuple(NodeView("Event Tick") for _ in range(400))
    bp = BlueprintView(name="BP_Engine", path="/Engine/BP_Engine", event_graphs=(GraphView("E", nodes),))
    source = InMemoryAssetSource(blueprints=[bp])
    assert OptimizationAnalyzer(source).scan_catalogue() == []


def test_custom_engine_prefix():
    source = InMemoryAssetSource(materials=[_glass()], engine_prefixes=["/Game/Materials/"])
    assert OptimizationAnalyzer(source).scan_catalogue() == []


def test_rule_table_layout():
    ids = {kind.value: [rule.rule_id for rule in rules] for kind, rules in RULES.items()}
    assert ids == {
        "mesh": ["R1", "R2"],
        "texture": ["R3"],
        "material": ["R4", "R5", "R6", "R7"],
        "blueprint": ["R8", "R9"],
    }
    assert not any(rule.skip_engine_assets for rule in RULES[AssetKind.MESH] + RULES[AssetKind.TEXTURE])
    assert str(INSTANCE_RATIO_RULE) == "R10 (Under-used Material Instances)"


def test_instance_ratio_runs_once_per_scan():
    bases = [MaterialView(name=f"M_{i}", path=f"/Game/M_{i}") for i in range(20)]
    instances = [MaterialInstanceView(name=f"MI_{i}", path=f"/Game/MI_{i}") for i in range(25)]
    source = InMemoryAssetSource(materials=bases, material_instances=instances)
    issues = OptimizationAnalyzer(source).scan_catalogue()
    assert len(issues) == 1
    assert issues[0].rule_id == "R10"
    assert issues[0].asset_path == "<project>"
    assert issues[0].impact == pytest.approx(35.0)


def test_permuted_catalogue_gives_same_report(manifest_dict):
    forward = load_manifest(manifest_dict)
    reversed_manifest = {
        key: list(reversed(value)) if isinstance(value, list) else value
        for key, value in manifest_dict.items()
    }
    backward = load_manifest(reversed_manifest)

    a = OptimizationAnalyzer(forward).scan_catalogue()
    b = OptimizationAnalyzer(backward).scan_catalogue()
    assert Counter(a) == Counter(b)
    assert [(i.severity, i.impact) for i in a] == [(i.severity, i.impact) for i in b]


def test_scan_dispatches_on_mode(manifest_dict):
    analyzer = OptimizationAnalyzer(load_manifest(manifest_dict))
    assert analyzer.scan("catalogue") == analyzer.scan_catalogue()
    assert analyzer.scan(ScanMode.SCENE) == analyzer.scan_scene()
    with pytest.raises(ValueError):
        analyzer.scan("everything")


# ── Failure isolation ────────────────────────────────────────────────────────

class _BrokenMesh:
    name = "SM_Broken"
    path = "/Game/SM_Broken"
    lod_count = 1

    @property
    def triangles(self):
        raise MissingAssetData("LOD 0 render data not loaded")


class _ExplodingSource(InMemoryAssetSource):
    def enumerate(self, kind):
        if kind.value == "texture":
            raise RuntimeError("asset registry unavailable")
        return super().enumerate(kind)


def test_broken_asset_does_not_abort_sweep():
    good = MeshView(name="SM_Big", path="/Game/SM_Big", lod_count=1, triangles=200000)
    source = InMemoryAssetSource(meshes=[_BrokenMesh(), good])
    issues = OptimizationAnalyzer(source).scan_catalogue()
    assert {i.asset_path for i in issues} == {"/Game/SM_Big"}
    assert {i.rule_id for i in issues} == {"R1", "R2"}


class _UnloadableInstance:
    materials = ()

    @property
    def mesh(self):
        raise MissingAssetData("static mesh reference could not be loaded")


class _ActorWithoutComponents:
    name = "Broken_Actor"

    @property
    def instances(self):
        raise MissingAssetData("component list unavailable")


def test_unreadable_scene_data_does_not_abort_scan():
    good = MeshView(name="SM_Big", path="/Game/SM_Big", lod_count=1, triangles=200000)
    scene = [
        ActorView(name="A", instances=(_UnloadableInstance(), MeshInstance(mesh=good))),
        _ActorWithoutComponents(),
    ]
    sink = CollectingSink()
    issues = OptimizationAnalyzer(InMemoryAssetSource(scene=scene)).scan_scene(sink=sink)
    assert {i.rule_id for i in issues} == {"R1", "R2"}
    assert sink.completions == 1
    assert sink.progress[-1][1] == 1.0


def test_failing_enumeration_is_isolated():
    sink = CollectingSink()
    source = _ExplodingSource(
        meshes=[MeshView(name="SM_Big", path="/Game/SM_Big", lod_count=4, triangles=200000)],
        textures=[TextureView(name="T", path="/Game/T", width=8192, height=8192)],
    )
    issues = OptimizationAnalyzer(source).scan_catalogue(sink=sink)
    assert [i.rule_id for i in issues] == ["R1"]
    assert sink.progress[-1][1] == 1.0


def test_failing_sink_does_not_break_scan():
    class RaisingSink(CollectingSink):
        def on_progress(self, label, fraction):
            raise RuntimeError("UI went away")

    sink = RaisingSink()
    issues = OptimizationAnalyzer(InMemoryAssetSource(materials=[_glass()])).scan_catalogue(sink=sink)
    assert len(issues) == 4
    assert sink.issues == issues


# ── Scene scan ───────────────────────────────────────────────────────────────

def test_scene_scan_deduplicates_by_asset(manifest_dict):
    sink = CollectingSink()
    issues = OptimizationAnalyzer(load_manifest(manifest_dict)).scan_scene(sink=sink)

    counts = Counter((i.rule_id, i.asset_path) for i in issues)
    assert counts == Counter({
        ("R1", "/Game/Props/SM_Statue"): 1,
        ("R2", "/Game/Props/SM_Crate"): 1,
        ("R3", "/Game/Textures/T_Cliff_D"): 1,
    })
    _assert_report_invariants(issues)


def test_scene_scan_skips_material_and_blueprint_rules(manifest_dict):
    issues = OptimizationAnalyzer(load_manifest(manifest_dict)).scan_scene()
    assert {i.category.value for i in issues} <= {"mesh", "texture"}


def test_scene_progress_is_monotonic(manifest_dict):
    sink = CollectingSink()
    OptimizationAnalyzer(load_manifest(manifest_dict)).scan_scene(sink=sink)
    fractions = [fraction for _, fraction in sink.progress]
    assert fractions == sorted(fractions)
    assert fractions[0] == 0.10
    assert fractions[-1] == 1.0
    assert sink.completions == 1


def test_scene_scan_without_scene():
    sink = CollectingSink()
    issues = OptimizationAnalyzer(InMemoryAssetSource()).scan_scene(sink=sink)
    assert issues == []
    assert sink.progress == [("No active scene to analyze", 1.0)]
    assert sink.issues == []


def test_empty_scene_is_not_missing_scene():
    sink = CollectingSink()
    issues = OptimizationAnalyzer(InMemoryAssetSource(scene=[])).scan_scene(sink=sink)
    assert issues == []
    assert sink.progress[0] == ("Scanning scene...", 0.10)


def test_scene_unresolved_mesh_is_skipped():
    texture = TextureView(name="T_8k", path="/Game/T_8k", width=8192, height=8192)
    material = MaterialView(name="M", path="/Game/M", used_textures=(texture, texture))
    scene = [
        ActorView(name="A", instances=(MeshInstance(mesh=None, materials=(material,)),)),
        ActorView(name="B", instances=(MeshInstance(mesh=None, materials=(material, material)),)),
    ]
    issues = OptimizationAnalyzer(InMemoryAssetSource(scene=scene)).scan_scene()
    assert [i.rule_id for i in issues] == ["R3"]


def _small_catalogue():
    textures = [TextureView(name="T_4k", path="/Game/T_4k", width=4096, height=4096)]
    meshes = [MeshView(name="SM", path="/Game/SM", lod_count=1, triangles=40000)]
    return InMemoryAssetSource(meshes=meshes, textures=textures, materials=[_glass()])
