"""tests/test_report.py — Sinks, filtering and export"""
import io
import json
import logging

import pytest

from analyzer.report import (
    CSV_FIELDS, CollectingSink, LoggingSink, build_report, export_csv,
    filter_issues, save_report, write_csv,
)
from analyzer.thresholds import Thresholds
from models.issue import Category, Issue, Severity


def _issues():
    return [
        Issue(rule_id="R1", title="High Poly Count: SM_Rock", description="Mesh has 320000 triangles, way too many",
              category=Category.MESH, severity=Severity.CRITICAL, impact=100.0,
              asset_path="/Game/SM_Rock", suggested_fix="Reduce polygon count, or add LODs"),
        Issue(rule_id="R3", title="Large Texture: T_Cliff", description="Texture size: 4096x4096\n(threshold: 2048)",
              category=Category.TEXTURE, severity=Severity.WARNING, impact=63.0,
              asset_path="/Game/T_Cliff", suggested_fix="Resize"),
        Issue(rule_id="R4", title="Too Many Texture Samples: M_Glass", description="10 samples",
              category=Category.MATERIAL, severity=Severity.INFO, impact=32.5,
              asset_path="/Game/M_Glass", suggested_fix="Pack channels"),
    ]


# ── Filtering ────────────────────────────────────────────────────────────────

def test_filter_by_severity_and_category():
    issues = _issues()
    assert [i.rule_id for i in filter_issues(issues, severity="warning")] == ["R3"]
    assert [i.rule_id for i in filter_issues(issues, category=Category.MATERIAL)] == ["R4"]
    assert filter_issues(issues, severity=Severity.CRITICAL, category="texture") == []
    assert filter_issues(issues) == issues


def test_filter_rejects_unknown_values():
    with pytest.raises(ValueError):
        filter_issues(_issues(), severity="blocker")


# ── CSV ──────────────────────────────────────────────────────────────────────

def test_csv_layout():
    buffer = io.StringIO()
    assert write_csv(_issues(), buffer) == 3
    lines = buffer.getvalue().splitlines()
    assert lines[0] == ",".join(CSV_FIELDS)
    assert len(lines) == 4
    assert lines[1] == (
        "critical,mesh,High Poly Count: SM_Rock,Mesh has 320000 triangles; way too many,"
        "100.0,/Game/SM_Rock,Reduce polygon count; or add LODs"
    )
    assert lines[2].startswith("warning,texture,Large Texture: T_Cliff,Texture size: 4096x4096 (threshold: 2048),63.0")


def test_csv_empty_report_has_header_only():
    buffer = io.StringIO()
    write_csv([], buffer)
    assert buffer.getvalue() == ",".join(CSV_FIELDS) + "\n"


def test_export_csv_creates_file(tmp_path):
    path = tmp_path / "out" / "OptimizationReport.csv"
    assert export_csv(_issues(), str(path)) == 3
    assert path.read_text(encoding="utf-8").count("\n") == 4


# ── JSON report ──────────────────────────────────────────────────────────────

def test_build_and_save_report(tmp_path):
    report = build_report(_issues(), "catalogue", Thresholds())
    assert len(report["scan_id"]) == 8
    assert report["summary"]["total"] == 3
    assert report["thresholds"]["max_texture_size"] == 2048
    assert report["issues"][0]["severity"] == "critical"

    path = save_report(report, str(tmp_path))
    with open(path, encoding="utf-8") as f:
        assert json.load(f)["scan_id"] == report["scan_id"]


# ── Sinks ────────────────────────────────────────────────────────────────────

def test_collecting_sink():
    sink = CollectingSink()
    sink.on_progress("Scanning meshes...", 0.1)
    sink.on_complete(_issues())
    assert sink.status == "Scanning meshes..."
    assert len(sink.issues) == 3
    assert sink.completions == 1


def test_logging_sink(caplog):
    caplog.set_level(logging.INFO, logger="analyzer.report")
    sink = LoggingSink()
    sink.on_progress("Scanning textures...", 0.4)
    sink.on_complete(_issues())
    assert "Scanning textures..." in caplog.text
    assert "Found 3 issues (1 critical, 1 warning, 1 info)" in caplog.text
