"""
blueprints/api/routes.py — REST API endpoints for the Asset Optimization Linter.

Routes:
    POST   /api/v1/scan
    GET    /api/v1/report/<id>
    GET    /api/v1/report/<id>/csv
    DELETE /api/v1/report/<id>
    GET    /api/v1/history
    GET    /api/v1/health
"""
import io
import json
import logging
import os
from datetime import datetime, timezone

from flask import Response, current_app, jsonify, request

from analyzer import ScanMode, run_scan
from analyzer.report import build_report, filter_issues, save_report, write_csv
from analyzer.thresholds import InvalidThresholds, Thresholds
from blueprints.api import api_bp
from extensions import db, limiter
from models.issue_record import IssueRecord
from models.scan import Scan
from sources.manifest import ManifestError, load_manifest

logger = logging.getLogger(__name__)


# ── Helpers ─────────────────────────────────────────────────────────────────────

def _thresholds_from_request(overrides) -> Thresholds:
    """App-config thresholds, with any per-request overrides applied on top."""
    values = Thresholds.from_mapping(current_app.config).to_dict()
    if overrides is not None:
        if not isinstance(overrides, dict):
            raise InvalidThresholds("'thresholds' must be an object")
        values.update({k: v for k, v in overrides.items() if k in values})
    return Thresholds(**values).validate()


def _persist(report: dict, issues) -> Scan:
    counts = report["summary"]["severity_counts"]
    scan = Scan(
        id=report["scan_id"],
        mode=report["mode"],
        scanned_at=datetime.now(timezone.utc),
        thresholds=json.dumps(report["thresholds"]),
        issue_count=report["summary"]["total"],
        critical_count=counts["critical"],
        warning_count=counts["warning"],
        info_count=counts["info"],
        max_impact=report["summary"]["max_impact"],
        report_path=report.get("report_path"),
    )
    for position, issue in enumerate(issues):
        db.session.add(IssueRecord.from_issue(scan.id, position, issue))
    db.session.add(scan)
    db.session.commit()
    return scan


def _filtered_issues(scan: Scan):
    """Stored issues filtered by the optional ``severity`` / ``category`` query args."""
    issues = [record.to_issue() for record in scan.issues]
    return filter_issues(
        issues,
        severity=request.args.get("severity") or None,
        category=request.args.get("category") or None,
    )


# ── Routes ──────────────────────────────────────────────────────────────────────

@api_bp.route("/health", methods=["GET"])
def health():
    return jsonify({"status": "ok", "version": current_app.config.get("VERSION", "1.0.0")}), 200


@api_bp.route("/scan", methods=["POST"])
@limiter.limit(lambda: current_app.config.get("RATE_LIMIT", "60 per minute"))
def scan():
    """POST /api/v1/scan — lint a catalogue manifest in catalogue or scene mode."""
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        return jsonify({"error": "Request body must be a JSON object"}), 400

    manifest = body.get("manifest")
    if not isinstance(manifest, dict):
        return jsonify({"error": "'manifest' object required"}), 400

    try:
        mode = ScanMode(body.get("mode", ScanMode.CATALOGUE.value))
    except ValueError:
        return jsonify({"error": f"Unknown mode {body.get('mode')!r}; use 'catalogue' or 'scene'"}), 400

    try:
        thresholds = _thresholds_from_request(body.get("thresholds"))
        source = load_manifest(manifest, current_app.config.get("ENGINE_PATH_PREFIXES"))
    except (InvalidThresholds, ManifestError) as e:
        return jsonify({"error": str(e)}), 400

    try:
        issues = run_scan(source, mode, thresholds)
        report = build_report(issues, mode.value, thresholds)
        report["report_path"] = save_report(report, current_app.config["REPORT_FOLDER"])
        _persist(report, issues)
        logger.info("Scan %s (%s) stored with %d issues", report["scan_id"], mode.value, len(issues))
        return jsonify(report), 200
    except Exception as e:
        logger.error("Scan error: %s", e, exc_info=True)
        return jsonify({"error": "Internal scan error", "detail": str(e)}), 500


@api_bp.route("/report/<scan_id>", methods=["GET"])
def get_report(scan_id: str):
    """GET /api/v1/report/<id> — stored report, optionally filtered."""
    scan = db.session.get(Scan, scan_id)
    if not scan:
        return jsonify({"error": "Scan not found"}), 404
    try:
        issues = _filtered_issues(scan)
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    report = scan.to_dict()
    report["issues"] = [issue.to_dict() for issue in issues]
    return jsonify(report), 200


@api_bp.route("/report/<scan_id>/csv", methods=["GET"])
def get_report_csv(scan_id: str):
    """GET /api/v1/report/<id>/csv — CSV export of the stored report."""
    scan = db.session.get(Scan, scan_id)
    if not scan:
        return jsonify({"error": "Scan not found"}), 404
    try:
        issues = _filtered_issues(scan)
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    buffer = io.StringIO()
    write_csv(issues, buffer)
    return Response(
        buffer.getvalue(),
        mimetype="text/csv",
        headers={"Content-Disposition": f"attachment; filename=OptimizationReport_{scan_id}.csv"},
    )


@api_bp.route("/report/<scan_id>", methods=["DELETE"])
def delete_report(scan_id: str):
    """DELETE /api/v1/report/<id> — delete a scan and its report file."""
    scan = db.session.get(Scan, scan_id)
    if not scan:
        return jsonify({"error": "Scan not found"}), 404

    if scan.report_path and os.path.exists(scan.report_path):
        try:
            os.remove(scan.report_path)
        except OSError as e:
            logger.warning("Could not remove report file %s: %s", scan.report_path, e)

    db.session.delete(scan)
    db.session.commit()
    return "", 204


@api_bp.route("/history", methods=["GET"])
def history():
    """GET /api/v1/history — paginated scan list, newest first."""
    page = request.args.get("page", 1, type=int)
    limit = min(request.args.get("limit", 50, type=int), 200)

    pagination = Scan.query.order_by(
        Scan.scanned_at.desc()
    ).paginate(page=page, per_page=limit, error_out=False)

    return jsonify({
        "items": [s.to_summary() for s in pagination.items],
        "total": pagination.total,
        "page": page,
        "pages": pagination.pages,
        "limit": limit,
    }), 200
