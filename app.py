"""
app.py — Flask Application Factory for the Asset Optimization Linter.
"""
import logging
import os
import sys

import click
from flask import Flask, current_app
from flask_cors import CORS
from pythonjsonlogger import jsonlogger

from analyzer import run_scan
from analyzer.report import LoggingSink, export_csv, filter_issues
from analyzer.scoring import summarize
from analyzer.thresholds import InvalidThresholds, Thresholds
from config import config_map
from extensions import db, limiter
from sources.manifest import ManifestError, load_manifest

# ── Logging ────────────────────────────────────────────────────────────────────
handler = logging.StreamHandler()
handler.setFormatter(jsonlogger.JsonFormatter(
    "%(asctime)s %(levelname)s %(name)s %(message)s"
))
logging.basicConfig(level=logging.INFO, handlers=[handler])

logger = logging.getLogger(__name__)


def create_app(env: str = None) -> Flask:
    """Application factory."""
    env = env or os.environ.get("FLASK_ENV", "development")
    cfg = config_map.get(env, config_map["default"])

    app = Flask(__name__)
    app.config.from_object(cfg)

    # ── Ensure directories exist ───────────────────────────────────────────────
    try:
        os.makedirs(app.config["REPORT_FOLDER"], exist_ok=True)
        os.makedirs(os.path.join(os.path.dirname(__file__), "data"), exist_ok=True)
    except OSError as e:
        logger.warning("Could not create data folders: %s", e)

    # ── Extensions ────────────────────────────────────────────────────────────
    db.init_app(app)
    CORS(app, origins="same-origin")
    limiter.init_app(app)

    # ── Blueprints ────────────────────────────────────────────────────────────
    from blueprints.api import api_bp
    app.register_blueprint(api_bp, url_prefix="/api/v1")

    # ── CLI ───────────────────────────────────────────────────────────────────
    app.cli.add_command(scan_command)

    # ── DB init ───────────────────────────────────────────────────────────────
    with app.app_context():
        try:
            db.create_all()
            logger.info("Database tables created / verified.")
        except Exception as e:
            logger.error("Failed to initialize database: %s", e)

    logger.info("Asset Optimization Linter app created [env=%s]", env)
    return app


@click.command("scan")
@click.argument("manifest", type=click.Path(exists=True, dir_okay=False))
@click.option("--mode", type=click.Choice(["catalogue", "scene"]), default="catalogue", show_default=True)
@click.option("--csv", "csv_path", type=click.Path(dir_okay=False), help="Also export the report as CSV.")
@click.option("--severity", type=click.Choice(["critical", "warning", "info"]), help="Only list this severity.")
@click.option("--category", type=click.Choice(["mesh", "texture", "material", "blueprint"]),
              help="Only list this category.")
@click.option("--max-triangles", type=int, help="Override max_triangles_per_mesh.")
@click.option("--max-texture-size", type=int, help="Override max_texture_size.")
@click.option("--max-blueprint-nodes", type=int, help="Override max_blueprint_nodes.")
@click.option("--max-texture-samples", type=int, help="Override max_texture_samples_per_material.")
def scan_command(manifest, mode, csv_path, severity, category,
                 max_triangles, max_texture_size, max_blueprint_nodes, max_texture_samples):
    """Lint the assets described by MANIFEST and print the ranked issues."""
    values = Thresholds.from_mapping(current_app.config).to_dict()
    overrides = {
        "max_triangles_per_mesh": max_triangles,
        "max_texture_size": max_texture_size,
        "max_blueprint_nodes": max_blueprint_nodes,
        "max_texture_samples_per_material": max_texture_samples,
    }
    values.update({k: v for k, v in overrides.items() if v is not None})

    try:
        thresholds = Thresholds(**values).validate()
        source = load_manifest(manifest, current_app.config.get("ENGINE_PATH_PREFIXES"))
    except (InvalidThresholds, ManifestError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(2)

    issues = run_scan(source, mode, thresholds, LoggingSink())
    shown = filter_issues(issues, severity=severity, category=category)

    for issue in shown:
        click.echo(f"[{issue.severity.value.upper():8}] {issue.impact:5.1f}  {issue.title}")
        click.echo(f"           {issue.description}")
        click.echo(f"           Fix: {issue.suggested_fix}")
        click.echo(f"           {issue.asset_path}")

    summary = summarize(issues)
    counts = summary["severity_counts"]
    click.echo(
        f"Found {summary['total']} issues: {counts['critical']} critical, "
        f"{counts['warning']} warning, {counts['info']} info."
    )

    if csv_path:
        export_csv(shown, csv_path)
        click.echo(f"Report exported to {csv_path}")


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=5000, debug=True)
