"""
analyzer/report.py — Report sinks, filtering and export.

The analyzer pushes progress and the final sorted issue list into a sink.
Everything here works on finished issue lists and never changes them.
"""
import csv
import json
import logging
import os
import secrets
from datetime import datetime, timezone
from typing import IO, Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from analyzer import scoring
from analyzer.thresholds import Thresholds
from models.issue import Category, Issue, Severity

logger = logging.getLogger(__name__)

CSV_FIELDS = ["severity", "category", "title", "description", "impact", "asset_path", "suggested_fix"]


# ── Sinks ───────────────────────────────────────────────────────────────────────

class ReportSink:
    """Receives progress notifications and, exactly once, the sorted issues."""

    def on_progress(self, label: str, fraction: float) -> None:
        pass

    def on_complete(self, issues: Sequence[Issue]) -> None:
        pass


class CollectingSink(ReportSink):
    """Keeps everything it is told; handy for tests and batch callers."""

    def __init__(self):
        self.progress: List[Tuple[str, float]] = []
        self.issues: Optional[List[Issue]] = None
        self.completions = 0

    def on_progress(self, label: str, fraction: float) -> None:
        self.progress.append((label, fraction))

    def on_complete(self, issues: Sequence[Issue]) -> None:
        self.issues = list(issues)
        self.completions += 1

    @property
    def status(self) -> str:
        return self.progress[-1][0] if self.progress else ""


class LoggingSink(ReportSink):
    def __init__(self, log: logging.Logger = logger):
        self.log = log

    def on_progress(self, label: str, fraction: float) -> None:
        self.log.info("[%3d%%] %s", round(fraction * 100), label)

    def on_complete(self, issues: Sequence[Issue]) -> None:
        summary = scoring.summarize(issues)
        self.log.info(
            "Analysis complete! Found %d issues (%d critical, %d warning, %d info).",
            summary["total"],
            summary["severity_counts"]["critical"],
            summary["severity_counts"]["warning"],
            summary["severity_counts"]["info"],
        )


# ── Filtering ───────────────────────────────────────────────────────────────────

def filter_issues(
    issues: Iterable[Issue],
    severity: Union[Severity, str, None] = None,
    category: Union[Category, str, None] = None,
) -> List[Issue]:
    """Keep issues matching the given severity and/or category. Order is preserved."""
    if isinstance(severity, str):
        severity = Severity(severity.lower())
    if isinstance(category, str):
        category = Category(category.lower())
    return [
        issue for issue in issues
        if (severity is None or issue.severity is severity)
        and (category is None or issue.category is category)
    ]


# ── CSV export ──────────────────────────────────────────────────────────────────

def _csv_text(value: str) -> str:
    return str(value).replace(",", ";").replace("\r", " ").replace("\n", " ")


def csv_row(issue: Issue) -> List[str]:
    return [
        issue.severity.value,
        issue.category.value,
        _csv_text(issue.title),
        _csv_text(issue.description),
        f"{issue.impact:.1f}",
        _csv_text(issue.asset_path),
        _csv_text(issue.suggested_fix),
    ]


def write_csv(issues: Iterable[Issue], stream: IO[str]) -> int:
    """Write one header line and one line per issue. Returns the number of issues written."""
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(CSV_FIELDS)
    count = 0
    for issue in issues:
        writer.writerow(csv_row(issue))
        count += 1
    return count


def export_csv(issues: Iterable[Issue], path: str) -> int:
    directory = os.path.dirname(os.path.abspath(path))
    os.makedirs(directory, exist_ok=True)
    with open(path, "w", encoding="utf-8", newline="") as f:
        count = write_csv(issues, f)
    logger.info("Exported %d issues to %s", count, path)
    return count


# ── JSON report ─────────────────────────────────────────────────────────────────

def build_report(issues: Sequence[Issue], mode: str, thresholds: Thresholds) -> Dict[str, Any]:
    return {
        "scan_id": _generate_id(),
        "mode": mode,
        "scanned_at": datetime.now(timezone.utc).isoformat(),
        "thresholds": thresholds.to_dict(),
        "summary": scoring.summarize(issues),
        "issues": [issue.to_dict() for issue in issues],
    }


def save_report(report: Dict[str, Any], folder: str) -> Optional[str]:
    """Serialize the report to ``<folder>/<scan_id>.json``. Returns None when the write fails."""
    try:
        os.makedirs(folder, exist_ok=True)
        report_path = os.path.join(folder, f"{report['scan_id']}.json")
        with open(report_path, "w", encoding="utf-8") as f:
            json.dump(report, f, indent=2, default=str, ensure_ascii=False)
        return report_path
    except OSError as e:
        logger.error("Failed to save report: %s", e)
        return None


def _generate_id() -> str:
    return secrets.token_hex(4).upper()
