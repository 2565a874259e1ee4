"""
analyzer/blueprints.py — Blueprint graph rules

R8 flags blueprints whose node count across event and function graphs
exceeds the configured limit. R9 flags fairly large blueprints that also run
logic on Event Tick.
"""
import logging
from typing import List, NamedTuple

from analyzer import scoring
from analyzer.thresholds import Thresholds
from models.issue import Category, Issue
from sources.views import BlueprintView

logger = logging.getLogger(__name__)

TICK_NODE_TITLE = "Event Tick"
TICK_MIN_NODES = 100


class GraphStats(NamedTuple):
    total_nodes: int
    uses_tick: bool


def graph_stats(blueprint: BlueprintView) -> GraphStats:
    total = sum(len(graph.nodes) for graph in blueprint.graphs)
    uses_tick = any(
        TICK_NODE_TITLE in (node.title or "")
        for graph in blueprint.event_graphs
        for node in graph.nodes
    )
    return GraphStats(total, uses_tick)


def check_complexity(blueprint: BlueprintView, thresholds: Thresholds) -> List[Issue]:
    """Flag a blueprint with too many nodes across its graphs."""
    stats = graph_stats(blueprint)
    limit = thresholds.max_blueprint_nodes
    if stats.total_nodes <= limit:
        return []

    ratio = scoring.excess_ratio(stats.total_nodes, limit)
    return [_issue(
        "R8", f"Complex Blueprint: {blueprint.name}",
        f"Blueprint has {stats.total_nodes} nodes across {len(blueprint.graphs)} graph(s) "
        f"(threshold: {limit}, {scoring.format_ratio(ratio)}x over).",
        scoring.blueprint_complexity_impact(ratio),
        blueprint.path,
        "Split logic into functions, components or child blueprints; move hot paths to native code.",
        {"nodes": stats.total_nodes, "threshold": limit, "ratio": round(ratio, 4)},
    )]


def check_tick_usage(blueprint: BlueprintView, thresholds: Thresholds) -> List[Issue]:
    """Flag a sizeable blueprint that runs logic on Event Tick."""
    stats = graph_stats(blueprint)
    if not stats.uses_tick or stats.total_nodes <= TICK_MIN_NODES:
        return []

    return [_issue(
        "R9", f"Event Tick In Complex Blueprint: {blueprint.name}",
        f"Blueprint with {stats.total_nodes} nodes runs logic on Event Tick every frame.",
        scoring.tick_impact(stats.total_nodes),
        blueprint.path,
        "Replace Event Tick with timers or event-driven updates, or lower the tick interval.",
        {"nodes": stats.total_nodes},
    )]


def _issue(rule_id, title, description, impact, asset_path, fix, details) -> Issue:
    return Issue(
        rule_id=rule_id,
        title=title,
        description=description,
        category=Category.BLUEPRINT,
        severity=scoring.severity_for(impact),
        impact=impact,
        asset_path=asset_path,
        suggested_fix=fix,
        details=details,
    )
