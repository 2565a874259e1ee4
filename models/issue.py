"""models/issue.py — Optimization issue record and the enums it references."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict

PROJECT_ASSET_PATH = "<project>"


class Severity(Enum):
    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {Severity.INFO: 0, Severity.WARNING: 1, Severity.CRITICAL: 2}


class Category(Enum):
    MESH = "mesh"
    TEXTURE = "texture"
    MATERIAL = "material"
    BLUEPRINT = "blueprint"
    AUDIO = "audio"
    PARTICLE = "particle"
    OTHER = "other"


@dataclass(frozen=True)
class Issue:
    """A single optimization finding. Immutable once a rule has built it."""
    rule_id: str
    title: str
    description: str
    category: Category
    severity: Severity
    impact: float
    asset_path: str
    suggested_fix: str = ""
    details: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    def __post_init__(self):
        if not 0.0 <= self.impact <= 100.0:
            raise ValueError(f"impact {self.impact!r} outside [0, 100] for {self.rule_id}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rule_id": self.rule_id,
            "title": self.title,
            "description": self.description,
            "category": self.category.value,
            "severity": self.severity.value,
            "impact": round(self.impact, 2),
            "asset_path": self.asset_path,
            "suggested_fix": self.suggested_fix,
            "details": dict(self.details),
        }

    def __repr__(self):
        return f"<Issue {self.rule_id} [{self.severity.value}] {self.impact:.1f} {self.asset_path}>"
