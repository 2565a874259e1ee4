"""
analyzer/thresholds.py — Threshold configuration read once at scan start.
"""
from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Mapping, Optional


class InvalidThresholds(ValueError):
    """A threshold is missing a positive integer value."""


@dataclass(frozen=True)
class Thresholds:
    max_triangles_per_mesh: int = 100000
    max_texture_size: int = 2048
    max_blueprint_nodes: int = 200
    max_texture_samples_per_material: int = 8

    @classmethod
    def from_mapping(cls, config: Optional[Mapping[str, Any]]) -> "Thresholds":
        """
        Build thresholds from a mapping. Accepts the option names
        (``max_texture_size``) and the upper-case app config keys
        (``MAX_TEXTURE_SIZE``); anything absent keeps its default.
        """
        if not config:
            return cls()
        values = {}
        for f in fields(cls):
            for key in (f.name, f.name.upper()):
                if key in config and config[key] is not None:
                    values[f.name] = config[key]
                    break
        return cls(**values)

    def validate(self) -> "Thresholds":
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise InvalidThresholds(f"{f.name} must be a positive integer, got {value!r}")
        return self

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)
