"""
sources/base.py — Asset Source capability interface.

A source enumerates catalogue assets by kind, exposes the active scene (if
any) and decides which paths belong to the engine rather than the project.
"""
from abc import ABC, abstractmethod
from typing import Iterable, Optional, Sequence

from sources.views import ActorView, AssetKind

DEFAULT_ENGINE_PREFIXES = ("/Engine/",)


class AssetSource(ABC):
    """Read-only access to an asset catalogue and, optionally, a live scene."""

    def __init__(self, engine_prefixes: Optional[Sequence[str]] = None):
        self.engine_prefixes = tuple(engine_prefixes or DEFAULT_ENGINE_PREFIXES)

    @abstractmethod
    def enumerate(self, kind: AssetKind) -> Sequence:
        """Return the views of every catalogue asset of ``kind``."""

    @abstractmethod
    def scene(self) -> Optional[Iterable[ActorView]]:
        """Return the actors of the active scene, or ``None`` when no scene is open."""

    def is_engine_asset(self, path: str) -> bool:
        return any(path.startswith(prefix) for prefix in self.engine_prefixes)
