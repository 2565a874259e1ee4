"""
sources/views.py — Read-only views over catalogue assets.

Rules only see these views, never the content system behind them. Accessors
that the underlying catalogue could not resolve are ``None``.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple


class AssetKind(Enum):
    MESH = "mesh"
    TEXTURE = "texture"
    MATERIAL = "material"
    MATERIAL_INSTANCE = "material_instance"
    BLUEPRINT = "blueprint"


class BlendMode(Enum):
    OPAQUE = "opaque"
    MASKED = "masked"
    TRANSLUCENT = "translucent"
    ADDITIVE = "additive"
    MODULATE = "modulate"

    @property
    def is_translucent(self) -> bool:
        return self in TRANSLUCENT_BLEND_MODES


TRANSLUCENT_BLEND_MODES = frozenset({BlendMode.TRANSLUCENT, BlendMode.ADDITIVE, BlendMode.MODULATE})


class MissingAssetData(LookupError):
    """Raised by a view or source when an asset exists but a required accessor has no value."""


@dataclass(frozen=True)
class MeshView:
    name: str
    path: str
    lod_count: Optional[int] = None
    triangles: Optional[int] = None  # LOD 0


@dataclass(frozen=True)
class TextureView:
    name: str
    path: str
    width: Optional[int] = None
    height: Optional[int] = None

    @property
    def max_dimension(self) -> Optional[int]:
        if self.width is None or self.height is None:
            return None
        return max(self.width, self.height)


@dataclass(frozen=True)
class MaterialView:
    name: str
    path: str
    two_sided: bool = False
    blend_mode: BlendMode = BlendMode.OPAQUE
    used_textures: Tuple[TextureView, ...] = ()

    def unique_textures(self) -> List[TextureView]:
        """Used textures with repeated references to the same asset dropped, in first-use order."""
        seen = set()
        unique = []
        for texture in self.used_textures:
            if texture.path in seen:
                continue
            seen.add(texture.path)
            unique.append(texture)
        return unique

    @property
    def texture_sample_count(self) -> int:
        return len(self.unique_textures())


@dataclass(frozen=True)
class MaterialInstanceView:
    name: str
    path: str
    parent_path: Optional[str] = None


@dataclass(frozen=True)
class NodeView:
    title: str


@dataclass(frozen=True)
class GraphView:
    name: str
    nodes: Tuple[NodeView, ...] = ()


@dataclass(frozen=True)
class BlueprintView:
    name: str
    path: str
    event_graphs: Tuple[GraphView, ...] = ()
    function_graphs: Tuple[GraphView, ...] = ()

    @property
    def graphs(self) -> Tuple[GraphView, ...]:
        return self.event_graphs + self.function_graphs


@dataclass(frozen=True)
class MeshInstance:
    mesh: Optional[MeshView]
    materials: Tuple[MaterialView, ...] = ()


@dataclass(frozen=True)
class ActorView:
    name: str
    instances: Tuple[MeshInstance, ...] = field(default_factory=tuple)
