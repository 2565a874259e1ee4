"""sources/memory.py — Asset Source backed by plain in-memory lists."""
from typing import Dict, Iterable, List, Optional, Sequence

from sources.base import AssetSource
from sources.views import (
    ActorView, AssetKind, BlueprintView, MaterialInstanceView,
    MaterialView, MeshView, TextureView,
)


class InMemoryAssetSource(AssetSource):
    """Serves pre-built views in the order they were given."""

    def __init__(
        self,
        meshes: Iterable[MeshView] = (),
        textures: Iterable[TextureView] = (),
        materials: Iterable[MaterialView] = (),
        material_instances: Iterable[MaterialInstanceView] = (),
        blueprints: Iterable[BlueprintView] = (),
        scene: Optional[Iterable[ActorView]] = None,
        engine_prefixes: Optional[Sequence[str]] = None,
    ):
        super().__init__(engine_prefixes)
        self._assets: Dict[AssetKind, List] = {
            AssetKind.MESH: list(meshes),
            AssetKind.TEXTURE: list(textures),
            AssetKind.MATERIAL: list(materials),
            AssetKind.MATERIAL_INSTANCE: list(material_instances),
            AssetKind.BLUEPRINT: list(blueprints),
        }
        self._scene = list(scene) if scene is not None else None

    def enumerate(self, kind: AssetKind) -> List:
        return list(self._assets[kind])

    def scene(self) -> Optional[List[ActorView]]:
        if self._scene is None:
            return None
        return list(self._scene)

    def counts(self) -> Dict[str, int]:
        return {kind.value: len(views) for kind, views in self._assets.items()}

    def __repr__(self):
        actors = "none" if self._scene is None else len(self._scene)
        return f"<InMemoryAssetSource {self.counts()} actors={actors}>"
