"""sources — Asset Source implementations consumed by the analyzer."""
from sources.base import AssetSource, DEFAULT_ENGINE_PREFIXES
from sources.memory import InMemoryAssetSource
from sources.manifest import ManifestError, load_manifest
from sources.views import (
    ActorView, AssetKind, BlendMode, BlueprintView, GraphView, MaterialInstanceView,
    MaterialView, MeshInstance, MeshView, MissingAssetData, NodeView, TextureView,
)

__all__ = [
    "AssetSource", "DEFAULT_ENGINE_PREFIXES", "InMemoryAssetSource",
    "ManifestError", "load_manifest",
    "ActorView", "AssetKind", "BlendMode", "BlueprintView", "GraphView",
    "MaterialInstanceView", "MaterialView", "MeshInstance", "MeshView",
    "MissingAssetData", "NodeView", "TextureView",
]
