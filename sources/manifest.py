"""
sources/manifest.py — Build an Asset Source from a JSON catalogue manifest.

A manifest is a JSON object describing exported catalogue data:

    {
        "engine_prefixes": ["/Engine/"],
        "meshes":    [{"name", "path", "lods", "triangles"}],
        "textures":  [{"name", "path", "width", "height"}],
        "materials": [{"name", "path", "two_sided", "blend_mode", "textures": [path, ...]}],
        "material_instances": [{"name", "path", "parent"}],
        "blueprints": [{"name", "path",
                        "event_graphs":    [{"name", "nodes": ["Event Tick", ...]}],
                        "function_graphs": [...]}],
        "scene": {"actors": [{"name", "instances": [{"mesh": path, "materials": [path, ...]}]}]}
    }

Every section is optional. Omitting ``scene`` means no scene is active.
"""
import json
import logging
import os
from typing import Any, Dict, List, Optional, Union

from sources.memory import InMemoryAssetSource
from sources.views import (
    ActorView, BlendMode, BlueprintView, GraphView, MaterialInstanceView,
    MaterialView, MeshInstance, MeshView, NodeView, TextureView,
)

logger = logging.getLogger(__name__)


class ManifestError(ValueError):
    """The manifest is not valid JSON or does not have the expected structure."""


def load_manifest(
    manifest: Union[str, os.PathLike, Dict[str, Any]],
    default_engine_prefixes: Optional[List[str]] = None,
) -> InMemoryAssetSource:
    """
    Load a manifest from a file path or an already-decoded dict. The
    manifest's own ``engine_prefixes`` win over ``default_engine_prefixes``.
    """
    if isinstance(manifest, dict):
        data = manifest
    elif not isinstance(manifest, (str, os.PathLike)):
        raise ManifestError("Manifest root must be a JSON object")
    else:
        try:
            with open(manifest, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ManifestError(f"Manifest is not valid JSON: {e}") from e
        except OSError as e:
            raise ManifestError(f"Cannot read manifest {manifest}: {e}") from e

    if not isinstance(data, dict):
        raise ManifestError("Manifest root must be a JSON object")

    textures = [_texture(entry) for entry in _section(data, "textures")]
    textures_by_path = {t.path: t for t in textures}

    meshes = [_mesh(entry) for entry in _section(data, "meshes")]
    meshes_by_path = {m.path: m for m in meshes}

    materials = [_material(entry, textures_by_path) for entry in _section(data, "materials")]
    materials_by_path = {m.path: m for m in materials}

    instances = [_material_instance(entry) for entry in _section(data, "material_instances")]
    blueprints = [_blueprint(entry) for entry in _section(data, "blueprints")]

    scene = None
    if data.get("scene") is not None:
        scene = _scene(data["scene"], meshes_by_path, materials_by_path)

    source = InMemoryAssetSource(
        meshes=meshes,
        textures=textures,
        materials=materials,
        material_instances=instances,
        blueprints=blueprints,
        scene=scene,
        engine_prefixes=data.get("engine_prefixes") or default_engine_prefixes,
    )
    logger.info("Loaded manifest: %s", source)
    return source


# ── Sections ────────────────────────────────────────────────────────────────────

def _section(data: Dict, key: str) -> List[Dict]:
    entries = data.get(key) or []
    if not isinstance(entries, list):
        raise ManifestError(f"'{key}' must be a list")
    for entry in entries:
        if not isinstance(entry, dict):
            raise ManifestError(f"Every entry in '{key}' must be an object")
    return entries


def _texture(entry: Dict) -> TextureView:
    path = _required(entry, "path", "texture")
    return TextureView(
        name=entry.get("name") or _basename(path),
        path=path,
        width=_optional_int(entry, "width"),
        height=_optional_int(entry, "height"),
    )


def _mesh(entry: Dict) -> MeshView:
    path = _required(entry, "path", "mesh")
    return MeshView(
        name=entry.get("name") or _basename(path),
        path=path,
        lod_count=_optional_int(entry, "lods"),
        triangles=_optional_int(entry, "triangles"),
    )


def _material(entry: Dict, textures_by_path: Dict[str, TextureView]) -> MaterialView:
    path = _required(entry, "path", "material")
    blend = entry.get("blend_mode", BlendMode.OPAQUE.value)
    try:
        blend_mode = BlendMode(str(blend).lower())
    except ValueError:
        raise ManifestError(f"Material {path}: unknown blend mode {blend!r}") from None

    used = []
    for ref in entry.get("textures") or []:
        if isinstance(ref, dict):
            used.append(_texture(ref))
        elif ref in textures_by_path:
            used.append(textures_by_path[ref])
        else:
            # Referenced but not exported: still a sample, but without dimensions.
            logger.debug("Material %s references unlisted texture %s", path, ref)
            used.append(TextureView(name=_basename(ref), path=ref))

    return MaterialView(
        name=entry.get("name") or _basename(path),
        path=path,
        two_sided=bool(entry.get("two_sided", False)),
        blend_mode=blend_mode,
        used_textures=tuple(used),
    )


def _material_instance(entry: Dict) -> MaterialInstanceView:
    path = _required(entry, "path", "material instance")
    return MaterialInstanceView(
        name=entry.get("name") or _basename(path),
        path=path,
        parent_path=entry.get("parent"),
    )


def _blueprint(entry: Dict) -> BlueprintView:
    path = _required(entry, "path", "blueprint")
    return BlueprintView(
        name=entry.get("name") or _basename(path),
        path=path,
        event_graphs=tuple(_graph(g, path) for g in entry.get("event_graphs") or []),
        function_graphs=tuple(_graph(g, path) for g in entry.get("function_graphs") or []),
    )


def _graph(entry: Any, owner: str) -> GraphView:
    if not isinstance(entry, dict):
        raise ManifestError(f"Blueprint {owner}: graphs must be objects")
    nodes = []
    for node in entry.get("nodes") or []:
        if isinstance(node, dict):
            nodes.append(NodeView(title=str(node.get("title", ""))))
        else:
            nodes.append(NodeView(title=str(node)))
    return GraphView(name=entry.get("name", ""), nodes=tuple(nodes))


def _scene(scene: Any, meshes_by_path: Dict, materials_by_path: Dict) -> List[ActorView]:
    if not isinstance(scene, dict):
        raise ManifestError("'scene' must be an object")
    actors = []
    for actor in _section(scene, "actors"):
        instances = []
        for inst in actor.get("instances") or []:
            if not isinstance(inst, dict):
                raise ManifestError(f"Actor {actor.get('name')}: instances must be objects")
            mesh_path = inst.get("mesh")
            mesh = meshes_by_path.get(mesh_path)
            if mesh is None:
                logger.warning("Actor %s references unknown mesh %s", actor.get("name"), mesh_path)
            materials = []
            for ref in inst.get("materials") or []:
                material = materials_by_path.get(ref)
                if material is None:
                    logger.warning("Actor %s references unknown material %s", actor.get("name"), ref)
                    continue
                materials.append(material)
            instances.append(MeshInstance(mesh=mesh, materials=tuple(materials)))
        actors.append(ActorView(name=actor.get("name", ""), instances=tuple(instances)))
    return actors


# ── Field helpers ───────────────────────────────────────────────────────────────

def _required(entry: Dict, key: str, kind: str) -> str:
    value = entry.get(key)
    if not value or not isinstance(value, str):
        raise ManifestError(f"Every {kind} needs a non-empty string '{key}'")
    return value


def _optional_int(entry: Dict, key: str) -> Optional[int]:
    value = entry.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ManifestError(f"'{key}' must be a number, got {value!r}")
    return int(value)


def _basename(path: str) -> str:
    return path.rstrip("/").rsplit("/", 1)[-1].split(".")[0]
