"""
tests/conftest.py — pytest fixtures for the Asset Optimization Linter
"""
import json

import pytest

from app import create_app
from extensions import db


@pytest.fixture(scope="session")
def app():
    """Create a test Flask application."""
    application = create_app("testing")
    with application.app_context():
        db.create_all()
        yield application
        db.drop_all()


@pytest.fixture()
def client(app):
    """Test client for API integration tests."""
    return app.test_client()


@pytest.fixture()
def runner(app):
    return app.test_cli_runner()


# ── Synthetic catalogue manifests ────────────────────────────────────────────

def _make_manifest(with_scene: bool = True) -> dict:
    """A small project: one offender per rule family plus an engine material."""
    manifest = {
        "meshes": [
            {"name": "SM_Statue", "path": "/Game/Props/SM_Statue", "lods": 3, "triangles": 320000},
            {"name": "SM_Crate", "path": "/Game/Props/SM_Crate", "lods": 1, "triangles": 40000},
            {"name": "SM_Cube", "path": "/Game/Props/SM_Cube", "lods": 1, "triangles": 12},
        ],
        "textures": [
            {"name": "T_Cliff_D", "path": "/Game/Textures/T_Cliff_D", "width": 4096, "height": 4096},
            {"name": "T_Small", "path": "/Game/Textures/T_Small", "width": 512, "height": 512},
        ],
        "materials": [
            {
                "name": "M_Glass", "path": "/Game/Materials/M_Glass",
                "two_sided": True, "blend_mode": "translucent",
                "textures": [f"/Game/Textures/T_Glass_{i}" for i in range(10)],
            },
            {
                "name": "M_Rock", "path": "/Game/Materials/M_Rock",
                "textures": ["/Game/Textures/T_Cliff_D", "/Game/Textures/T_Small"],
            },
            {
                "name": "M_EngineDefault", "path": "/Engine/EngineMaterials/M_EngineDefault",
                "two_sided": True, "blend_mode": "additive",
                "textures": [f"/Engine/Textures/T_{i}" for i in range(12)],
            },
        ],
        "material_instances": [
            {"name": "MI_Rock_Wet", "path": "/Game/Materials/MI_Rock_Wet", "parent": "/Game/Materials/M_Rock"},
        ],
        "blueprints": [
            {
                "name": "BP_Enemy", "path": "/Game/Blueprints/BP_Enemy",
                "event_graphs": [{"name": "EventGraph", "nodes": ["Event Tick"] + ["Branch"] * 299}],
                "function_graphs": [{"name": "UpdateAI", "nodes": ["Set"] * 200}],
            },
        ],
    }
    if with_scene:
        manifest["scene"] = {
            "actors": [
                {"name": "Statue_1", "instances": [
                    {"mesh": "/Game/Props/SM_Statue", "materials": ["/Game/Materials/M_Rock"]},
                ]},
                {"name": "Statue_2", "instances": [
                    {"mesh": "/Game/Props/SM_Statue", "materials": ["/Game/Materials/M_Rock"]},
                ]},
                {"name": "Crate_1", "instances": [
                    {"mesh": "/Game/Props/SM_Crate", "materials": ["/Game/Materials/M_Glass"]},
                ]},
            ]
        }
    return manifest


@pytest.fixture()
def manifest_dict():
    return _make_manifest()


@pytest.fixture()
def manifest_file(tmp_path):
    path = tmp_path / "catalogue.json"
    path.write_text(json.dumps(_make_manifest()), encoding="utf-8")
    return path
