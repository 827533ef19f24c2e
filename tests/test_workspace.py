"""Tests for httpspec.workspace."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from httpspec.context import Context
from httpspec.http_resource import HttpResource
from httpspec.projects import Project
from httpspec.spec import Resource, _resource_registry
from httpspec.specop import Absent, Ensure, Present
from httpspec.workspace import Workspace


class TrackingResource(Resource["Project"]):
    type_name = "widget"

    def __init__(self, label: str, **kwargs):
        super().__init__(label)
        self.kwargs = kwargs

    def create(self, ctx: Context[Project]) -> None:
        pass

    def read(self, ctx: Context[Project]) -> None:
        pass

    def update(self, ctx: Context[Project]) -> None:
        pass

    def delete(self, ctx: Context[Project]) -> None:
        pass


def _write_hcl(tmp_path: Path, filename: str, content: str) -> Path:
    """Write an HCL file directly into tmp_path (flat structure)."""
    f = tmp_path / filename
    f.parent.mkdir(parents=True, exist_ok=True)
    f.write_text(content)
    return f


@pytest.fixture(autouse=True)
def _clean_registry():
    saved = _resource_registry.copy()
    _resource_registry["widget"] = TrackingResource
    yield
    _resource_registry.clear()
    _resource_registry.update(saved)


class TestWorkspaceConstruction:
    def test_default_project_type(self):
        assert Workspace().project_type is Project

    def test_custom_project_type(self):
        class Custom(Project):
            extra: str = ""

        assert Workspace(project_type=Custom).project_type is Custom

    def test_empty_workspace(self):
        ws = Workspace()
        assert len(ws) == 0
        assert list(ws) == []
        assert "anything" not in ws

    def test_getitem_empty_raises(self):
        with pytest.raises(KeyError):
            Workspace()["missing"]

    def test_get_empty_returns_default(self):
        ws = Workspace()
        assert ws.get("missing") is None

    def test_context_includes_env(self, monkeypatch):
        monkeypatch.setenv("HTTPSPEC_WS", "1")
        ws = Workspace(context={"region": "eu"})
        assert ws.context["env"]["HTTPSPEC_WS"] == "1"
        assert ws.context["region"] == "eu"

    def test_repr_empty(self):
        text = repr(Workspace())
        assert "Workspace" in text
        assert "blueprints=0" in text
        assert "projects=0" in text


class TestWorkspaceLoad:
    def test_load_single_file_with_project(self, tmp_path):
        _write_hcl(tmp_path, "test.hcl", 'project "myproj" { description = "test" }\n')
        ws = Workspace()
        ws.load(tmp_path / "test.hcl")
        assert "myproj" in ws
        assert ws["myproj"].description == "test"

    def test_load_accepts_string_path(self, tmp_path):
        _write_hcl(tmp_path, "test.hcl", 'project "myproj" { description = "test" }\n')
        ws = Workspace()
        ws.load(str(tmp_path / "test.hcl"))
        assert "myproj" in ws

    def test_load_blueprint_and_project(self, tmp_path):
        _write_hcl(
            tmp_path,
            "test.hcl",
            """
            blueprint "base" {
                ensure "widget" "one" { color = "red" }
            }
            project "myproj" {
                use = ["base"]
            }
        """,
        )
        ws = Workspace()
        ws.load(tmp_path / "test.hcl")
        proj = ws["myproj"]
        assert len(proj.blueprints) == 1
        op = proj.blueprints[0].ops[0]
        assert isinstance(op, Ensure)
        assert op.address == "widget.one"
        assert op.resource.kwargs == {"color": "red"}

    def test_load_multiple_files(self, tmp_path):
        _write_hcl(tmp_path, "a.hcl", 'blueprint "base" {\n  ensure "widget" "w" { color = "red" }\n}\n')
        _write_hcl(tmp_path, "b.hcl", 'project "myproj" {\n  use = ["base"]\n}\n')
        ws = Workspace()
        ws.load(tmp_path / "a.hcl")
        ws.load(tmp_path / "b.hcl")
        assert len(ws["myproj"].blueprints) == 1

    def test_duplicate_blueprint_raises(self, tmp_path):
        _write_hcl(tmp_path, "a.hcl", 'blueprint "base" {\n  ensure "widget" "w" { color = "red" }\n}\n')
        _write_hcl(tmp_path, "b.hcl", 'blueprint "base" {\n  ensure "widget" "w" { color = "blue" }\n}\n')
        ws = Workspace()
        ws.load(tmp_path / "a.hcl")
        with pytest.raises(ValueError, match="base"):
            ws.load(tmp_path / "b.hcl")

    def test_duplicate_project_raises(self, tmp_path):
        _write_hcl(tmp_path, "a.hcl", 'project "myproj" { description = "first" }\n')
        _write_hcl(tmp_path, "b.hcl", 'project "myproj" { description = "second" }\n')
        ws = Workspace()
        ws.load(tmp_path / "a.hcl")
        with pytest.raises(ValueError, match="myproj"):
            ws.load(tmp_path / "b.hcl")

    def test_repr_after_load(self, tmp_path):
        _write_hcl(
            tmp_path,
            "test.hcl",
            'blueprint "bp" {\n  ensure "widget" "w" { color = "red" }\n}\n'
            'project "p" {\n  use = ["bp"]\n}\n',
        )
        ws = Workspace()
        ws.load(tmp_path / "test.hcl")
        assert "blueprints=1" in repr(ws)
        assert "projects=1" in repr(ws)


class TestWorkspaceScan:
    def test_scan_finds_hcl_files(self, tmp_path):
        _write_hcl(tmp_path, "a.hcl", 'project "a" { description = "alpha" }\n')
        _write_hcl(tmp_path, "b.hcl", 'project "b" { description = "beta" }\n')
        ws = Workspace()
        ws.scan(tmp_path)
        assert sorted(ws) == ["a", "b"]

    def test_scan_accepts_string_path(self, tmp_path):
        _write_hcl(tmp_path, "a.hcl", 'project "a" { description = "alpha" }\n')
        ws = Workspace()
        ws.scan(str(tmp_path))
        assert "a" in ws

    def test_scan_recurse_true(self, tmp_path):
        _write_hcl(tmp_path, "a.hcl", 'project "a" { description = "alpha" }\n')
        _write_hcl(tmp_path, "sub/b.hcl", 'project "b" { description = "beta" }\n')
        ws = Workspace()
        ws.scan(tmp_path, recurse=True)
        assert len(ws) == 2

    def test_scan_recurse_false(self, tmp_path):
        _write_hcl(tmp_path, "a.hcl", 'project "a" { description = "alpha" }\n')
        _write_hcl(tmp_path, "sub/b.hcl", 'project "b" { description = "beta" }\n')
        ws = Workspace()
        ws.scan(tmp_path, recurse=False)
        assert list(ws) == ["a"]

    def test_scan_sorted_order(self, tmp_path):
        _write_hcl(tmp_path, "b.hcl", 'project "second" { description = "b" }\n')
        _write_hcl(tmp_path, "a.hcl", 'project "first" { description = "a" }\n')
        ws = Workspace()
        ws.scan(tmp_path)
        assert list(ws) == ["first", "second"]

    def test_scan_empty_dir(self, tmp_path):
        ws = Workspace()
        ws.scan(tmp_path)
        assert len(ws) == 0

    def test_scan_missing_dir_warns(self, tmp_path, caplog):
        ws = Workspace()
        with caplog.at_level(logging.WARNING, logger="httpspec.workspace"):
            ws.scan(tmp_path / "nonexistent")
        assert len(ws) == 0
        assert "does not exist" in caplog.text

    def test_scan_ignores_non_hcl_files(self, tmp_path):
        _write_hcl(tmp_path, "test.hcl", 'project "myproj" { description = "test" }\n')
        (tmp_path / "readme.txt").write_text("not hcl")
        ws = Workspace()
        ws.scan(tmp_path)
        assert list(ws) == ["myproj"]


class TestWorkspaceResolution:
    def test_strategies(self, tmp_path):
        _write_hcl(
            tmp_path,
            "test.hcl",
            """
            project "p" {
                present "widget" "a" { color = "red" }
                ensure "widget" "b" { color = "green" }
                absent "widget" "c" { color = "blue" }
            }
        """,
        )
        ws = Workspace()
        ws.load(tmp_path / "test.hcl")
        ops = ws["p"].ops
        assert [type(op) for op in ops] == [Present, Ensure, Absent]
        assert ws["p"].blueprints[0].name == "p:inline"

    def test_http_resource_from_hcl(self, tmp_path):
        _write_hcl(
            tmp_path,
            "test.hcl",
            """
            project "p" {
                ensure "http_resource" "things" {
                    url = "https://api.example.com/things"
                    request_headers = { Authorization = "Bearer ${env.HTTPSPEC_TOKEN}" }
                    body = "payload"
                    variant = "negotiated"
                    timeout = 5
                }
            }
        """,
        )
        ws = Workspace(context={"env": {"HTTPSPEC_TOKEN": "abc"}})
        ws.load(tmp_path / "test.hcl")
        resource = ws["p"].ops[0].resource
        assert isinstance(resource, HttpResource)
        assert resource.address == "http_resource.things"
        assert resource.spec.url == "https://api.example.com/things"
        assert resource.spec.request_headers == {"Authorization": "Bearer abc"}
        assert resource.spec.body == "payload"
        assert resource.variant == "negotiated"
        assert resource.dispatcher.timeout == 5

    def test_undefined_reference_raises(self, tmp_path):
        _write_hcl(
            tmp_path,
            "test.hcl",
            'project "p" {\n  ensure "widget" "w" { color = "${nope}" }\n}\n',
        )
        ws = Workspace()
        ws.load(tmp_path / "test.hcl")
        with pytest.raises(ValueError, match="nope"):
            ws["p"]

    def test_missing_required_attribute_raises(self, tmp_path):
        _write_hcl(
            tmp_path,
            "test.hcl",
            'project "p" {\n  ensure "http_resource" "things" { body = "x" }\n}\n',
        )
        ws = Workspace()
        ws.load(tmp_path / "test.hcl")
        with pytest.raises(ValueError, match="http_resource.things"):
            ws["p"]

    def test_extra_project_fields(self, tmp_path):
        class Custom(Project):
            owner: str = ""

        _write_hcl(tmp_path, "test.hcl", 'project "p" {\n  owner = "team-a"\n}\n')
        ws = Workspace(project_type=Custom)
        ws.load(tmp_path / "test.hcl")
        assert ws["p"].owner == "team-a"

    def test_fresh_resolution_each_access(self, tmp_path):
        _write_hcl(tmp_path, "test.hcl", 'project "a" { description = "alpha" }\n')
        ws = Workspace()
        ws.load(tmp_path / "test.hcl")
        proj1 = ws["a"]
        proj2 = ws["a"]
        assert proj1 is not proj2
        assert proj1.name == proj2.name


class TestWorkspaceMapping:
    def test_keys_values_items(self, tmp_path):
        _write_hcl(
            tmp_path,
            "test.hcl",
            'project "a" { description = "alpha" }\nproject "b" { description = "beta" }\n',
        )
        ws = Workspace()
        ws.load(tmp_path / "test.hcl")
        assert sorted(ws.keys()) == ["a", "b"]
        assert sorted(p.description for p in ws.values()) == ["alpha", "beta"]
        assert dict(ws.items())["a"].name == "a"

    def test_filter(self, tmp_path):
        _write_hcl(
            tmp_path,
            "test.hcl",
            'project "a" { description = "alpha" }\n'
            'project "b" { description = "beta" }\n'
            'project "c" { description = "gamma" }\n',
        )
        ws = Workspace()
        ws.load(tmp_path / "test.hcl")
        assert [p.name for p in ws.filter(["c", "missing", "a"])] == ["c", "a"]
        assert ws.filter([]) == []

    def test_get_existing(self, tmp_path):
        _write_hcl(tmp_path, "test.hcl", 'project "a" { description = "alpha" }\n')
        ws = Workspace()
        ws.load(tmp_path / "test.hcl")
        assert ws.get("a").description == "alpha"
