"""Tests for pnpm workspace discovery."""

import json
from pathlib import Path

import pytest

from infrastructure.workspace import (
  WorkspaceNotFoundError,
  find_workspace_root,
  get_pnpm_workspaces,
  get_workspace_path,
)


def write_package(path: Path, manifest: dict[str, str]) -> None:
  path.mkdir(parents=True, exist_ok=True)
  (path / "package.json").write_text(json.dumps(manifest))


class TestGetPnpmWorkspaces:
  """Test get_pnpm_workspaces."""

  def test_discovers_packages(self, workspace_root: Path) -> None:
    workspaces = get_pnpm_workspaces(workspace_root)

    assert workspaces == {
      "@astro-aws/docs": (workspace_root / "apps" / "docs").resolve(),
      "@astro-aws/examples-base": (workspace_root / "examples" / "base").resolve(),
    }

  def test_root_package_not_included(self, workspace_root: Path) -> None:
    """The root package.json is only listed when a pattern matches it."""
    assert "astro-aws" not in get_pnpm_workspaces(workspace_root)

  def test_exclusion_patterns(self, tmp_path: Path) -> None:
    (tmp_path / "pnpm-workspace.yaml").write_text(
      "packages:\n  - packages/*\n  - '!packages/internal'\n"
    )
    write_package(tmp_path / "packages" / "public", {"name": "public"})
    write_package(tmp_path / "packages" / "internal", {"name": "internal"})

    assert list(get_pnpm_workspaces(tmp_path)) == ["public"]

  def test_skips_unnamed_and_missing_manifests(self, tmp_path: Path) -> None:
    (tmp_path / "pnpm-workspace.yaml").write_text("packages:\n  - packages/*\n")
    write_package(tmp_path / "packages" / "unnamed", {"version": "1.0.0"})
    (tmp_path / "packages" / "empty").mkdir(parents=True)
    write_package(tmp_path / "packages" / "named", {"name": "named"})

    assert list(get_pnpm_workspaces(tmp_path)) == ["named"]

  def test_empty_manifest(self, tmp_path: Path) -> None:
    (tmp_path / "pnpm-workspace.yaml").write_text("")

    assert get_pnpm_workspaces(tmp_path) == {}

  def test_missing_manifest(self, tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
      get_pnpm_workspaces(tmp_path)


class TestFindWorkspaceRoot:
  """Test find_workspace_root."""

  def test_finds_parent(self, workspace_root: Path) -> None:
    start = workspace_root / "apps" / "docs" / "dist"
    assert find_workspace_root(start) == workspace_root.resolve()

  def test_no_manifest(self, tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
      find_workspace_root(tmp_path)


class TestGetWorkspacePath:
  """Test get_workspace_path."""

  def test_known_package(self) -> None:
    assert get_workspace_path({"docs": "/repo/apps/docs"}, "docs") == Path("/repo/apps/docs")

  def test_unknown_package(self) -> None:
    with pytest.raises(WorkspaceNotFoundError) as excinfo:
      get_workspace_path({"docs": Path("/repo/apps/docs")}, "@astro-aws/missing")

    assert excinfo.value.package == "@astro-aws/missing"
    assert str(excinfo.value) == "Unable to find workspace for @astro-aws/missing"
