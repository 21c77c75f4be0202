"""pnpm workspace discovery.

Maps workspace package names to the directories that hold them, so a
website stack can find the build output of the package it deploys.
"""

import json
import logging
from collections.abc import Mapping
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

WORKSPACE_MANIFEST = "pnpm-workspace.yaml"


class WorkspaceNotFoundError(LookupError):
  """Raised when a package name is not part of the workspace."""

  def __init__(self, package: str) -> None:
    super().__init__(f"Unable to find workspace for {package}")
    self.package = package


def find_workspace_root(start: Path | str) -> Path:
  """Return the nearest directory at or above ``start`` with a pnpm manifest."""
  start = Path(start).resolve()
  for directory in (start, *start.parents):
    if (directory / WORKSPACE_MANIFEST).is_file():
      return directory
  raise FileNotFoundError(f"No {WORKSPACE_MANIFEST} found at or above {start}")


def get_pnpm_workspaces(root: Path | str) -> dict[str, Path]:
  """List the packages declared by ``pnpm-workspace.yaml`` under ``root``.

  Patterns prefixed with ``!`` exclude directories matched by the others.
  Directories without a named ``package.json`` are skipped.
  """
  root = Path(root).resolve()
  with open(root / WORKSPACE_MANIFEST) as f:
    data = yaml.safe_load(f) or {}

  patterns: list[str] = data.get("packages", [])
  excluded = {
    path.resolve()
    for pattern in patterns
    if pattern.startswith("!")
    for path in root.glob(pattern[1:])
  }

  workspaces: dict[str, Path] = {}
  for pattern in patterns:
    if pattern.startswith("!"):
      continue
    for path in sorted(root.glob(pattern)):
      path = path.resolve()
      package_json = path / "package.json"
      if path in excluded or not package_json.is_file():
        continue

      name = json.loads(package_json.read_text()).get("name")
      if not name:
        logger.debug("Skipping unnamed workspace package at %s", path)
        continue

      workspaces[name] = path

  logger.debug("Found %d workspace packages under %s", len(workspaces), root)
  return workspaces


def get_workspace_path(workspaces: Mapping[str, Path | str], package: str) -> Path:
  """Look up the directory of a workspace package."""
  if package not in workspaces:
    raise WorkspaceNotFoundError(package)
  return Path(workspaces[package])
