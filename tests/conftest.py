"""Pytest fixtures for CDK construct tests."""

import json
from pathlib import Path

import aws_cdk as cdk
import pytest

DOCS_PACKAGE = "@astro-aws/docs"
EXAMPLES_PACKAGE = "@astro-aws/examples-base"


def write_file(path: Path, content: str = "") -> None:
  """Write a file, creating parent directories."""
  path.parent.mkdir(parents=True, exist_ok=True)
  path.write_text(content)


def write_package(path: Path, name: str | None) -> None:
  """Write a package.json with the given name."""
  manifest = {"version": "0.0.0"} if name is None else {"name": name, "version": "0.0.0"}
  write_file(path / "package.json", json.dumps(manifest))


@pytest.fixture
def app() -> cdk.App:
  """Create a CDK App for testing."""
  return cdk.App()


@pytest.fixture
def stack(app: cdk.App) -> cdk.Stack:
  """Create a CDK Stack for testing."""
  return cdk.Stack(app, "TestStack", env=cdk.Environment(region="us-east-1"))


@pytest.fixture
def workspace_root(tmp_path: Path) -> Path:
  """Create a pnpm workspace with a static site and an SSR example.

  The docs package has a static build in ``dist``. The examples package
  has server-rendered builds in ``dist/ssr`` and ``dist/ssr-stream``.
  """
  write_file(tmp_path / "pnpm-workspace.yaml", "packages:\n  - apps/*\n  - examples/*\n")
  write_package(tmp_path, "astro-aws")

  docs = tmp_path / "apps" / "docs"
  write_package(docs, DOCS_PACKAGE)
  write_file(docs / "dist" / "index.html", "<h1>Docs</h1>")
  write_file(docs / "dist" / "403" / "index.html", "<h1>Forbidden</h1>")

  examples = tmp_path / "examples" / "base"
  write_package(examples, EXAMPLES_PACKAGE)
  for mode in ("ssr", "ssr-stream"):
    write_file(examples / "dist" / mode / "client" / "_astro" / "app.js", "")
    write_file(examples / "dist" / mode / "client" / "favicon.svg", "<svg/>")
    write_file(examples / "dist" / mode / "lambda" / "index.mjs", "export const handler = () => {}")

  return tmp_path


@pytest.fixture
def workspaces(workspace_root: Path) -> dict[str, Path]:
  """Workspace lookup table for the fixture packages."""
  return {
    DOCS_PACKAGE: workspace_root / "apps" / "docs",
    EXAMPLES_PACKAGE: workspace_root / "examples" / "base",
  }
