"""Tests for the project metadata in pyproject.toml."""

import tomllib
from pathlib import Path

from gcdisc.main import VERSION

ROOT = Path(__file__).resolve().parent.parent


def load_project() -> dict:
    with open(ROOT / "pyproject.toml", "rb") as f:
        return tomllib.load(f)["project"]


def test_declared_readme_exists() -> None:
    readme = load_project().get("readme")
    if readme is not None:
        path = readme if isinstance(readme, str) else readme["file"]
        assert (ROOT / path).is_file()
        assert path.lower().startswith("readme")


def test_version_matches_cli() -> None:
    assert load_project()["version"] == VERSION


def test_console_script_points_at_main() -> None:
    assert load_project()["scripts"]["gc-disc-inspector"] == "gcdisc.main:main"
