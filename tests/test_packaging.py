from pathlib import Path

import pytest
from setuptools import find_namespace_packages

ROOT = Path(__file__).resolve().parent.parent


def test_distribution_includes_namespace_packages():
    tomllib = pytest.importorskip("tomllib")
    config = tomllib.loads((ROOT / "pyproject.toml").read_text())
    find = config["tool"]["setuptools"]["packages"]["find"]
    assert find["namespaces"] is True

    packages = find_namespace_packages(where=str(ROOT), include=find["include"])
    for name in ("genbooks", "genbooks.api.endpoints", "genbooks.core", "genbooks.services", "genbooks.storage"):
        assert name in packages
    assert config["tool"]["setuptools"]["package-data"]["genbooks"] == ["templates/*.html"]
