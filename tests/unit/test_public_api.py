"""Smoke tests — the package exposes its public API and version."""

import dropcore


def test_version() -> None:
    assert dropcore.__version__ == "0.1.0"


def test_public_names_are_exported() -> None:
    for name in dropcore.__all__:
        assert hasattr(dropcore, name), name
