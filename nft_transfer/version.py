"""
Package version lookup.

An installed distribution reports its own metadata; a source checkout
that was never installed falls back to the version in pyproject.toml.
"""
import importlib.metadata
import pathlib

import tomli

DISTRIBUTION = "nft-transfer"
FALLBACK_VERSION = "0.1.0"
PYPROJECT = pathlib.Path(__file__).resolve().parent.parent / "pyproject.toml"


def _source_tree_version(pyproject: pathlib.Path) -> str:
    try:
        with pyproject.open("rb") as f:
            return tomli.load(f)["project"]["version"]
    except (FileNotFoundError, KeyError, tomli.TOMLDecodeError):
        return FALLBACK_VERSION


def get_version() -> str:
    """Version of the installed distribution, or of the source tree"""
    try:
        return importlib.metadata.version(DISTRIBUTION)
    except importlib.metadata.PackageNotFoundError:
        return _source_tree_version(PYPROJECT)


__version__ = get_version()
