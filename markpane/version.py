from __future__ import annotations

import importlib.metadata

from . import __version__


def get_version() -> str:
    """Installed distribution version, or the package version when not installed."""
    try:
        return importlib.metadata.version("markpane")
    except importlib.metadata.PackageNotFoundError:
        return __version__


def get_version_string() -> str:
    return f"markpane {get_version()}"


def welcome_caption() -> str:
    return f"Markpane editor -- version {get_version()}"
