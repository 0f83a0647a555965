"""
Version information for the AVNU SDK.
"""
import importlib.metadata
import pathlib

import tomli

DISTRIBUTION = "avnu-sdk"
UNKNOWN_VERSION = "0.0.0+unknown"


def _pyproject_version() -> str:
    # Source checkouts without installed metadata
    path = pathlib.Path(__file__).parent.parent / "pyproject.toml"
    try:
        with open(path, "rb") as f:
            return tomli.load(f)["project"]["version"]
    except (FileNotFoundError, KeyError, tomli.TOMLDecodeError):
        return UNKNOWN_VERSION


try:
    __version__ = importlib.metadata.version(DISTRIBUTION)
except importlib.metadata.PackageNotFoundError:
    __version__ = _pyproject_version()
