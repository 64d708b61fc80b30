"""Version of the DesignAuto Catalog API.

Installed builds report the distribution metadata; source checkouts read
``pyproject.toml`` at the repository root.
"""

import tomllib
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

DISTRIBUTION_NAME = "designauto-catalog-api"

# src/api/infrastructure/version.py -> repository root
PYPROJECT_PATH = Path(__file__).resolve().parents[3] / "pyproject.toml"


def read_pyproject_version(path: Path | None = None) -> str:
    """Read ``project.version`` from a pyproject file."""
    with open(path or PYPROJECT_PATH, "rb") as f:
        return tomllib.load(f)["project"]["version"]


def get_version() -> str:
    """Get the application version, e.g. "0.1.0"."""
    try:
        return version(DISTRIBUTION_NAME)
    except PackageNotFoundError:
        return read_pyproject_version()


__version__ = get_version()
