"""Central application settings read from the environment."""

import os
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def get_app_name() -> str:
    """Get application name."""
    return "Tax Invoice Engine"


def get_app_version() -> str:
    """Get application version from pyproject.toml."""
    try:
        import tomli
        pyproject_path = Path(__file__).resolve().parent.parent.parent / "pyproject.toml"
        with open(pyproject_path, "rb") as f:
            pyproject = tomli.load(f)
            return pyproject.get("project", {}).get("version", "0.1.0")
    except (OSError, ImportError, ValueError) as e:
        logger.debug(f"Could not read version from pyproject.toml: {e}")
        from .. import __version__
        return __version__


def get_profile_name() -> str:
    """Get the configured profile name.

    Returns:
        Value of TAXINVOICE_PROFILE, default "default"
    """
    return os.getenv("TAXINVOICE_PROFILE", "default").strip() or "default"


def get_default_output_dir() -> Path:
    """Get default output directory.

    TAXINVOICE_OUTPUT_DIR wins; otherwise project root / "out".

    Returns:
        Path object to default output directory (created if needed)
    """
    env_dir = os.getenv("TAXINVOICE_OUTPUT_DIR")
    if env_dir:
        output_dir = Path(env_dir)
    else:
        output_dir = Path(__file__).resolve().parent.parent.parent / "out"
    output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir


def get_output_subdirs(base_output_dir: Path) -> dict:
    """Get output subdirectory structure.

    Args:
        base_output_dir: Base output directory path

    Returns:
        Dict with keys: 'render', 'excel', 'errors'
    """
    subdirs = {
        'render': base_output_dir / 'render',
        'excel': base_output_dir / 'excel',
        'errors': base_output_dir / 'errors',
    }

    for subdir in subdirs.values():
        subdir.mkdir(parents=True, exist_ok=True)

    return subdirs
