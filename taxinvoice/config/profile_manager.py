"""Active engine profile shared by the CLI, the API and the pipeline."""

import logging
from typing import Optional

from .profile_loader import ProfileConfig, load_profile
from .settings import get_profile_name

logger = logging.getLogger(__name__)

_current_profile: Optional[ProfileConfig] = None


def set_profile(profile_name: str = "default") -> ProfileConfig:
    """Load a profile by name and make it the active one.

    Raises:
        FileNotFoundError: If profile doesn't exist
        ValueError: If profile is invalid
    """
    global _current_profile
    _current_profile = load_profile(profile_name)
    logger.debug(f"Active profile: {_current_profile.name}")
    return _current_profile


def get_profile() -> ProfileConfig:
    """Active profile, loaded on first use from TAXINVOICE_PROFILE.

    Without a profile file of that name the built-in defaults are used.
    """
    global _current_profile
    if _current_profile is None:
        profile_name = get_profile_name()
        try:
            _current_profile = load_profile(profile_name)
        except FileNotFoundError:
            logger.warning(f"Profile {profile_name!r} not found, using built-in defaults")
            _current_profile = ProfileConfig(name=profile_name, description="Built-in defaults")
    return _current_profile


def reset_profile():
    """Forget the active profile; the next get_profile() reloads it."""
    global _current_profile
    _current_profile = None
