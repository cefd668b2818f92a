"""Configuration package."""

from .settings import (
    get_app_name,
    get_app_version,
    get_default_output_dir,
    get_output_subdirs,
    get_profile_name,
)

__all__ = [
    'get_app_name',
    'get_app_version',
    'get_default_output_dir',
    'get_output_subdirs',
    'get_profile_name',
]
