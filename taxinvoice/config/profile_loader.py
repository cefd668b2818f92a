"""Profile loader for jurisdiction-specific engine behavior."""

import os
import yaml
from pathlib import Path
from typing import Dict, Any, List, Tuple
from dataclasses import dataclass, field


DEFAULT_CURRENCY: Dict[str, Any] = {
    "major_unit": "Rupees",
    "minor_unit": "Paisa",
    "zero_word": "Zero",
    "grouping": [3, 2],
    "group_separator": ",",
    "decimal_separator": ".",
    "words_suffix": None,
}
DEFAULT_TAX: Dict[str, Any] = {"default_rate": 18}
DEFAULT_PAGINATION: Dict[str, Any] = {
    "first_page_capacity": 7,
    "page_capacity": 14,
    "reserve_totals_page": True,
}
DEFAULT_TOLERANCES: Dict[str, float] = {"totals": 0.01}
DEFAULT_VALIDATION: Dict[str, Any] = {"tolerate_partial_data": False}
DEFAULT_DISPLAY: Dict[str, Any] = {"quantity_suffix": " Pcs", "empty_area": "-"}


def _merged(defaults: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(defaults)
    merged.update(overrides or {})
    return merged


@dataclass
class ProfileConfig:
    """Configuration profile for the invoice engine.

    Sections are plain dicts; missing keys fall back to the built-in defaults
    (Indian rupee, 7/14 item pagination, one-paisa tolerance).
    """
    name: str
    description: str = ""
    currency: Dict[str, Any] = field(default_factory=lambda: dict(DEFAULT_CURRENCY))
    tax: Dict[str, Any] = field(default_factory=lambda: dict(DEFAULT_TAX))
    pagination: Dict[str, Any] = field(default_factory=lambda: dict(DEFAULT_PAGINATION))
    tolerances: Dict[str, float] = field(default_factory=lambda: dict(DEFAULT_TOLERANCES))
    validation: Dict[str, Any] = field(default_factory=lambda: dict(DEFAULT_VALIDATION))
    display: Dict[str, Any] = field(default_factory=lambda: dict(DEFAULT_DISPLAY))

    def __post_init__(self):
        """Validate pagination capacities and grouping."""
        for key in ("first_page_capacity", "page_capacity"):
            value = self.pagination.get(key, DEFAULT_PAGINATION[key])
            if not isinstance(value, int) or value < 1:
                raise ValueError(f"pagination.{key} must be a positive integer, got {value!r}")
        grouping = self.currency.get("grouping", DEFAULT_CURRENCY["grouping"])
        if not grouping or any(not isinstance(g, int) or g < 1 for g in grouping):
            raise ValueError(f"currency.grouping must be a list of positive integers, got {grouping!r}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ProfileConfig':
        """Create ProfileConfig from dictionary."""
        return cls(
            name=data.get('name', 'default'),
            description=data.get('description', ''),
            currency=_merged(DEFAULT_CURRENCY, data.get('currency', {})),
            tax=_merged(DEFAULT_TAX, data.get('tax', {})),
            pagination=_merged(DEFAULT_PAGINATION, data.get('pagination', {})),
            tolerances=_merged(DEFAULT_TOLERANCES, data.get('tolerances', {})),
            validation=_merged(DEFAULT_VALIDATION, data.get('validation', {})),
            display=_merged(DEFAULT_DISPLAY, data.get('display', {})),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'name': self.name,
            'description': self.description,
            'currency': self.currency,
            'tax': self.tax,
            'pagination': self.pagination,
            'tolerances': self.tolerances,
            'validation': self.validation,
            'display': self.display,
        }

    @property
    def grouping(self) -> Tuple[int, ...]:
        return tuple(self.currency.get("grouping", DEFAULT_CURRENCY["grouping"]))

    @property
    def totals_tolerance(self) -> float:
        return float(self.tolerances.get("totals", DEFAULT_TOLERANCES["totals"]))

    @property
    def tolerate_partial_data(self) -> bool:
        return bool(self.validation.get("tolerate_partial_data", False))


def get_profiles_dir() -> Path:
    """Get directory containing profile YAML files.

    TAXINVOICE_PROFILES_DIR overrides the default of configs/profiles
    relative to the project root.

    Returns:
        Path to profiles directory
    """
    env_dir = os.getenv("TAXINVOICE_PROFILES_DIR")
    if env_dir:
        return Path(env_dir)
    # taxinvoice/config/profile_loader.py -> taxinvoice/config -> taxinvoice -> root
    project_root = Path(__file__).resolve().parent.parent.parent
    return project_root / "configs" / "profiles"


def load_profile(profile_name: str = "default") -> ProfileConfig:
    """Load a configuration profile.

    Args:
        profile_name: Name of profile to load (without .yaml extension)

    Returns:
        ProfileConfig object

    Raises:
        FileNotFoundError: If profile file doesn't exist
        ValueError: If profile file is invalid
    """
    profiles_dir = get_profiles_dir()
    profile_path = profiles_dir / f"{profile_name}.yaml"

    if not profile_path.exists():
        raise FileNotFoundError(f"Profile not found: {profile_name} (expected at {profile_path})")

    try:
        with open(profile_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in profile {profile_name}: {e}") from e

    if not data:
        raise ValueError(f"Profile file is empty: {profile_path}")
    if not isinstance(data, dict):
        raise ValueError(f"Profile {profile_name} must be a mapping, got {type(data).__name__}")

    data.setdefault('name', profile_name)
    return ProfileConfig.from_dict(data)


def list_available_profiles() -> List[str]:
    """List all available profile names.

    Returns:
        List of profile names (without .yaml extension)
    """
    profiles_dir = get_profiles_dir()

    if not profiles_dir.exists():
        return ["default"]

    profiles = [profile_file.stem for profile_file in profiles_dir.glob("*.yaml")]
    return sorted(profiles) if profiles else ["default"]

