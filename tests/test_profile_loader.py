"""Unit tests for profile loader."""

import pytest
import yaml
from unittest.mock import patch

from taxinvoice.config.profile_loader import (
    ProfileConfig,
    load_profile,
    list_available_profiles,
    get_profiles_dir
)
from taxinvoice.config.profile_manager import set_profile, get_profile, reset_profile


class TestProfileConfig:
    """Test ProfileConfig dataclass."""

    def test_defaults(self):
        """Built-in defaults: rupee, Indian grouping, 7 + 14 items per page."""
        config = ProfileConfig(name="test")

        assert config.currency["major_unit"] == "Rupees"
        assert config.grouping == (3, 2)
        assert config.pagination["first_page_capacity"] == 7
        assert config.pagination["page_capacity"] == 14
        assert config.totals_tolerance == 0.01
        assert not config.tolerate_partial_data

    def test_from_dict_merges_over_defaults(self):
        """Partial sections keep the remaining defaults."""
        config = ProfileConfig.from_dict({
            "name": "us",
            "currency": {"major_unit": "Dollars", "grouping": [3]},
        })

        assert config.name == "us"
        assert config.currency["major_unit"] == "Dollars"
        assert config.currency["minor_unit"] == "Paisa"
        assert config.grouping == (3,)
        assert config.tax["default_rate"] == 18

    def test_to_dict(self):
        """Test converting ProfileConfig to dictionary."""
        data = ProfileConfig(name="test", description="Test").to_dict()

        assert data["name"] == "test"
        assert data["description"] == "Test"
        assert data["pagination"]["reserve_totals_page"] is True

    @pytest.mark.parametrize("section", [
        {"pagination": {"first_page_capacity": 0}},
        {"pagination": {"page_capacity": "14"}},
        {"currency": {"grouping": []}},
        {"currency": {"grouping": [3, 0]}},
    ])
    def test_invalid_values(self, section):
        with pytest.raises(ValueError):
            ProfileConfig.from_dict(section)


class TestLoadProfile:
    """Test profile loading."""

    def test_load_profile(self, tmp_path):
        """Test loading a profile from YAML."""
        profiles_dir = tmp_path / "profiles"
        profiles_dir.mkdir()

        (profiles_dir / "export.yaml").write_text(
            yaml.dump({"description": "Export invoices", "tax": {"default_rate": 0}}),
            encoding='utf-8'
        )

        with patch('taxinvoice.config.profile_loader.get_profiles_dir', return_value=profiles_dir):
            profile = load_profile("export")

            assert profile.name == "export"
            assert profile.description == "Export invoices"
            assert profile.tax["default_rate"] == 0

    def test_load_profile_not_found(self, tmp_path):
        """Test loading non-existent profile."""
        with patch('taxinvoice.config.profile_loader.get_profiles_dir', return_value=tmp_path):
            with pytest.raises(FileNotFoundError):
                load_profile("nonexistent")

    def test_load_profile_invalid_yaml(self, tmp_path):
        """Test loading invalid YAML profile."""
        (tmp_path / "invalid.yaml").write_text("invalid: yaml: content: [", encoding='utf-8')

        with patch('taxinvoice.config.profile_loader.get_profiles_dir', return_value=tmp_path):
            with pytest.raises(ValueError):
                load_profile("invalid")

    def test_load_profile_empty(self, tmp_path):
        (tmp_path / "empty.yaml").write_text("", encoding='utf-8')

        with patch('taxinvoice.config.profile_loader.get_profiles_dir', return_value=tmp_path):
            with pytest.raises(ValueError):
                load_profile("empty")

    def test_bundled_profiles(self):
        """The shipped profiles load and differ where intended."""
        assert load_profile("default").grouping == (3, 2)
        assert load_profile("lenient").tolerate_partial_data
        assert load_profile("words_only").currency["words_suffix"] == "Only"

    def test_profiles_dir_from_environment(self, tmp_path, monkeypatch):
        monkeypatch.setenv("TAXINVOICE_PROFILES_DIR", str(tmp_path))
        assert get_profiles_dir() == tmp_path


class TestProfileManager:
    """Test profile manager."""

    def test_set_and_get_profile(self, tmp_path):
        """Test setting and getting profile."""
        (tmp_path / "test.yaml").write_text(yaml.dump({"name": "test"}), encoding='utf-8')

        with patch('taxinvoice.config.profile_loader.get_profiles_dir', return_value=tmp_path):
            reset_profile()
            profile = set_profile("test")

            assert profile.name == "test"
            assert get_profile().name == "test"

    def test_get_default_profile(self):
        """Test getting default profile."""
        reset_profile()
        assert get_profile().name == "default"

    def test_profile_from_environment(self, monkeypatch):
        """TAXINVOICE_PROFILE selects the profile loaded on first use."""
        monkeypatch.setenv("TAXINVOICE_PROFILE", "lenient")
        reset_profile()

        profile = get_profile()
        assert profile.name == "lenient"
        assert profile.tolerate_partial_data

    def test_unknown_environment_profile_uses_defaults(self, tmp_path, monkeypatch):
        monkeypatch.setenv("TAXINVOICE_PROFILE", "missing")

        with patch('taxinvoice.config.profile_loader.get_profiles_dir', return_value=tmp_path):
            reset_profile()
            profile = get_profile()

        assert profile.name == "missing"
        assert profile.pagination["first_page_capacity"] == 7


class TestListProfiles:
    """Test listing available profiles."""

    def test_list_available_profiles(self, tmp_path):
        """Test listing profiles."""
        (tmp_path / "default.yaml").write_text("name: default", encoding='utf-8')
        (tmp_path / "custom.yaml").write_text("name: custom", encoding='utf-8')

        with patch('taxinvoice.config.profile_loader.get_profiles_dir', return_value=tmp_path):
            assert list_available_profiles() == ["custom", "default"]

    def test_missing_directory(self, tmp_path):
        with patch('taxinvoice.config.profile_loader.get_profiles_dir', return_value=tmp_path / "none"):
            assert list_available_profiles() == ["default"]
