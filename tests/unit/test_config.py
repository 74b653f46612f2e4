"""Tests for configuration models and YAML loading."""

from pathlib import Path
from textwrap import dedent

import pytest
from pydantic import ValidationError

from src.core.config import (
    BusinessHoursConfig,
    ContactConfig,
    DatabaseConfig,
    DiscoveryConfig,
    Settings,
)


class TestDiscoveryConfig:
    def test_defaults(self) -> None:
        d = DiscoveryConfig()
        assert d.page_size == 12
        assert d.default_radius_km == 50.0
        assert d.max_radius_km == 200.0

    def test_page_size_bounds(self) -> None:
        with pytest.raises(ValidationError):
            DiscoveryConfig(page_size=0)
        with pytest.raises(ValidationError):
            DiscoveryConfig(page_size=101)

    def test_default_radius_within_max(self) -> None:
        with pytest.raises(ValidationError, match="max_radius_km"):
            DiscoveryConfig(default_radius_km=300, max_radius_km=100)


class TestBusinessHoursConfig:
    def test_default_timezone(self) -> None:
        assert BusinessHoursConfig().timezone == "America/Sao_Paulo"

    def test_unknown_timezone(self) -> None:
        with pytest.raises(ValidationError, match="unknown timezone"):
            BusinessHoursConfig(timezone="Mars/Olympus_Mons")


class TestContactConfig:
    def test_country_code_digits_only(self) -> None:
        assert ContactConfig().country_code == "55"
        with pytest.raises(ValidationError):
            ContactConfig(country_code="+55")


class TestDatabaseConfig:
    def test_default_path(self) -> None:
        assert DatabaseConfig().path == "data/providers.db"


class TestSettings:
    def test_load_from_yaml(self, tmp_path: Path) -> None:
        config_file = tmp_path / "settings.yaml"
        config_file.write_text(dedent("""\
            database:
              path: /tmp/test.db
            discovery:
              page_size: 5
              default_radius_km: 25
            business_hours:
              timezone: America/Recife
        """))
        s = Settings.from_yaml(config_file)
        assert s.database.path == "/tmp/test.db"
        assert s.discovery.page_size == 5
        assert s.discovery.default_radius_km == 25.0
        assert s.business_hours.timezone == "America/Recife"
        assert s.contact.country_code == "55"

    def test_empty_yaml_uses_defaults(self, tmp_path: Path) -> None:
        config_file = tmp_path / "settings.yaml"
        config_file.write_text("")
        s = Settings.from_yaml(config_file)
        assert s.discovery.page_size == 12

    def test_file_not_found(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError, match="Config file not found"):
            Settings.from_yaml(tmp_path / "missing.yaml")

    def test_invalid_values(self, tmp_path: Path) -> None:
        config_file = tmp_path / "settings.yaml"
        config_file.write_text("discovery:\n  page_size: -1\n")
        with pytest.raises(ValidationError):
            Settings.from_yaml(config_file)
