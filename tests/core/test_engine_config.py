"""Tests for engine configuration loading."""

import json
from pathlib import Path

import pytest

from core.config import DEFAULT_TIMEZONE, EngineConfig, load_engine_config


def _write_config(base_dir: Path, content: str) -> None:
    config_dir = base_dir / "config"
    config_dir.mkdir(parents=True, exist_ok=True)
    (config_dir / "config.yml").write_text(content, encoding="utf-8")


class TestDefaults:
    def test_missing_file_gives_defaults(self, tmp_path):
        config = load_engine_config(tmp_path)

        assert isinstance(config, EngineConfig)
        assert config.base_dir == tmp_path
        assert config.logs_dir == tmp_path / "logs"
        assert config.timezone == DEFAULT_TIMEZONE
        assert config.fiscal_year_start_month == 1
        assert config.default_locale == "es"
        assert config.catalogs == []
        assert config.branding.name == "Griver"
        assert config.branding.tagline == "Sistema de Gestión de Cursos"
        assert config.logging.level == "INFO"
        assert config.logging.max_mb == 50
        assert config.logging.backup_count == 10

    def test_empty_file_gives_defaults(self, tmp_path):
        _write_config(tmp_path, "")
        assert load_engine_config(tmp_path).timezone == DEFAULT_TIMEZONE

    def test_tzinfo(self, tmp_path):
        assert str(load_engine_config(tmp_path).tzinfo) == "America/Mexico_City"


class TestOverrides:
    def test_values_are_read(self, tmp_path):
        _write_config(
            tmp_path,
            """
timezone: Europe/Madrid
fiscal_year_start_month: 4
default_locale: en
branding:
  name: Acme
  tagline: Training
logging:
  level: DEBUG
  max_mb: 5
  backup_count: 2
""",
        )
        config = load_engine_config(tmp_path)

        assert config.timezone == "Europe/Madrid"
        assert config.fiscal_year_start_month == 4
        assert config.default_locale == "en"
        assert config.branding.name == "Acme"
        assert config.branding.tagline == "Training"
        assert config.logging.level == "DEBUG"
        assert config.logging.max_mb == 5
        assert config.logging.backup_count == 2

    def test_relative_catalogs_resolved_against_config_dir(self, tmp_path):
        absolute = tmp_path / "elsewhere" / "extra.yml"
        _write_config(tmp_path, f"catalogs:\n  - extra.yml\n  - {absolute}\n")

        config = load_engine_config(tmp_path)

        assert config.catalogs == [tmp_path / "config" / "extra.yml", absolute]

    def test_to_json(self, tmp_path):
        data = json.loads(load_engine_config(tmp_path).to_json())
        assert data["timezone"] == DEFAULT_TIMEZONE
        assert data["branding"]["name"] == "Griver"


class TestValidation:
    def test_non_mapping_rejected(self, tmp_path):
        _write_config(tmp_path, "- a\n- b\n")
        with pytest.raises(ValueError, match="mapping"):
            load_engine_config(tmp_path)

    def test_malformed_yaml_rejected(self, tmp_path):
        _write_config(tmp_path, "timezone: [unclosed\n")
        with pytest.raises(ValueError, match="not valid YAML"):
            load_engine_config(tmp_path)

    def test_unknown_timezone_rejected(self, tmp_path):
        _write_config(tmp_path, "timezone: Mars/Olympus\n")
        with pytest.raises(ValueError, match="timezone"):
            load_engine_config(tmp_path)

    @pytest.mark.parametrize("month", [0, 13])
    def test_fiscal_month_out_of_range(self, tmp_path, month):
        _write_config(tmp_path, f"fiscal_year_start_month: {month}\n")
        with pytest.raises(ValueError, match="fiscal_year_start_month"):
            load_engine_config(tmp_path)
