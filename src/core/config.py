from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml

DEFAULT_TIMEZONE = "America/Mexico_City"


@dataclass(slots=True)
class LoggingConfig:
    """Logging configuration from config.yml."""

    level: str = "INFO"
    max_mb: int = 50
    backup_count: int = 10


@dataclass(slots=True)
class BrandingConfig:
    """Branding strings printed in report headers and footers."""

    name: str = "Griver"
    tagline: str = "Sistema de Gestión de Cursos"


@dataclass(slots=True)
class EngineConfig:
    """Top-level configuration resolved from disk."""

    base_dir: Path
    logs_dir: Path
    timezone: str = DEFAULT_TIMEZONE
    fiscal_year_start_month: int = 1
    default_locale: str = "es"
    catalogs: List[Path] = field(default_factory=list)
    branding: BrandingConfig = field(default_factory=BrandingConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @property
    def tzinfo(self) -> ZoneInfo:
        """Reporting timezone used to resolve date presets."""
        return ZoneInfo(self.timezone)

    def to_json(self) -> str:
        """Serialize the configuration into a JSON string for diagnostics."""
        data = {
            "logs_dir": str(self.logs_dir),
            "timezone": self.timezone,
            "fiscal_year_start_month": self.fiscal_year_start_month,
            "default_locale": self.default_locale,
            "catalogs": [str(path) for path in self.catalogs],
            "branding": {"name": self.branding.name, "tagline": self.branding.tagline},
        }
        return json.dumps(data, indent=2, sort_keys=True)


def _load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as handle:
        try:
            content = yaml.safe_load(handle) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Config file {path} is not valid YAML: {exc}") from exc
        if not isinstance(content, dict):
            raise ValueError(f"Config file {path} must contain a mapping at the top level.")
        return content


def load_engine_config(base_dir: Path) -> EngineConfig:
    """Load engine configuration from disk, providing sensible defaults."""

    config_dir = base_dir / "config"
    overrides = _load_yaml(config_dir / "config.yml")

    timezone_name = str(overrides.get("timezone", DEFAULT_TIMEZONE))
    try:
        ZoneInfo(timezone_name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"Unknown timezone in config: {timezone_name!r}") from exc

    fiscal_start = int(overrides.get("fiscal_year_start_month", 1))
    if not 1 <= fiscal_start <= 12:
        raise ValueError(f"fiscal_year_start_month must be 1-12, got {fiscal_start}")

    # Relative catalog paths are resolved against the config directory.
    catalogs = []
    for entry in overrides.get("catalogs", []) or []:
        path = Path(entry)
        catalogs.append(path if path.is_absolute() else config_dir / path)

    branding_cfg = overrides.get("branding", {}) or {}
    branding = BrandingConfig(
        name=branding_cfg.get("name", "Griver"),
        tagline=branding_cfg.get("tagline", "Sistema de Gestión de Cursos"),
    )

    logging_cfg = overrides.get("logging", {}) or {}
    logging_config = LoggingConfig(
        level=logging_cfg.get("level", "INFO"),
        max_mb=logging_cfg.get("max_mb", 50),
        backup_count=logging_cfg.get("backup_count", 10),
    )

    return EngineConfig(
        base_dir=base_dir,
        logs_dir=base_dir / "logs",
        timezone=timezone_name,
        fiscal_year_start_month=fiscal_start,
        default_locale=overrides.get("default_locale", "es"),
        catalogs=catalogs,
        branding=branding,
        logging=logging_config,
    )
