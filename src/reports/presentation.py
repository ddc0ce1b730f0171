"""
Presentation configuration shared by every renderer.

``CrystalReportConfig`` is a pure value: renderers read it and never mutate
it. Because every renderer reads the same dataclass, a field that is absent
from the request gets the same default everywhere:

    page_size=letter, orientation=portrait, show_header=True,
    show_footer=True, show_logo=True, show_page_numbers=True,
    show_generation_date=True, watermark=None, custom_styles=None,
    locale="es", date_format="es", branding_name="Griver",
    branding_tagline="Sistema de Gestión de Cursos"
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from core.enums import Orientation, PageSize

from .dates import DATE_PATTERNS
from .exceptions import PresentationConfigError
from .locales import SUPPORTED_LOCALES

# UI wire names -> CrystalReportConfig attribute names
CONFIG_ALIASES = {
    "pageSize": "page_size",
    "showHeader": "show_header",
    "showFooter": "show_footer",
    "showLogo": "show_logo",
    "showPageNumbers": "show_page_numbers",
    "showGenerationDate": "show_generation_date",
    "customStyles": "custom_styles",
    "dateFormat": "date_format",
}

_TOGGLES = (
    "show_header",
    "show_footer",
    "show_logo",
    "show_page_numbers",
    "show_generation_date",
)


@dataclass(frozen=True, slots=True)
class CrystalReportConfig:
    """Page setup, section toggles, watermark and locale policy."""

    page_size: PageSize = PageSize.LETTER
    orientation: Orientation = Orientation.PORTRAIT
    show_header: bool = True
    show_footer: bool = True
    show_logo: bool = True
    show_page_numbers: bool = True
    show_generation_date: bool = True
    watermark: Optional[str] = None
    custom_styles: Optional[Mapping[str, Any]] = None
    locale: str = "es"
    date_format: str = "es"
    branding_name: str = "Griver"
    branding_tagline: str = "Sistema de Gestión de Cursos"

    def __post_init__(self) -> None:
        try:
            object.__setattr__(self, "page_size", PageSize(self.page_size))
            object.__setattr__(self, "orientation", Orientation(self.orientation))
        except ValueError as exc:
            raise PresentationConfigError(str(exc)) from exc

        for name in _TOGGLES:
            if not isinstance(getattr(self, name), bool):
                raise PresentationConfigError(f"'{name}' must be true or false")

        if self.watermark is not None:
            watermark = str(self.watermark).strip()
            object.__setattr__(self, "watermark", watermark or None)

        if self.custom_styles is not None:
            if not isinstance(self.custom_styles, (Mapping, str)):
                raise PresentationConfigError("'custom_styles' must be a mapping or CSS text")
            if isinstance(self.custom_styles, Mapping):
                object.__setattr__(self, "custom_styles", MappingProxyType(dict(self.custom_styles)))

        if self.locale not in SUPPORTED_LOCALES:
            raise PresentationConfigError(f"Unsupported locale: {self.locale!r}")
        if self.date_format not in DATE_PATTERNS:
            raise PresentationConfigError(f"Unsupported date format: {self.date_format!r}")

    @classmethod
    def from_mapping(cls, raw: Optional[Mapping[str, Any]], **overrides: Any) -> "CrystalReportConfig":
        """Build a config from a raw mapping (UI wire names or snake_case).

        Keyword ``overrides`` fill in values the mapping does not set
        (e.g. branding from the engine configuration).

        Raises:
            PresentationConfigError: On unknown keys or invalid values
        """
        known = {f.name for f in fields(cls)}
        values: Dict[str, Any] = dict(overrides)
        for key, value in (raw or {}).items():
            name = CONFIG_ALIASES.get(key, key)
            if name not in known:
                raise PresentationConfigError(f"Unknown presentation option: {key!r}")
            values[name] = value
        return cls(**values)

    @property
    def page_css(self) -> str:
        """CSS ``@page size`` value for the page setup."""
        return f"{self.page_size} {self.orientation}"
