"""
Inbound facade of the reporting engine.

``ReportService`` wires the template registry, the data assembler and the
renderers together behind the two operations callers need:

    service = ReportService(data_source, config=load_engine_config(base_dir))
    report = service.generate_report("rpt_employee_progress", {"departments": ["Ventas"]}, "Ana")
    artifact = service.render_report(report, "pdf", {"watermark": "CONFIDENCIAL"})

Template lookup and filter validation happen before any data access.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Callable, List, Mapping, Optional, Union

from core.config import EngineConfig
from core.enums import ReportFormat, Role
from core.logging import get_logger

from .assembler import DataSource, ReportAssembler, ReportData
from .catalog import ReportTemplate, TemplateRegistry, get_registry
from .filters import ReportFilter, parse_filter
from .presentation import CrystalReportConfig
from .renderers import RenderedReport
from .renderers import render_report as _render

LOGGER = get_logger("reports.service")

RawFilter = Union[Mapping[str, Any], ReportFilter, None]
RawConfig = Union[Mapping[str, Any], CrystalReportConfig, None]


class ReportService:
    """Generates and renders reports for one data source."""

    def __init__(
        self,
        data_source: DataSource,
        registry: Optional[TemplateRegistry] = None,
        config: Optional[EngineConfig] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._config = config
        self._registry = registry if registry is not None else get_registry(config.catalogs if config else None)
        self._assembler = ReportAssembler(
            data_source,
            clock=clock,
            tz=config.tzinfo if config else None,
            fiscal_year_start_month=config.fiscal_year_start_month if config else 1,
        )

    @property
    def registry(self) -> TemplateRegistry:
        return self._registry

    def list_templates(self, role: Role | str) -> List[ReportTemplate]:
        """Templates the role may run, in registration order."""
        return self._registry.list_for(role)

    def generate_report(self, template_id: str, raw_filter: RawFilter, requested_by: str) -> ReportData:
        """Generate a report from a template id and a raw (UI) filter.

        Raises:
            TemplateNotFoundError: If the template id is unknown
            InvalidFilterError: If the filter is malformed or contradictory
            DataSourceError: If the data-access collaborator fails
        """
        template = self._registry.get(template_id)
        report_filter = parse_filter(raw_filter)
        LOGGER.debug("Generating %s for %s with filter %s", template_id, requested_by, report_filter.to_dict())
        return self._assembler.generate(template, report_filter, requested_by)

    def presentation_config(self, raw: RawConfig = None) -> CrystalReportConfig:
        """Build a presentation config, filling locale and branding from the engine config."""
        if isinstance(raw, CrystalReportConfig):
            return raw
        defaults = {}
        if self._config is not None:
            defaults = {
                "locale": self._config.default_locale,
                "branding_name": self._config.branding.name,
                "branding_tagline": self._config.branding.tagline,
            }
        return CrystalReportConfig.from_mapping(raw, **defaults)

    def render_report(
        self,
        report: ReportData,
        fmt: Union[ReportFormat, str],
        config: RawConfig = None,
        surface: Optional[Any] = None,
    ) -> RenderedReport:
        """Render a generated report in the requested format.

        Raises:
            PresentationConfigError: If the presentation config is invalid
            RenderSurfaceError: If the print surface is unavailable
        """
        return _render(report, fmt, self.presentation_config(config), surface=surface)


def generate_report(
    data_source: DataSource,
    template_id: str,
    raw_filter: RawFilter,
    requested_by: str,
    registry: Optional[TemplateRegistry] = None,
) -> ReportData:
    """One-shot report generation with the default registry."""
    return ReportService(data_source, registry=registry).generate_report(template_id, raw_filter, requested_by)


def render_report(
    report: ReportData,
    fmt: Union[ReportFormat, str],
    config: RawConfig = None,
    surface: Optional[Any] = None,
) -> RenderedReport:
    """Render a report; ``config`` may be a raw mapping or a ``CrystalReportConfig``."""
    if not isinstance(config, CrystalReportConfig):
        config = CrystalReportConfig.from_mapping(config)
    return _render(report, fmt, config, surface=surface)
