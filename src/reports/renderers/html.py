"""
Print-ready HTML renderer.

Renders ``print_report.html`` with Jinja2. The document carries its own page
setup (``@page``), the optional watermark, header and footer, and every data
row (no truncation). The same HTML backs both the ``pdf`` and ``print``
formats.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Dict, List, Mapping

from jinja2 import Environment, FileSystemLoader

from ..assembler import ReportData
from ..dates import format_datetime
from ..locales import format_translation, get_translations
from ..paths import get_templates_dir
from ..presentation import CrystalReportConfig
from .formatting import describe_filters, format_cell

HTML_TEMPLATE_NAME = "print_report.html"


@lru_cache(maxsize=1)
def get_environment() -> Environment:
    """Shared Jinja2 environment (rendering is thread-safe)."""
    return Environment(
        loader=FileSystemLoader(get_templates_dir()),
        autoescape=True,
    )


def _declarations(properties: Mapping[str, Any]) -> str:
    return " ".join(f"{prop}: {value};" for prop, value in properties.items())


def custom_css(config: CrystalReportConfig) -> str:
    """Turn ``custom_styles`` into a CSS block.

    A mapping is read as ``selector -> {property: value}``; a plain string is
    used as CSS text.
    """
    styles = config.custom_styles
    if not styles:
        return ""
    if isinstance(styles, str):
        css = styles
    else:
        rules: List[str] = []
        for selector, properties in styles.items():
            if isinstance(properties, Mapping):
                rules.append(f"{selector} {{ {_declarations(properties)} }}")
            else:
                rules.append(f"{selector} {{ {properties} }}")
        css = "\n".join(rules)
    # Keep user CSS inside the <style> element.
    return css.replace("</", "<\\/")


def build_context(report: ReportData, config: CrystalReportConfig) -> Dict[str, Any]:
    """Template variables for ``print_report.html``."""
    t = get_translations(config.locale)
    template = report.template
    generated = format_datetime(report.generated_at, config.date_format)
    return {
        "t": t,
        "lang": config.locale,
        "config": config,
        "page_css": config.page_css,
        "custom_css": custom_css(config),
        "brand": config.branding_name,
        "report_name": template.name,
        "description": template.description,
        "generated": generated,
        "generated_by": report.generated_by,
        "filters": describe_filters(report.filters, t),
        "headers": [f.label for f in template.fields],
        "rows": [[format_cell(f, row.get(f.key)) for f in template.fields] for row in report.data],
        "total_records": report.summary.total_records,
        "aggregations": list(report.summary.aggregations.items()),
        "copyright": format_translation(
            t,
            "copyright",
            brand=config.branding_name,
            year=report.generated_at.year,
            tagline=config.branding_tagline,
        ),
    }


def render_html(report: ReportData, config: CrystalReportConfig) -> str:
    """Render a report as a complete, print-ready HTML document."""
    html_template = get_environment().get_template(HTML_TEMPLATE_NAME)
    return html_template.render(**build_context(report, config))
