"""Fixed-width text renderer (dense, log-style output capped at 50 rows)."""

from __future__ import annotations

from typing import List

from ..assembler import ReportData
from ..dates import format_datetime
from ..locales import format_translation, get_translations
from ..presentation import CrystalReportConfig
from .formatting import describe_filters, format_cell

ROW_CAP = 50
COLUMN_DELIMITER = " | "
BANNER_RULE = "=" * 40
SECTION_RULE = "-" * 40


def _section(title: str) -> List[str]:
    return ["", SECTION_RULE, title, SECTION_RULE]


def render_text(report: ReportData, config: CrystalReportConfig) -> str:
    """Render a report as plain text.

    Only the first ``ROW_CAP`` rows are listed; the trailing marker counts
    the rest from ``summary.total_records``.
    """
    t = get_translations(config.locale)
    brand = config.branding_name
    generated = format_datetime(report.generated_at, config.date_format)
    template = report.template
    lines: List[str] = []

    if config.show_header:
        lines += [BANNER_RULE, format_translation(t, "banner", brand=brand.upper()), BANNER_RULE]
    if config.show_logo:
        lines.append(format_translation(t, "logo_placeholder", brand=brand.upper()))

    lines += [
        "",
        f"{t['report']}: {template.name}",
        f"{t['description']}: {template.description}",
        f"{t['generated']}: {generated}",
        f"{t['generated_by']}: {report.generated_by}",
    ]
    if config.watermark:
        lines.append(f"{t['watermark']}: {config.watermark}")

    lines += _section(t["applied_filters"])
    applied = describe_filters(report.filters, t)
    lines += [f"{label}: {value}" for label, value in applied] or [t["no_filters"]]

    lines += _section(t["report_data"])
    lines += [f"{t['total_records']}: {report.summary.total_records}", ""]

    header = COLUMN_DELIMITER.join(f.label for f in template.fields)
    lines += [header, "-" * len(header)]

    shown = report.data[:ROW_CAP]
    for row in shown:
        lines.append(COLUMN_DELIMITER.join(format_cell(f, row.get(f.key)) for f in template.fields))

    remaining = report.summary.total_records - len(shown)
    if remaining > 0:
        lines.append(format_translation(t, "more_records", remaining=remaining))

    if report.summary.aggregations:
        lines += _section(t["summary_title"])
        lines += [f"{key}: {value}" for key, value in report.summary.aggregations.items()]

    if config.show_footer:
        lines += [
            "",
            SECTION_RULE,
            format_translation(
                t,
                "copyright",
                brand=brand,
                year=report.generated_at.year,
                tagline=config.branding_tagline,
            ),
        ]
        if config.show_page_numbers:
            lines.append(format_translation(t, "page_of", page=1, pages=1))
        if config.show_generation_date:
            lines.append(f"{t['generation_date']}: {generated}")

    return "\n".join(lines) + "\n"
