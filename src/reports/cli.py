"""
Command-line front end of the reporting engine.

    griver-reports templates --role rh
    griver-reports generate rpt_employee_progress --records records.json \\
        --filter '{"departments": ["Ventas"]}' --format csv --output progreso.csv

Errors are reported as one localized line on stderr with exit status 2.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from core.app_version import get_app_version
from core.config import EngineConfig, load_engine_config
from core.enums import ReportFormat, Role
from core.logging import configure_logging, get_logger

from .datasource import InMemoryDataSource
from .exceptions import InvalidFilterError, PresentationConfigError, ReportError
from .locales import SUPPORTED_LOCALES, get_translations
from .renderers import RenderedReport
from .service import ReportService
from .surfaces import write_pdf

LOGGER = get_logger("reports.cli")

EXIT_OK = 0
EXIT_ERROR = 2


def _json_option(value: Optional[str], error: type[ReportError], name: str) -> Optional[Dict[str, Any]]:
    if value is None:
        return None
    try:
        parsed = json.loads(value)
    except ValueError as exc:
        raise error(f"--{name} is not valid JSON: {exc}") from exc
    if not isinstance(parsed, dict):
        raise error(f"--{name} must be a JSON object")
    return parsed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="griver-reports", description="Generate training platform reports.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {get_app_version()}")
    parser.add_argument(
        "--base-dir",
        type=Path,
        default=Path.cwd(),
        help="Directory holding config/config.yml and logs/ (default: current directory).",
    )
    parser.add_argument(
        "--locale",
        choices=list(SUPPORTED_LOCALES),
        help="Locale for messages and rendered text (default from config).",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    templates = sub.add_parser("templates", help="List the report templates available to a role.")
    templates.add_argument("--role", required=True, choices=[r.value for r in Role])

    generate = sub.add_parser("generate", help="Generate and render a report.")
    generate.add_argument("template_id")
    generate.add_argument("--records", required=True, type=Path, help="JSON file with the source records.")
    generate.add_argument("--filter", dest="filter_json", help="Report filter as a JSON object.")
    generate.add_argument(
        "--format",
        dest="fmt",
        default=ReportFormat.TEXT.value,
        choices=[f.value for f in ReportFormat],
    )
    generate.add_argument("--output", type=Path, help="Output file (default: stdout for text formats).")
    generate.add_argument("--user", default="cli", help="Name recorded as the report author.")
    generate.add_argument("--config", dest="config_json", help="Presentation options as a JSON object.")
    return parser


def _list_templates(config: EngineConfig, role: str) -> int:
    service = ReportService(InMemoryDataSource([]), config=config)
    for template in service.list_templates(role):
        print(f"{template.id}\t{template.name}\t{template.description}")
    return EXIT_OK


def _write_artifact(artifact: RenderedReport, output: Optional[Path]) -> None:
    if output is None and not artifact.is_binary:
        sys.stdout.write(str(artifact.content))
        return

    target = output or Path(artifact.filename)
    target.parent.mkdir(parents=True, exist_ok=True)
    if artifact.format is ReportFormat.PDF and target.suffix.lower() == ".pdf":
        write_pdf(str(artifact.content), target)
    elif artifact.is_binary:
        target.write_bytes(artifact.content)
    else:
        target.write_text(str(artifact.content), encoding="utf-8")
    print(target)


def _generate(config: EngineConfig, args: argparse.Namespace, locale: str) -> int:
    raw_filter = _json_option(args.filter_json, InvalidFilterError, "filter")
    raw_config = _json_option(args.config_json, PresentationConfigError, "config") or {}
    raw_config.setdefault("locale", locale)

    service = ReportService(InMemoryDataSource.from_json(args.records), config=config)
    report = service.generate_report(args.template_id, raw_filter, args.user)
    artifact = service.render_report(report, args.fmt, raw_config)
    _write_artifact(artifact, args.output)
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    locale = args.locale

    try:
        config = load_engine_config(args.base_dir)
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_ERROR

    locale = locale or config.default_locale
    configure_logging(
        config.logs_dir,
        level=config.logging.level,
        max_bytes=config.logging.max_mb * 1024 * 1024,
        backup_count=config.logging.backup_count,
    )

    try:
        if args.command == "templates":
            return _list_templates(config, args.role)
        return _generate(config, args, locale)
    except ReportError as exc:
        LOGGER.debug("Command %s failed: %s", args.command, exc)
        print(f"error: {exc.user_message(locale)}", file=sys.stderr)
        return EXIT_ERROR
    except OSError as exc:
        LOGGER.debug("Command %s failed: %s", args.command, exc)
        print(f"error: {get_translations(locale)['error_generic']}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
