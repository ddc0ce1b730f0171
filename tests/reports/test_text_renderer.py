"""Tests for the fixed-width text renderer."""

from datetime import datetime

import pytest

from reports.catalog import ReportField, ReportTemplate
from reports.filters import DateRange, ReportFilter, resolve_filter
from reports.presentation import CrystalReportConfig
from reports.renderers import ROW_CAP, render_text

from tests.fixtures.helpers import FIXED_NOW, data_lines, progress_records

HEADER = "Empleado | Avance"


@pytest.fixture
def config() -> CrystalReportConfig:
    return CrystalReportConfig()


class TestRows:
    def test_end_to_end_scenario(self, make_report, sample_records, config):
        report = make_report(sample_records, report_filter=ReportFilter(departments=("IT",)))
        text = render_text(report, config)
        lines = text.splitlines()

        assert "Ana | 100%" in lines
        assert "Luis | N/A" in lines
        assert "Eva | 45%" in lines
        assert "Total de Registros: 3" in lines

    def test_header_and_rule(self, make_report, sample_records, config):
        lines = render_text(make_report(sample_records), config).splitlines()
        index = lines.index(HEADER)
        assert lines[index + 1] == "-" * len(HEADER)

    def test_zero_is_not_missing(self, make_report, config):
        text = render_text(make_report([{"name": "Paco", "progress": 0}]), config)
        assert "Paco | 0%" in text.splitlines()

    def test_absent_key_renders_missing(self, make_report, config):
        text = render_text(make_report([{"name": "Sin avance"}]), config)
        assert "Sin avance | N/A" in text.splitlines()

    def test_non_percentage_numbers_have_no_suffix(self, make_report, config):
        template = ReportTemplate(
            id="t",
            name="T",
            type="custom",
            fields=(ReportField("name", "Empleado"), ReportField("days", "Días", "number")),
        )
        text = render_text(make_report([{"name": "Ana", "days": 12}], template=template), config)
        assert "Ana | 12" in text.splitlines()

    def test_percentage_float_kept(self, make_report, config):
        text = render_text(make_report([{"name": "Ana", "progress": 72.5}]), config)
        assert "Ana | 72.5%" in text.splitlines()


class TestTruncation:
    def test_seventy_five_rows(self, make_report, config):
        report = make_report(progress_records(75))
        body = data_lines(render_text(report, config), HEADER)

        assert len(body) == ROW_CAP + 1
        assert body[:ROW_CAP] == [f"Empleado {i:03d} | {(i * 7) % 101}%" for i in range(1, 51)]
        assert body[ROW_CAP] == "... y 25 registros más"
        assert report.summary.total_records == 75

    @pytest.mark.parametrize("count", [0, 1, 49, 50])
    def test_no_marker_at_or_below_cap(self, make_report, config, count):
        text = render_text(make_report(progress_records(count)), config)
        assert "registros más" not in text
        assert len(data_lines(text, HEADER)) == count

    @pytest.mark.parametrize("count, remaining", [(51, 1), (120, 70)])
    def test_marker_counts_remaining(self, make_report, config, count, remaining):
        text = render_text(make_report(progress_records(count)), config)
        assert f"... y {remaining} registros más" in text.splitlines()

    def test_english_marker(self, make_report):
        text = render_text(make_report(progress_records(53)), CrystalReportConfig(locale="en"))
        assert "... and 3 more records" in text.splitlines()

    def test_render_does_not_touch_report(self, make_report, config):
        report = make_report(progress_records(60))
        render_text(report, config)
        assert len(report.data) == 60
        assert report.summary.total_records == 60


class TestHeaderBlock:
    def test_default_sections(self, make_report, sample_records, config):
        lines = render_text(make_report(sample_records), config).splitlines()

        assert lines[:4] == [
            "=" * 40,
            "SISTEMA GRIVER - GESTIÓN DE CURSOS",
            "=" * 40,
            "[LOGO GRIVER]",
        ]
        assert "REPORTE: Progreso de Empleados" in lines
        assert "DESCRIPCIÓN: Avance de cada empleado" in lines
        assert "GENERADO: 15/05/2024 10:30:00" in lines
        assert "GENERADO POR: Ana Torres" in lines
        assert not any(line.startswith("MARCA DE AGUA") for line in lines)

    def test_header_and_logo_toggles(self, make_report, sample_records):
        config = CrystalReportConfig(show_header=False, show_logo=False)
        text = render_text(make_report(sample_records), config)
        assert "SISTEMA GRIVER" not in text
        assert "[LOGO GRIVER]" not in text
        assert text.splitlines()[1] == "REPORTE: Progreso de Empleados"

    def test_watermark_line(self, make_report, sample_records):
        text = render_text(make_report(sample_records), CrystalReportConfig(watermark="CONFIDENCIAL"))
        assert "MARCA DE AGUA: CONFIDENCIAL" in text.splitlines()

    def test_branding(self, make_report, sample_records):
        config = CrystalReportConfig(branding_name="Acme", branding_tagline="Capacitación")
        text = render_text(make_report(sample_records), config)
        assert "SISTEMA ACME - GESTIÓN DE CURSOS" in text
        assert "Acme © 2024 - Capacitación" in text

    def test_date_format(self, make_report, sample_records):
        text = render_text(make_report(sample_records), CrystalReportConfig(date_format="iso"))
        assert "GENERADO: 2024-05-15 10:30:00" in text.splitlines()


class TestFilters:
    def test_no_filters(self, make_report, sample_records, config):
        assert "Sin filtros aplicados" in render_text(make_report(sample_records), config).splitlines()

    def test_only_active_dimensions_listed(self, make_report, sample_records, config):
        report_filter = ReportFilter(departments=("IT", "RH"), min_progress=50)
        lines = render_text(make_report(sample_records, report_filter=report_filter), config).splitlines()

        assert "Departamentos: IT, RH" in lines
        assert "Progreso Mínimo: 50%" in lines
        assert not any(line.startswith("Cursos:") for line in lines)
        assert "Sin filtros aplicados" not in lines

    def test_date_range_shown_by_preset(self, make_report, sample_records, config):
        report_filter = resolve_filter({"dateRange": "last_month"}, now=FIXED_NOW)
        lines = render_text(make_report(sample_records, report_filter=report_filter), config).splitlines()
        assert "Rango de Fechas: last_month" in lines
        assert not any("2024-04-01" in line for line in lines)

    def test_custom_range_shown_by_preset(self, make_report, sample_records, config):
        report_filter = ReportFilter(date_range=DateRange("custom", datetime(2024, 1, 1), datetime(2024, 1, 31)))
        lines = render_text(make_report(sample_records, report_filter=report_filter), config).splitlines()
        assert "Rango de Fechas: custom" in lines


class TestSummaryAndFooter:
    def test_aggregations(self, make_report, sample_records, config):
        lines = render_text(make_report(sample_records), config).splitlines()
        index = lines.index("RESUMEN Y ESTADÍSTICAS")
        assert lines[index + 2 : index + 4] == ["avgProgress: 73", "completed: 1"]

    def test_no_summary_without_aggregations(self, make_report, config):
        template = ReportTemplate(id="t", name="T", type="custom", fields=(ReportField("name", "Empleado"),))
        text = render_text(make_report([{"name": "Ana"}], template=template), config)
        assert "RESUMEN Y ESTADÍSTICAS" not in text

    def test_full_footer(self, make_report, sample_records, config):
        lines = render_text(make_report(sample_records), config).splitlines()
        assert lines[-3:] == [
            "Griver © 2024 - Sistema de Gestión de Cursos",
            "Página 1 de 1",
            "Fecha de Generación: 15/05/2024 10:30:00",
        ]

    def test_footer_toggles(self, make_report, sample_records):
        config = CrystalReportConfig(show_page_numbers=False, show_generation_date=False)
        lines = render_text(make_report(sample_records), config).splitlines()
        assert lines[-1] == "Griver © 2024 - Sistema de Gestión de Cursos"

    def test_footer_hidden(self, make_report, sample_records):
        text = render_text(make_report(sample_records), CrystalReportConfig(show_footer=False))
        assert "©" not in text
        assert "Página 1 de 1" not in text

    def test_deterministic(self, make_report, sample_records, config):
        report = make_report(sample_records)
        assert render_text(report, config) == render_text(report, config)
