"""Tests for the report data assembler."""

from datetime import date, datetime

import pytest

from core.enums import ChartType, DateRangePreset, ProgressStatus
from reports.assembler import ReportAssembler, coerce_value, project_record, summarize
from reports.catalog import ChartSpec, ReportField, ReportTemplate, get_registry
from reports.exceptions import DataSourceError, InvalidFilterError
from reports.filters import DateRange, ReportFilter

from tests.fixtures.helpers import FIXED_NOW, StubDataSource, progress_records


class TestCoerceValue:
    @pytest.mark.parametrize(
        "field_type, raw, expected",
        [
            ("number", "12", 12),
            ("number", "1,250", 1250),
            ("number", "2.5", 2.5),
            ("percentage", "83%", 83),
            ("percentage", 83, 83),
            ("date", "15/01/2024", "2024-01-15"),
            ("date", date(2024, 1, 15), "2024-01-15"),
            ("date", "Pendiente", "Pendiente"),
            ("text", 42, "42"),
            ("status", "Completado", "Completado"),
        ],
    )
    def test_coercion(self, field_type, raw, expected):
        assert coerce_value(ReportField("k", "K", field_type), raw) == expected

    def test_none_stays_none(self):
        assert coerce_value(ReportField("k", "K", "number"), None) is None

    @pytest.mark.parametrize("raw", ["abc", True, "nan", "inf", "-Infinity", float("nan"), float("inf")])
    def test_invalid_number(self, raw):
        with pytest.raises(ValueError):
            coerce_value(ReportField("k", "K", "number"), raw)


class TestProjectRecord:
    def test_exactly_template_keys(self, progress_template):
        row = project_record(progress_template, {"name": "Ana", "progress": 100, "salary": 1})
        assert set(row) == {"name", "progress"}

    def test_missing_keys_become_none(self, progress_template):
        row = project_record(progress_template, {"name": "Ana"})
        assert row["progress"] is None

    def test_rows_are_read_only(self, progress_template):
        row = project_record(progress_template, {"name": "Ana", "progress": 1})
        with pytest.raises(TypeError):
            row["name"] = "Eva"

    def test_bad_value_is_data_source_error(self, progress_template):
        with pytest.raises(DataSourceError, match="progress"):
            project_record(progress_template, {"name": "Ana", "progress": "mucho"})

    @pytest.mark.parametrize("record", [None, ["Ana", 100], "Ana"])
    def test_non_mapping_record_is_data_source_error(self, progress_template, record):
        with pytest.raises(DataSourceError, match="non-mapping"):
            project_record(progress_template, record)


class TestGenerate:
    def test_end_to_end_scenario(self, make_assembler, progress_template, sample_records):
        source = StubDataSource(sample_records)
        report = make_assembler(source).generate(
            progress_template, ReportFilter(departments=("IT",)), "Ana Torres"
        )

        assert report.id == "report_test"
        assert report.summary.total_records == 3
        assert [row["name"] for row in report.data] == ["Ana", "Luis", "Eva"]
        assert report.generated_at == FIXED_NOW
        assert report.generated_by == "Ana Torres"
        assert report.filters.departments == ("IT",)
        assert source.calls[0].departments == ("IT",)

    def test_rows_have_exactly_field_keys(self, make_report, sample_records):
        report = make_report(sample_records)
        for row in report.data:
            assert set(row) == {"name", "progress"}

    def test_row_count_matches_data(self, make_report):
        report = make_report(progress_records(120))
        assert report.summary.total_records == len(report.data) == 120

    def test_idempotent(self, make_report, sample_records):
        first = make_report(sample_records)
        second = make_report(sample_records)
        assert [dict(r) for r in first.data] == [dict(r) for r in second.data]
        assert dict(first.summary.aggregations) == dict(second.summary.aggregations)

    def test_aggregations(self, make_report, sample_records):
        report = make_report(sample_records)
        assert dict(report.summary.aggregations) == {"avgProgress": 73, "completed": 1}

    def test_zero_rows_is_a_real_report(self, make_report):
        report = make_report([])
        assert report.data == ()
        assert report.summary.total_records == 0
        assert dict(report.summary.aggregations) == {"avgProgress": 0, "completed": 0}

    def test_template_defaults_merged(self, make_assembler):
        template = get_registry().get("rpt_pending_assignments")
        source = StubDataSource([])
        make_assembler(source).generate(template, ReportFilter(departments=("IT",)), "rh")

        merged = source.calls[0]
        assert merged.departments == ("IT",)
        assert merged.status == (ProgressStatus.NOT_STARTED, ProgressStatus.IN_PROGRESS, ProgressStatus.OVERDUE)

    def test_explicit_filter_overrides_default(self, make_assembler):
        template = get_registry().get("rpt_pending_assignments")
        source = StubDataSource([])
        make_assembler(source).generate(template, ReportFilter(status=("overdue",)), "rh")
        assert source.calls[0].status == (ProgressStatus.OVERDUE,)

    def test_default_date_preset_resolved_with_clock(self, make_assembler):
        template = get_registry().get("rpt_completion_history")
        source = StubDataSource([])
        report = make_assembler(source).generate(template, None, "rh")

        date_range = source.calls[0].date_range
        assert date_range.preset is DateRangePreset.THIS_YEAR
        assert date_range.start.year == 2024 and date_range.start.month == 1
        assert date_range.end == FIXED_NOW
        assert report.filters.date_range == date_range

    def test_data_source_error_propagates(self, make_assembler, progress_template):
        source = StubDataSource(error=DataSourceError("db down"))
        with pytest.raises(DataSourceError, match="db down"):
            make_assembler(source).generate(progress_template, None, "Ana")

    def test_other_failures_wrapped(self, make_assembler, progress_template):
        source = StubDataSource(error=ConnectionError("timeout"))
        with pytest.raises(DataSourceError) as exc_info:
            make_assembler(source).generate(progress_template, None, "Ana")
        assert isinstance(exc_info.value.__cause__, ConnectionError)

    def test_non_mapping_record_fails_whole_report(self, make_assembler, progress_template):
        class MixedSource:
            def fetch_records(self, report_filter):
                return [{"name": "Ana", "progress": 100}, None]

        with pytest.raises(DataSourceError):
            make_assembler(MixedSource()).generate(progress_template, None, "Ana")

    @pytest.mark.parametrize("progress", ["nan", "inf", float("nan")])
    def test_non_finite_progress_is_data_source_error(self, make_assembler, progress_template, progress):
        source = StubDataSource([{"name": "Ana", "progress": 100}, {"name": "Eva", "progress": progress}])
        with pytest.raises(DataSourceError, match="progress"):
            make_assembler(source).generate(progress_template, None, "Ana")

    def test_contradictory_merged_filter_rejected_before_fetch(self, make_assembler):
        template = ReportTemplate(
            id="t",
            name="T",
            type="custom",
            default_filters=ReportFilter(max_progress=20),
            fields=(ReportField("a", "A"),),
        )
        source = StubDataSource([])
        with pytest.raises(InvalidFilterError):
            make_assembler(source).generate(template, ReportFilter(min_progress=50), "Ana")
        assert source.calls == []

    def test_custom_range_localized_to_report_timezone(self, make_assembler, progress_template):
        source = StubDataSource([])
        explicit = ReportFilter(date_range=DateRange("custom", datetime(2024, 1, 1), datetime(2024, 1, 31)))
        make_assembler(source).generate(progress_template, explicit, "Ana")
        assert source.calls[0].date_range.start.tzinfo is not None


class TestSummary:
    def test_charts_computed(self):
        template = ReportTemplate(
            id="t",
            name="T",
            type="custom",
            fields=(ReportField("status", "Estado", "status"), ReportField("n", "N", "number")),
            charts=(ChartSpec("pie", "Estados", group_by="status", categories=["Completado", "Atrasado"]),),
        )
        summary = summarize(template, [{"status": "Completado", "n": 1}, {"status": "Completado", "n": 2}])

        chart = summary.charts[0]
        assert chart.type is ChartType.PIE
        assert [dict(p) for p in chart.data] == [
            {"name": "Completado", "value": 2},
            {"name": "Atrasado", "value": 0},
        ]

    def test_to_dict_wire_names(self, make_report, sample_records):
        data = make_report(sample_records).to_dict()
        assert set(data) == {"id", "templateId", "filters", "generatedAt", "generatedBy", "data", "summary"}
        assert data["templateId"] == "rpt_test_progress"
        assert data["summary"]["totalRecords"] == 3
        assert data["data"][1] == {"name": "Luis", "progress": None}


class TestDefaults:
    def test_default_clock_is_timezone_aware(self, progress_template):
        report = ReportAssembler(StubDataSource([])).generate(progress_template, None, "Ana")
        assert report.generated_at.tzinfo is not None
        assert report.id.startswith("report_")
