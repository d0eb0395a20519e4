"""Tests for report exporters."""

import csv
import json

import pandas as pd
import pytest

from hostel_rules.batch import BatchValidationCoordinator
from hostel_rules.exporters import (
    CSVExporter,
    ExcelExporter,
    JSONExporter,
    get_exporter,
    report_rows,
)


@pytest.fixture
def coordinator(validator, valid_row):
    rows = [valid_row, valid_row.with_field("RollNumber", "R2").with_field("Email", "bad")]
    return BatchValidationCoordinator(rows, validator)


class TestReportRows:
    """Tests for report_rows function."""

    def test_flattens_rows(self, coordinator):
        records = report_rows(coordinator)

        assert [r["status"] for r in records] == ["valid", "invalid"]
        assert records[0]["errors"] == ""
        assert records[1]["errors"].startswith("Email:")
        assert records[1]["RollNumber"] == "R2"


class TestJSONExporter:
    """Tests for JSONExporter."""

    def test_export(self, coordinator, tmp_path):
        path = tmp_path / "out" / "report.json"

        JSONExporter().export(coordinator, path)

        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["summary"]["valid_rows"] == 1
        assert data["summary"]["errors_by_field"] == {"Email": 1}
        assert data["rows"][1]["errors"].keys() == {"Email"}


class TestCSVExporter:
    """Tests for CSVExporter."""

    def test_export(self, coordinator, tmp_path):
        CSVExporter().export(coordinator, tmp_path / "report")

        with open(tmp_path / "report" / "rows.csv", encoding="utf-8") as f:
            rows = list(csv.DictReader(f))
        with open(tmp_path / "report" / "summary.csv", encoding="utf-8") as f:
            summary = {r["metric"]: r["value"] for r in csv.DictReader(f)}

        assert len(rows) == 2
        assert summary["invalid_rows"] == "1"
        assert summary["errors.Email"] == "1"


class TestExcelExporter:
    """Tests for ExcelExporter."""

    def test_export(self, coordinator, tmp_path):
        path = tmp_path / "report.xlsx"

        ExcelExporter().export(coordinator, path)

        sheets = pd.read_excel(path, sheet_name=None)
        assert set(sheets) == {"Rows", "Invalid", "Summary"}
        assert len(sheets["Invalid"]) == 1


class TestGetExporter:
    """Tests for get_exporter function."""

    def test_known_formats(self):
        assert isinstance(get_exporter("json"), JSONExporter)
        assert isinstance(get_exporter("CSV"), CSVExporter)
        assert isinstance(get_exporter("xlsx"), ExcelExporter)

    def test_unknown_format(self):
        with pytest.raises(ValueError):
            get_exporter("xml")
