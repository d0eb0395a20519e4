"""Export batch validation reports."""

import csv
import json
from abc import ABC, abstractmethod
from pathlib import Path

import pandas as pd

from .batch import BatchValidationCoordinator
from .constants import ROW_FIELDS


def report_rows(coordinator: BatchValidationCoordinator) -> list[dict]:
    """Flatten rows and errors into one record per row."""
    records = []
    for index, (row, errors) in enumerate(zip(coordinator.rows, coordinator.errors)):
        record = {"row": index + 1, "status": "invalid" if errors else "valid"}
        record.update(row.to_dict())
        record["errors"] = "; ".join(f"{field}: {errors[field]}" for field in ROW_FIELDS if field in errors)
        records.append(record)
    return records


class BaseExporter(ABC):
    """Base class for exporters."""

    @abstractmethod
    def export(self, coordinator: BatchValidationCoordinator, output_path: str | Path) -> None:
        """Export a validation report.

        Args:
            coordinator: Validated batch
            output_path: Path to output file or directory
        """
        pass


class JSONExporter(BaseExporter):
    """Export to JSON format."""

    def __init__(self, indent: int = 2, ensure_ascii: bool = False):
        """Initialize exporter.

        Args:
            indent: JSON indentation level
            ensure_ascii: If False, allows non-ASCII characters
        """
        self.indent = indent
        self.ensure_ascii = ensure_ascii

    def export(self, coordinator: BatchValidationCoordinator, output_path: str | Path) -> None:
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        payload = {
            "summary": coordinator.summary().to_dict(),
            "rows": [
                {"row": index + 1, "data": row.to_dict(), "errors": errors}
                for index, (row, errors) in enumerate(zip(coordinator.rows, coordinator.errors))
            ],
        }
        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=self.indent, ensure_ascii=self.ensure_ascii)


class CSVExporter(BaseExporter):
    """Export to CSV format (multiple files).

    Creates two files in the output directory:
    - rows.csv: every row with its status and errors
    - summary.csv: totals and per-field error counts
    """

    def export(self, coordinator: BatchValidationCoordinator, output_path: str | Path) -> None:
        output_dir = Path(output_path)
        output_dir.mkdir(parents=True, exist_ok=True)

        self._write_csv(output_dir / "rows.csv", report_rows(coordinator))

        summary = coordinator.summary()
        summary_rows = [
            {"metric": "total_rows", "value": summary.total_rows},
            {"metric": "valid_rows", "value": summary.valid_rows},
            {"metric": "invalid_rows", "value": summary.invalid_rows},
        ]
        for field, count in summary.errors_by_field.items():
            summary_rows.append({"metric": f"errors.{field}", "value": count})
        self._write_csv(output_dir / "summary.csv", summary_rows)

    def _write_csv(self, output_path: Path, rows: list[dict]) -> None:
        """Write rows to CSV file."""
        if not rows:
            output_path.write_text("", encoding="utf-8")
            return

        with open(output_path, "w", encoding="utf-8", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=list(rows[0].keys()))
            writer.writeheader()
            writer.writerows(rows)


class ExcelExporter(BaseExporter):
    """Export to Excel with "Rows", "Invalid" and "Summary" sheets."""

    def export(self, coordinator: BatchValidationCoordinator, output_path: str | Path) -> None:
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        rows_df = pd.DataFrame(report_rows(coordinator))
        summary = coordinator.summary()
        summary_df = pd.DataFrame(
            [
                {"Metric": "Total rows", "Value": summary.total_rows},
                {"Metric": "Valid rows", "Value": summary.valid_rows},
                {"Metric": "Invalid rows", "Value": summary.invalid_rows},
            ]
            + [
                {"Metric": f"Errors: {field}", "Value": count}
                for field, count in summary.errors_by_field.items()
            ]
        )

        with pd.ExcelWriter(output_path, engine="openpyxl") as writer:
            rows_df.to_excel(writer, sheet_name="Rows", index=False)
            if not rows_df.empty:
                invalid_df = rows_df[rows_df["status"] == "invalid"]
                invalid_df.to_excel(writer, sheet_name="Invalid", index=False)
            summary_df.to_excel(writer, sheet_name="Summary", index=False)


def get_exporter(format: str) -> BaseExporter:
    """Get exporter by format name.

    Args:
        format: Format name ('json', 'csv', 'excel')

    Returns:
        Exporter instance

    Raises:
        ValueError: If format is not supported
    """
    exporters = {
        "json": JSONExporter,
        "csv": CSVExporter,
        "excel": ExcelExporter,
        "xlsx": ExcelExporter,
    }

    format_lower = format.lower()
    if format_lower not in exporters:
        raise ValueError(f"Unsupported format: {format}. Supported: {', '.join(exporters.keys())}")

    return exporters[format_lower]()
