"""Load student rows from spreadsheet or CSV files."""

import logging
from pathlib import Path

import pandas as pd

from .exceptions import InputFileError
from .models import StudentRow

logger = logging.getLogger(__name__)

EXCEL_SUFFIXES = {".xlsx", ".xlsm", ".xls"}


def rows_from_dataframe(df: pd.DataFrame) -> list[StudentRow]:
    """Convert a DataFrame with a header row into StudentRows.

    Completely empty rows are skipped.
    """
    df = df.dropna(how="all")
    return [StudentRow.from_mapping(record) for record in df.to_dict(orient="records")]


def load_rows(file_path: str | Path, sheet_name: str | int = 0) -> list[StudentRow]:
    """Load rows from an Excel workbook or CSV file.

    All cells are read as text so that phone numbers and years keep their
    digits exactly as typed.

    Args:
        file_path: Path to .xlsx/.xls/.csv
        sheet_name: Sheet to read from a workbook (name or index)

    Returns:
        List of StudentRow in file order

    Raises:
        InputFileError: If the file is missing or unreadable
    """
    file_path = Path(file_path)
    if not file_path.exists():
        raise InputFileError(file_path, "file not found")

    suffix = file_path.suffix.lower()
    try:
        if suffix in EXCEL_SUFFIXES:
            df = pd.read_excel(file_path, sheet_name=sheet_name, dtype=str)
        elif suffix == ".csv":
            df = pd.read_csv(file_path, dtype=str, keep_default_na=True)
        else:
            raise InputFileError(file_path, f"unsupported file type '{suffix}'")
    except InputFileError:
        raise
    except Exception as e:
        raise InputFileError(file_path, str(e)) from e

    rows = rows_from_dataframe(df)
    logger.info(f"Loaded {len(rows)} rows from {file_path.name}")
    return rows
