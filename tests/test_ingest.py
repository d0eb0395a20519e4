"""Tests for loading rows from files."""

import pandas as pd
import pytest

from hostel_rules.exceptions import InputFileError
from hostel_rules.ingest import load_rows, rows_from_dataframe


@pytest.fixture
def sheet_df(valid_row_data, female_row_data):
    return pd.DataFrame([valid_row_data, female_row_data])


class TestRowsFromDataframe:
    """Tests for rows_from_dataframe function."""

    def test_converts_records(self, sheet_df):
        rows = rows_from_dataframe(sheet_df)

        assert len(rows) == 2
        assert rows[0].roll_number == "R1"
        assert rows[1].gender == "F"
        # Missing cells in the second record become None
        assert rows[1].email is None

    def test_skips_blank_rows(self, sheet_df):
        blank = pd.DataFrame([{column: None for column in sheet_df.columns}])
        df = pd.concat([sheet_df, blank], ignore_index=True)

        assert len(rows_from_dataframe(df)) == 2


class TestLoadRows:
    """Tests for load_rows function."""

    def test_csv_keeps_phone_digits(self, tmp_path, sheet_df):
        path = tmp_path / "students.csv"
        sheet_df.to_csv(path, index=False)

        rows = load_rows(path)

        assert rows[0].parent_phone == "9876543210"
        assert rows[0].year == "2"

    def test_excel(self, tmp_path, sheet_df):
        path = tmp_path / "students.xlsx"
        sheet_df.to_excel(path, index=False)

        rows = load_rows(path)

        assert [r.roll_number for r in rows] == ["R1", "R2"]
        assert rows[0].batch == "2022-2026"

    def test_missing_file(self, tmp_path):
        with pytest.raises(InputFileError):
            load_rows(tmp_path / "missing.csv")

    def test_unsupported_type(self, tmp_path):
        path = tmp_path / "students.txt"
        path.write_text("Name\nA\n")

        with pytest.raises(InputFileError):
            load_rows(path)
