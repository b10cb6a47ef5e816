"""
Unit tests for CSV/JSON export of query results.
"""

import json
from datetime import datetime, timezone

import pytest

from gcue.domain.output import OutputFormat
from gcue.domain.results import NonEmptyResults
from gcue.service.output import encode_csv, results_file_name, write_results
from gcue.shared.exceptions import ExportError

REFERENCE_TIME = datetime(2025, 1, 16, 10, 30, 45, tzinfo=timezone.utc)

LANGUAGES = NonEmptyResults([
    {"language": "Rust", "creator": "Graydon Hoare", "year": 2010},
    {"language": "Python", "creator": "Guido van Rossum", "year": 1991},
])

# Second row lacks "year", third row has a null "creator"
SPARSE = NonEmptyResults([
    {"language": "Rust", "creator": "Graydon Hoare", "year": 2010},
    {"language": "Python", "creator": "Guido van Rossum"},
    {"language": "Go", "creator": None, "year": 2009},
])


class TestEncodeCsv:

    def test_header_and_rows(self):
        assert encode_csv(LANGUAGES) == (
            "creator,language,year\n"
            "Graydon Hoare,Rust,2010\n"
            "Guido van Rossum,Python,1991\n"
        )

    def test_missing_keys_and_nulls_are_empty_fields(self):
        assert encode_csv(SPARSE) == (
            "creator,language,year\n"
            "Graydon Hoare,Rust,2010\n"
            "Guido van Rossum,Python,\n"
            ",Go,2009\n"
        )

    def test_keys_missing_from_first_row_are_dropped(self):
        results = NonEmptyResults([{"a": 1}, {"a": 2, "b": 3}])

        assert encode_csv(results) == "a\n1\n2\n"

    def test_nested_values_are_compact_json(self):
        results = NonEmptyResults([{"tags": ["x", "y"], "meta": {"k": True}}])

        assert encode_csv(results) == 'meta,tags\n"{""k"":true}","[""x"",""y""]"\n'

    def test_first_row_not_an_object_fails(self):
        with pytest.raises(ExportError, match="expected results to be an array of objects"):
            encode_csv(NonEmptyResults([1, 2]))

    def test_later_row_not_an_object_fails(self):
        with pytest.raises(ExportError, match="expected results to be an array of objects"):
            encode_csv(NonEmptyResults([{"a": 1}, "oops"]))


class TestWriteResults:

    def test_file_name_uses_reference_time(self):
        assert results_file_name(REFERENCE_TIME, OutputFormat.JSON) == "Jan-16-10-30-45.json"
        assert results_file_name(REFERENCE_TIME, OutputFormat.CSV) == "Jan-16-10-30-45.csv"

    def test_writes_csv_creating_directory(self, tmp_path):
        directory = tmp_path / "nested" / "results"

        path = write_results(SPARSE, directory, OutputFormat.CSV, REFERENCE_TIME)

        assert path == directory / "Jan-16-10-30-45.csv"
        assert path.read_text(encoding="utf-8").splitlines()[2] == "Guido van Rossum,Python,"

    def test_writes_pretty_json(self, tmp_path):
        path = write_results(LANGUAGES, tmp_path, OutputFormat.JSON, REFERENCE_TIME)

        text = path.read_text(encoding="utf-8")
        assert json.loads(text) == list(LANGUAGES)
        assert text.startswith("[\n  {\n")

    def test_rejected_csv_leaves_no_file(self, tmp_path):
        with pytest.raises(ExportError):
            write_results(NonEmptyResults(["a"]), tmp_path, OutputFormat.CSV, REFERENCE_TIME)

        assert list(tmp_path.iterdir()) == []

    def test_unwritable_directory_raises_export_error(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("not a directory")

        with pytest.raises(ExportError, match="failed to create results directory"):
            write_results(LANGUAGES, blocker / "sub", OutputFormat.JSON, REFERENCE_TIME)
