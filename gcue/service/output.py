"""
Result export.

Writes non-empty query results to ``<results_directory>/<timestamp>.<ext>``
as CSV or pretty-printed JSON. The whole payload is encoded before the
file is opened, so a rejected result set never leaves a partial file.
"""

import csv
import io
import json
import logging
from datetime import datetime
from pathlib import Path

from gcue.domain.document import CanonicalValue
from gcue.domain.output import OutputFormat
from gcue.domain.results import NonEmptyResults
from gcue.shared.exceptions import ExportError

logger = logging.getLogger("gcue.service.output")

FILE_NAME_FORMAT = "%b-%d-%H-%M-%S"
NOT_OBJECTS = "expected results to be an array of objects"


def column_names(first_row: dict) -> list[str]:
    """Columns for a result set, in canonical (lexicographic) key order."""
    return sorted(first_row)


def compact_json(value: CanonicalValue) -> str:
    return json.dumps(value, separators=(",", ":"), sort_keys=True, ensure_ascii=False)


def _csv_field(value: CanonicalValue) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return compact_json(value)


def encode_csv(results: NonEmptyResults) -> str:
    """Encode results as CSV with a header taken from the first row.

    Missing keys and nulls become empty fields. Keys that the first row
    doesn't have are not exported.

    Raises:
        ExportError: If any row is not an object.
    """
    first = results.first()
    if not isinstance(first, dict):
        raise ExportError(NOT_OBJECTS)
    headers = column_names(first)

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(headers)
    for row in results:
        if not isinstance(row, dict):
            raise ExportError(NOT_OBJECTS)
        writer.writerow([_csv_field(row.get(header)) for header in headers])

    return buffer.getvalue()


def encode_json(results: NonEmptyResults) -> str:
    try:
        return json.dumps(list(results), indent=2, sort_keys=True, ensure_ascii=False)
    except (TypeError, ValueError) as exc:
        raise ExportError("couldn't serialize results to JSON") from exc


def results_file_name(reference_time: datetime, fmt: OutputFormat) -> str:
    return f"{reference_time.strftime(FILE_NAME_FORMAT)}.{fmt.extension}"


def write_results(
    results: NonEmptyResults,
    results_directory: Path | str,
    fmt: OutputFormat,
    reference_time: datetime,
) -> Path:
    """Write results to a timestamped file and return its path.

    Raises:
        ExportError: If the results can't be encoded in ``fmt`` or the
            file can't be written.
    """
    if fmt is OutputFormat.CSV:
        contents = encode_csv(results)
    else:
        contents = encode_json(results)

    directory = Path(results_directory)
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ExportError(f"failed to create results directory: {directory}") from exc

    output_file_path = directory / results_file_name(reference_time, fmt)
    try:
        with open(output_file_path, "w", encoding="utf-8", newline="") as f:
            f.write(contents)
    except OSError as exc:
        raise ExportError(f"couldn't write output file: {output_file_path}") from exc

    logger.info("Wrote %d rows to %s", len(results), output_file_path)
    return output_file_path
