from __future__ import annotations

import json
import pathlib

import jsonschema
import pytest

from sheetfeed.logging.error_log import SHEET_LEVEL, ErrorRecord

"""Error log JSON schema contract test."""

SCHEMA_PATH = pathlib.Path(__file__).parent / "error_log_schema.json"


@pytest.fixture(scope="module")
def schema():
    return json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))


def test_error_log_schema_valid_example(schema):
    record = {
        "timestamp": "2025-09-26T10:12:33Z",
        "sheet": "Contacts",
        "worksheet": 1,
        "cell": "-",
        "error_type": "FETCH_ERROR",
        "message": "status=404 not found",
    }
    jsonschema.validate(record, schema)


def test_error_log_schema_rejects_extra_key(schema):
    record = {
        "timestamp": "2025-09-26T10:12:33Z",
        "sheet": "Contacts",
        "worksheet": 1,
        "cell": "B7",
        "error_type": "INVALID_CELL_ADDRESS",
        "message": "bad",
        "extra": "not allowed",
    }
    with pytest.raises(jsonschema.exceptions.ValidationError):
        jsonschema.validate(record, schema)


@pytest.mark.parametrize(
    "cell,error_type",
    [("R1C1", "INVALID_CELL_ADDRESS"), (SHEET_LEVEL, "PARSE_ERROR"), (SHEET_LEVEL, "SINK_ERROR")],
)
def test_emitted_records_match_schema(schema, cell, error_type):
    line = ErrorRecord.create("Contacts", 2, cell, error_type, "diagnostic").to_json_line()
    jsonschema.validate(json.loads(line), schema)
