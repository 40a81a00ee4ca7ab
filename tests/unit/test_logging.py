"""
Unit tests for structured logging helpers.
"""

import json
import logging

from contract_analyzer.utils.logging import (
    StructuredFormatter,
    log_api_request,
    log_error,
    log_timing,
)


def _record(**extra):
    record = logging.LogRecord("contract_analyzer.test", logging.INFO, __file__, 10, "processed %s", ("msa.pdf",), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_emits_json_with_extra():
    line = StructuredFormatter().format(_record(**log_timing("process_contract", 12.5, source="msa.pdf")))
    data = json.loads(line)

    assert data["message"] == "processed msa.pdf"
    assert data["level"] == "INFO"
    assert data["extra"] == {
        "event": "timing",
        "operation": "process_contract",
        "duration_ms": 12.5,
        "source": "msa.pdf",
    }


def test_formatter_without_extra():
    data = json.loads(StructuredFormatter().format(_record()))
    assert "extra" not in data


def test_log_error_payload():
    payload = log_error(ValueError("bad pdf"), source="scan.pdf")
    assert payload == {
        "event": "error",
        "error_type": "ValueError",
        "error_message": "bad pdf",
        "source": "scan.pdf",
    }


def test_log_api_request_omits_missing_response_fields():
    assert "status_code" not in log_api_request("POST", "https://api.openai.com/v1/chat/completions")
    assert log_api_request("GET", "https://x", 503, 40.0)["status_code"] == 503
