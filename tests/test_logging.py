import json
import logging

from workout_ai.core.logging import JsonFormatter


def test_json_formatter_includes_extra_fields():
    record = logging.LogRecord("workout_ai.ai.remote", logging.INFO, __file__, 1, "ai_response", (), None)
    record.provider = "remote"
    record.duration_ms = 120

    payload = json.loads(JsonFormatter().format(record))

    assert payload == {
        "level": "INFO",
        "logger": "workout_ai.ai.remote",
        "message": "ai_response",
        "provider": "remote",
        "duration_ms": 120,
    }


def test_json_formatter_stringifies_unknown_values():
    record = logging.LogRecord("x", logging.WARNING, __file__, 1, "ai_retry", (), None)
    record.error_kind = object()

    payload = json.loads(JsonFormatter().format(record))

    assert payload["error_kind"].startswith("<object object")
