import io
import json

import structlog

from shared.logging import (
    bind_context,
    clear_context,
    get_correlation_id,
    new_correlation_id,
    set_correlation_id,
    setup_logging,
    unbind_context,
)


def test_bind_context_only_unbinds_new_keys():
    clear_context()
    set_correlation_id("outer")

    bound = bind_context(correlation_id="inner", session_id="s-1")
    assert bound == ["session_id"]
    assert get_correlation_id() == "inner"

    unbind_context(bound)
    context = structlog.contextvars.get_contextvars()
    assert "session_id" not in context
    assert context["correlation_id"] == "inner"
    clear_context()


def test_new_correlation_id_is_unique():
    first = new_correlation_id()

    assert first.startswith("msg_")
    assert first != new_correlation_id()


def test_json_logs_carry_context():
    stream = io.StringIO()
    setup_logging(service_name="assistant", log_format="json", log_level="INFO", stream=stream)
    structlog.contextvars.bind_contextvars(correlation_id="msg_1")
    try:
        structlog.get_logger("test").info("command_received", text_length=4)
    finally:
        clear_context()
        structlog.reset_defaults()

    line = stream.getvalue().strip().splitlines()[-1]
    event = json.loads(line)
    assert event["event"] == "command_received"
    assert event["correlation_id"] == "msg_1"
    assert event["service"] == "assistant"
    assert event["text_length"] == 4
