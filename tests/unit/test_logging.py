import json
import logging

import pytest
import structlog

from keyward import open_session
from keyward.config import LoggingConfig
from keyward.context import SessionContext
from keyward.logging import _component_processor, _resolve_level, _rename_event_to_msg, configure_logging


@pytest.fixture
def restore_logging():
    yield
    structlog.reset_defaults()
    logging.basicConfig(handlers=[logging.NullHandler()], level=logging.WARNING, force=True)


def test_processors_normalise_event_dict() -> None:
    logger = logging.getLogger("keyward.test")
    event = _component_processor(logger, "info", {"event": "hello"})
    assert event["component"] == "keyward.test"
    assert _rename_event_to_msg(logger, "info", event) == {"component": "keyward.test", "msg": "hello"}
    assert _component_processor(logger, "info", {"component": "x"})["component"] == "x"


def test_level_mapping_defaults_to_info() -> None:
    assert _resolve_level("debug") == logging.DEBUG
    assert _resolve_level(" Warning ") == logging.WARNING
    assert _resolve_level("verbose") == logging.INFO


def test_session_lines_are_json_records(capsys, restore_logging) -> None:
    configure_logging(LoggingConfig(level="info"))
    context = SessionContext(session_id="abc123")
    context.log("start: import keys", task="import keys")

    line = capsys.readouterr().out.strip().splitlines()[-1]
    record = json.loads(line)
    assert record["msg"] == "start: import keys"
    assert record["component"] == "keyward.session"
    assert record["session"] == "abc123"
    assert record["task"] == "import keys"
    assert record["level"] == "info"
    assert "ts" in record


def test_level_filters_session_lines(capsys, restore_logging) -> None:
    configure_logging(LoggingConfig(level="warning"))
    context = SessionContext()
    context.log("quiet")
    assert capsys.readouterr().out == ""
    assert context.logs == ("quiet",)


@pytest.mark.asyncio
async def test_open_session_applies_logging_config(config, capsys, restore_logging) -> None:
    config.logging = LoggingConfig(level="warning", json=False)
    async with open_session(config, configure_logs=True) as session:
        assert session.logs == ('using "session" storage',)
    assert capsys.readouterr().out == ""
    assert logging.getLogger().level == logging.WARNING
