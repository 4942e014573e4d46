from __future__ import annotations

import json
import logging
import uuid
from types import ModuleType

import pytest

from flashdeck.core import logging as logging_module


@pytest.fixture()
def fresh_logging_module(monkeypatch: pytest.MonkeyPatch) -> ModuleType:
    root_logger = logging.getLogger()
    original_handlers = root_logger.handlers[:]
    original_level = root_logger.level

    monkeypatch.setattr(logging_module, "_LOGGING_CONFIGURED", False)

    yield logging_module

    root_logger.handlers = original_handlers
    root_logger.setLevel(original_level)
    logging_module._LOGGING_CONFIGURED = False


def test_configure_logging_installs_json_formatter(fresh_logging_module: ModuleType) -> None:
    fresh_logging_module.configure_logging("debug")

    root_logger = logging.getLogger()
    assert root_logger.level == logging.DEBUG
    assert any(
        isinstance(handler.formatter, logging_module.JsonLogFormatter)
        for handler in root_logger.handlers
    )


def test_configure_logging_is_idempotent(fresh_logging_module: ModuleType) -> None:
    fresh_logging_module.configure_logging("info")
    root_logger = logging.getLogger()
    first_handlers = list(root_logger.handlers)

    fresh_logging_module.configure_logging("warning")

    assert list(root_logger.handlers) == first_handlers
    assert root_logger.level == logging.INFO


def test_configure_logging_falls_back_to_info(fresh_logging_module: ModuleType) -> None:
    fresh_logging_module.configure_logging("chatty")

    assert logging.getLogger().level == logging.INFO


def test_json_formatter_serializes_extra_fields() -> None:
    deck_id = uuid.uuid4()
    logger = logging.getLogger("test-json")
    record = logger.makeRecord(
        name="test-json",
        level=logging.INFO,
        fn="test_logging.py",
        lno=42,
        msg="Deck created",
        args=(),
        exc_info=None,
        extra={"deck_id": deck_id, "flashcard_count": 3, "owner_id": None},
    )

    payload = json.loads(logging_module.JsonLogFormatter().format(record))

    assert payload["message"] == "Deck created"
    assert payload["level"] == "INFO"
    assert payload["logger"] == "test-json"
    assert payload["deck_id"] == str(deck_id)
    assert payload["flashcard_count"] == 3
    assert "owner_id" not in payload
    assert "lineno" not in payload
