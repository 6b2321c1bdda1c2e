import logging

import pytest

from dispatchor import Dispatcher, configure_logging
from dispatchor.logging_config import resolve_level


@pytest.fixture(autouse=True)
def _restore_package_level():
    logger = logging.getLogger("dispatchor")
    level = logger.level
    yield
    logger.setLevel(level)


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, logging.INFO),
        ("", logging.INFO),
        ("debug", logging.DEBUG),
        ("WARNING", logging.WARNING),
        ("15", 15),
        (logging.ERROR, logging.ERROR),
        ("not-a-level", logging.INFO),
    ],
)
def test_resolve_level(value, expected):
    assert resolve_level(value) == expected


def test_configure_logging_reads_env(monkeypatch):
    monkeypatch.setenv("DISPATCHOR_LOG_LEVEL", "debug")
    assert configure_logging() == logging.DEBUG
    assert logging.getLogger("dispatchor").level == logging.DEBUG


def test_explicit_level_beats_env(monkeypatch):
    monkeypatch.setenv("DISPATCHOR_LOG_LEVEL", "debug")
    assert configure_logging(level="error") == logging.ERROR


def test_dispatcher_debug_logging(caplog):
    dispatcher = Dispatcher()
    with caplog.at_level(logging.DEBUG, logger="dispatchor"):
        dispatcher.on("e", lambda: None)
        dispatcher.emit("e")
        dispatcher.emit("missing")
        dispatcher.remove_all_listeners()

    messages = [r.getMessage() for r in caplog.records]
    assert any("Added on listener" in m for m in messages)
    assert any("Emitting 'e' to 1 listener(s)" in m for m in messages)
    assert any("Emitting 'missing' with no listeners" in m for m in messages)
