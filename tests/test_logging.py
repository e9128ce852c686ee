"""Tests for logging utilities."""

import logging

import pytest

from gtfinal.utils.logging import TRACE, get_logger, log_call, setup_logging, timed


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_trace_level_is_registered():
    assert logging.getLevelName(TRACE) == "TRACE"
    assert TRACE < logging.DEBUG


@pytest.mark.parametrize(
    "kwargs, level",
    [({}, logging.INFO), ({"verbose": True}, logging.DEBUG), ({"trace": True}, TRACE)],
)
def test_setup_logging_levels(kwargs, level):
    setup_logging(**kwargs)
    assert logging.getLogger().level == level


def test_setup_logging_writes_file(tmp_path):
    log_file = tmp_path / "gtfinal.log"
    setup_logging(log_file=str(log_file))

    get_logger("gtfinal.test").info("finalized %d records", 3)
    for handler in logging.getLogger().handlers:
        handler.flush()

    assert "finalized 3 records" in log_file.read_text()


def test_timed(caplog):
    logger = get_logger("gtfinal.test")
    with caplog.at_level(logging.DEBUG):
        with timed("work", logger):
            pass
    assert "Starting: work" in caplog.text
    assert "Completed: work" in caplog.text


def test_log_call_reraises(caplog):
    @log_call(get_logger("gtfinal.test"))
    def explode():
        raise ValueError("boom")

    with caplog.at_level(logging.ERROR):
        with pytest.raises(ValueError, match="boom"):
            explode()
    assert "explode failed: boom" in caplog.text


def test_log_call_returns_result():
    @log_call()
    def add(a, b):
        return a + b

    assert add(2, 3) == 5
    assert add.__name__ == "add"
