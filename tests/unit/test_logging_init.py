from __future__ import annotations

import logging
from io import StringIO

from sheetfeed.logging.init import (
    LOGGER_NAME,
    SUMMARY_LEVEL,
    LabeledFormatter,
    enable_debug,
    get_logger,
    log_summary,
    setup_logging,
)


def test_setup_logging_creates_logger_with_labeled_formatter(clean_logging):
    logger = setup_logging()

    assert logger.name == LOGGER_NAME
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0].formatter, LabeledFormatter)
    assert logger.propagate is False


def test_setup_logging_is_idempotent(clean_logging):
    first = setup_logging()
    second = setup_logging()
    assert first is second
    assert len(second.handlers) == 1


def test_get_logger_configures_on_first_use(clean_logging):
    logger = get_logger()
    assert logger is setup_logging()


def test_logging_labeled_prefixes():
    captured_output = StringIO()
    logging.addLevelName(SUMMARY_LEVEL, "SUMMARY")
    logger = logging.getLogger("test_sheetfeed_labels")
    logger.setLevel(logging.INFO)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    handler = logging.StreamHandler(captured_output)
    handler.setFormatter(LabeledFormatter())
    logger.addHandler(handler)
    logger.propagate = False

    logger.info("Test info message")
    logger.warning("Test warning message")
    logger.error("Test error message")
    logger.log(SUMMARY_LEVEL, "Test summary message")

    lines = captured_output.getvalue().strip().split("\n")
    assert lines == [
        "INFO Test info message",
        "WARN Test warning message",
        "ERROR Test error message",
        "SUMMARY Test summary message",
    ]


def test_log_summary_writes_to_stdout(clean_logging, capsys):
    log_summary("sheets=1/1 success=1")
    assert capsys.readouterr().out == "SUMMARY sheets=1/1 success=1\n"


def test_debug_hidden_until_enabled(clean_logging, capsys):
    logger = setup_logging()
    logger.debug("hidden")
    enable_debug()
    logger.debug("shown")
    out = capsys.readouterr().out
    assert "hidden" not in out
    assert "DEBUG shown" in out


def test_child_loggers_share_handler(clean_logging, capsys):
    setup_logging()
    logging.getLogger("sheetfeed.services.orchestrator").info("from child")
    assert capsys.readouterr().out == "INFO from child\n"
