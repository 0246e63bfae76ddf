# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

import re
import json
import logging

import pytest

from common.logging import setup as log_setup, operations, splunk

from common import config as conf


@pytest.fixture()
def formatted_caplog(caplog):
    formatter = splunk.SplunkFormatter(
        defaults={
            "app_name": "test_app",
            "correlation_id": "test",
        }
    )
    caplog.handler.setFormatter(formatter)
    return caplog


def _test_formatted_log(data_str: str, expected_message: str | bool, expected_level: str) -> None:
    data: dict[str, object] = json.loads(data_str)
    keys = data.keys()
    assert "message" in keys
    if expected_message is not False:
        assert data["message"] == expected_message
    assert "level" in keys
    assert data["level"] == expected_level
    assert "hash" in keys
    assert data["hash"] == "test"  # set in formatted_caplog
    assert "@timestamp" in data.keys()
    # Expected format: 2024-02-07T14:38:19.565+01:00
    assert re.match(
        r"[0-9]{4}-[0-9]{2}-[0-9]{2}T[0-9]{2}:[0-9]{2}:[0-9]{2}(\.[0-9]{1,6})?[+-][0-9]{2}:[0-9]{2}",
        data["@timestamp"],
    )
    assert "app" in keys
    assert data["app"] == "test_app"


@pytest.fixture()
def restore_logging():
    """configure_logging rewires all existing loggers, undo it for the following tests"""
    root = logging.getLogger()
    root_state = (root.handlers[:], root.level)
    logger_states = {
        logger: (logger.handlers[:], logger.propagate) for logger in logging.root.manager.loggerDict.values() if isinstance(logger, logging.Logger)
    }
    yield
    root.handlers = root_state[0]
    root.setLevel(root_state[1])
    for logger, (handlers, propagate) in logger_states.items():
        logger.handlers = handlers
        logger.propagate = propagate


def test_configure_logging_without_splunk(restore_logging):
    app_config = conf.Config()
    app_config.app_name = "Logging Test"
    app_config.enable_splunk_log = False
    app_config.log_level = "INFO"

    existing_logger = logging.getLogger(f"{__name__}_existing")
    log_setup.configure_logging(app_config)

    assert not existing_logger.propagate
    assert len(existing_logger.handlers) == 1
    assert not isinstance(existing_logger.handlers[0].formatter, splunk.SplunkFormatter)
    assert log_setup.get_log_id() == "", "Outside of a request there is no correlation id"


def test_formatter(formatted_caplog):
    logger = logging.getLogger(f"{__name__}_test_formatter")

    with formatted_caplog.at_level("DEBUG"):
        for level, log in [("ERROR", logger.error), ("WARNING", logger.warning), ("INFO", logger.info), ("DEBUG", logger.debug)]:
            formatted_caplog.clear()
            message = f"{level} message for testing"
            log(message)
            assert len(formatted_caplog.records) == 1
            _test_formatted_log(formatted_caplog.text, message, level)


def test_operations_formatter(formatted_caplog):
    with formatted_caplog.at_level("INFO"):
        formatted_caplog.clear()
        logger = logging.getLogger(__name__ + ":test_operations_formatter")
        logger.info(
            operations.OperationsLogEntry.succeeded(
                "Operations message for testing.",
                operations.OperationsLogEntry.Operation.only_test,
                operations.OperationsLogEntry.Step.only_test,
                did="did:elsi:happypets",
            )
        )
        assert len(formatted_caplog.records) == 1
        _test_formatted_log(
            formatted_caplog.text,
            "Operations message for testing. status=SUCCESS operation=ONLY_TEST step=ONLY_TEST did=did:elsi:happypets",
            "INFO",
        )
        data = json.loads(formatted_caplog.text)
        assert data["operation"] == "ONLY_TEST"
        assert data["step"] == "ONLY_TEST"
        assert data["status"] == "SUCCESS"
        assert data["did"] == "did:elsi:happypets"


def test_exception_formatter(formatted_caplog):
    logger = logging.getLogger(f"{__name__}_test_exception_formatter")

    with formatted_caplog.at_level("DEBUG"):
        formatted_caplog.clear()

        try:
            raise Exception("Test")
        except Exception:
            logger.exception("Test message")

        assert len(formatted_caplog.records) == 1
        _test_formatted_log(formatted_caplog.text, False, "ERROR")
        assert "Traceback" in formatted_caplog.text
