"""
Structured logger tests: JSON lines, context dimensions, level control.
"""

import json
import logging

import pytest

from util_logger import (
    ComponentType,
    JSONFormatter,
    LogContext,
    LoggerFactory,
    log_exceptions,
    set_log_level,
)


def test_log_context_drops_unset_fields():
    assert LogContext(run_id="run-1").to_dict() == {"run_id": "run-1"}


def test_component_dimensions_injected(caplog):
    logger = LoggerFactory.create_logger(ComponentType.SERVICE, "LoggerTest")
    with caplog.at_level(logging.INFO, logger="service.LoggerTest"):
        logger.info("hello", extra={'custom_dimensions': {'database': 'app'}})

    record = caplog.records[-1]
    assert record.custom_dimensions == {
        'component_type': 'service',
        'component_name': 'LoggerTest',
        'database': 'app',
    }
    line = json.loads(JSONFormatter().format(record))
    assert line['message'] == "hello"
    assert line['customDimensions']['database'] == 'app'


def test_single_handler_per_logger():
    first = LoggerFactory.create_logger(ComponentType.REPOSITORY, "HandlerTest")
    second = LoggerFactory.create_logger(ComponentType.REPOSITORY, "HandlerTest")
    assert first is second
    assert len(first.handlers) == 1


def test_set_log_level():
    logger = LoggerFactory.create_logger(ComponentType.TRIGGER, "LevelTest")
    try:
        set_log_level("warning")
        assert logger.level == logging.WARNING
    finally:
        set_log_level("INFO")


def test_log_exceptions_reraises(caplog):
    logger = LoggerFactory.create_logger(ComponentType.TRIGGER, "DecoratorTest")

    @log_exceptions(logger=logger)
    def explode():
        raise RuntimeError("boom")

    with caplog.at_level(logging.ERROR, logger="trigger.DecoratorTest"):
        with pytest.raises(RuntimeError):
            explode()

    assert caplog.records[-1].custom_dimensions['exception_type'] == "RuntimeError"
