from __future__ import annotations

import logging

import pytest

from gateway.logging_config import configure_logging


@pytest.fixture()
def gateway_logger():
    logger = logging.getLogger("gateway")
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    logger.handlers = [h for h in handlers if not getattr(h, "_gateway_handler", False)]
    logger.propagate = True
    yield logger
    logger.handlers = handlers
    logger.setLevel(level)
    logger.propagate = propagate


def test_configure_logging_installs_a_single_handler(gateway_logger):
    configure_logging("debug")
    configure_logging("debug")

    installed = [h for h in gateway_logger.handlers if getattr(h, "_gateway_handler", False)]
    assert len(installed) == 1
    assert gateway_logger.level == logging.DEBUG


def test_gateway_records_do_not_reach_root_handlers(gateway_logger):
    class Collector(logging.Handler):
        def __init__(self):
            super().__init__()
            self.records: list[logging.LogRecord] = []

        def emit(self, record):
            self.records.append(record)

    collector = Collector()
    logging.getLogger().addHandler(collector)
    try:
        configure_logging("info")
        logging.getLogger("gateway.core.dispatcher").info("turn done")
    finally:
        logging.getLogger().removeHandler(collector)

    assert gateway_logger.propagate is False
    assert collector.records == []
