import logging

import pytest


@pytest.fixture(autouse=True)
def restore_logging():
    # setup_logging replaces root handlers and the record factory
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    factory = logging.getLogRecordFactory()
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    logging.setLogRecordFactory(factory)
