import logging

import pytest


@pytest.fixture(autouse=True)
def _reset_kloudlib_logger():
    """init_logging() attaches handlers to streams that only live for one CLI invocation."""
    yield
    logger = logging.getLogger("kloudlib")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
