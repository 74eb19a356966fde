import logging
from pyv_cache.utils.logging import get_logger, set_level


def test_set_level_reaches_module_loggers():
    logger = get_logger("pyv_cache.runtime.cache")
    try:
        set_level("debug")
        assert logger.getEffectiveLevel() == logging.DEBUG
    finally:
        set_level("INFO")
