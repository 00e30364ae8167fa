"""
===============================================
Pytest suite for core/logger.py
===============================================

Sections:
---------
1. Unit tests - ColoredFormatter and get_logger
2. Integration tests - setup_logging handlers

Available markers:
------------------
unit, integration

How to Execute:
---------------
All tests:          pytest tests/tests_core/test_logger.py -v
"""

import logging

import pytest

from core.logger import ColoredFormatter, get_logger, setup_logging


@pytest.fixture
def restore_root_logger():
    """Drop the handlers installed by setup_logging() once the test is done."""
    root = logging.getLogger()
    level = root.level
    yield root
    for handler in list(root.handlers):
        if type(handler) in (logging.StreamHandler, logging.FileHandler):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


def make_record(level=logging.INFO, msg="hello"):
    return logging.LogRecord('securedb.test', level, __file__, 1, msg, None, None)


# ===============
# 1. UNIT TESTS
# ===============

@pytest.mark.unit
def test_colored_formatter_adds_color_and_marker():
    formatter = ColoredFormatter('%(emoji)s %(levelname)s %(message)s')

    output = formatter.format(make_record(logging.ERROR, "boom"))

    assert output.startswith('❌')
    assert '\033[31mERROR\033[0m' in output
    assert output.endswith('boom')


@pytest.mark.unit
def test_colored_formatter_leaves_record_untouched():
    """Other handlers sharing the record must still see the plain level name."""
    record = make_record()

    ColoredFormatter('%(emoji)s %(levelname)s %(message)s').format(record)

    assert record.levelname == 'INFO'
    assert not hasattr(record, 'emoji')


@pytest.mark.unit
def test_get_logger_sets_optional_level():
    logger = get_logger('securedb.test.level', level='warning')

    assert logger.name == 'securedb.test.level'
    assert logger.level == logging.WARNING


# ======================
# 2. INTEGRATION TESTS
# ======================

@pytest.mark.integration
def test_setup_logging_writes_plain_file(restore_root_logger, tmp_path):
    setup_logging(log_level='DEBUG', log_file='securedb.log', log_dir=str(tmp_path), use_colors=True)

    logging.getLogger('securedb.test.file').debug("Compiled statement ready")
    for handler in restore_root_logger.handlers:
        handler.flush()

    content = (tmp_path / 'securedb.log').read_text(encoding='utf-8')
    assert 'securedb.test.file - DEBUG - Compiled statement ready' in content
    assert '\033[' not in content


@pytest.mark.integration
def test_setup_logging_replaces_handlers(restore_root_logger):
    setup_logging(log_level='INFO')
    setup_logging(log_level='WARNING', use_colors=False)

    assert len(restore_root_logger.handlers) == 1
    assert restore_root_logger.level == logging.WARNING
    assert not isinstance(restore_root_logger.handlers[0].formatter, ColoredFormatter)


@pytest.mark.integration
def test_setup_logging_without_console(restore_root_logger):
    setup_logging(console_output=False)

    assert restore_root_logger.handlers == []
