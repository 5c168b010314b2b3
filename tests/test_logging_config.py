"""Tests for logging setup."""
import json
import logging
import warnings

import pytest
from pythonjsonlogger.json import JsonFormatter

from shopify_image_sync.logging_config import LOG_FORMAT, CustomJsonFormatter, setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


class TestSetupLogging:
    """Test setup_logging."""

    def test_plain_console_handler(self, restore_root_logger):
        root = setup_logging()

        assert root.level == logging.INFO
        assert len(root.handlers) == 1
        assert root.handlers[0].formatter._fmt == LOG_FORMAT

    def test_debug_level(self, restore_root_logger):
        assert setup_logging(debug=True).level == logging.DEBUG

    def test_json_console_handler(self, restore_root_logger):
        root = setup_logging(json_format=True)

        assert isinstance(root.handlers[0].formatter, CustomJsonFormatter)

    def test_log_file(self, restore_root_logger, tmp_path):
        log_file = tmp_path / 'logs' / 'sync.log'
        root = setup_logging(log_file=str(log_file))

        logging.getLogger('shopify_image_sync.test').info('written to file')
        for handler in root.handlers:
            handler.flush()

        assert len(root.handlers) == 2
        assert 'written to file' in log_file.read_text()


class TestCustomJsonFormatter:
    """Test the structured log format."""

    def test_adds_context_fields(self):
        record = logging.LogRecord(
            name='shopify_image_sync.shopify_uploader',
            level=logging.ERROR,
            pathname=__file__,
            lineno=10,
            msg='Failed to process image %s',
            args=('red-mug.jpg',),
            exc_info=None,
            func='process_image'
        )

        entry = json.loads(CustomJsonFormatter().format(record))

        assert entry['level'] == 'ERROR'
        assert entry['logger'] == 'shopify_image_sync.shopify_uploader'
        assert entry['function'] == 'process_image'
        assert entry['line'] == 10
        assert 'timestamp' in entry

    def test_uses_current_formatter_module(self):
        assert issubclass(CustomJsonFormatter, JsonFormatter)

    def test_formatting_emits_no_deprecation_warning(self):
        record = logging.LogRecord('shopify_image_sync', logging.INFO, __file__, 1, 'ok', None, None)

        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter('always')
            CustomJsonFormatter().format(record)

        assert not [w for w in caught if issubclass(w.category, DeprecationWarning)]
