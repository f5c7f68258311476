"""
Unit tests for package logging setup.
"""

import logging

import gemini_chat


class TestLoggingSetup:
    def test_package_logger_has_null_handler(self):
        handlers = logging.getLogger("gemini_chat").handlers
        assert any(isinstance(h, logging.NullHandler) for h in handlers)

    def test_configure_logging_sets_levels(self):
        package_logger = logging.getLogger("gemini_chat")
        httpx_logger = logging.getLogger("httpx")
        previous = package_logger.level, httpx_logger.level
        try:
            gemini_chat.configure_logging("DEBUG", httpx_level="ERROR")
            assert package_logger.level == logging.DEBUG
            assert httpx_logger.level == logging.ERROR
        finally:
            package_logger.setLevel(previous[0])
            httpx_logger.setLevel(previous[1])

    def test_version_is_exposed(self):
        assert isinstance(gemini_chat.__version__, str)
