"""
Tests for converter configuration and logging setup.
"""

import logging

import pytest
from rich.logging import RichHandler

from htmlquill import configure_logging
from htmlquill.config import AcronymPosition, CaptionPosition, ConverterConfig, DefaultStyles
from htmlquill.exceptions import ConfigurationError
from htmlquill.utils.logger import add_file_handler, get_logger


class TestConverterConfig:
    """Test defaults and construction from plain data."""

    def test_defaults(self):
        config = ConverterConfig()

        assert config.acronym_position == AcronymPosition.PAGE_END
        assert config.table_caption_position == CaptionPosition.ABOVE
        assert config.render_pre_as_table
        assert not config.consider_div_as_paragraph
        assert config.default_styles.table_style == "TableGrid"
        assert config.default_styles.heading(2) == "Heading2"

    def test_from_dict(self):
        config = ConverterConfig.from_dict({
            "acronym_position": "DOCUMENT_END",
            "table_caption_position": "below",
            "image_fetch_timeout": "5",
            "default_styles": {"paragraph_style": "BodyText"},
        })

        assert config.acronym_position == AcronymPosition.DOCUMENT_END
        assert config.table_caption_position == CaptionPosition.BELOW
        assert config.image_fetch_timeout == 5.0
        assert config.default_styles == DefaultStyles(paragraph_style="BodyText")

    def test_enum_instances_accepted(self):
        config = ConverterConfig.from_dict({"acronym_position": AcronymPosition.DOCUMENT_END})

        assert config.acronym_position == AcronymPosition.DOCUMENT_END

    @pytest.mark.parametrize("data", [
        {"unknown_option": True},
        {"acronym_position": "sidebar"},
        {"default_styles": {"bogus_role": "X"}},
        {"image_fetch_timeout": 0},
        {"image_fetch_timeout": "soon"},
    ])
    def test_invalid(self, data):
        with pytest.raises(ConfigurationError):
            ConverterConfig.from_dict(data)

    def test_error_details(self):
        with pytest.raises(ConfigurationError) as info:
            ConverterConfig.from_dict({"b": 1, "a": 2})

        assert str(info.value) == "Unknown configuration keys: a, b"

    def test_frozen(self):
        with pytest.raises(AttributeError):
            ConverterConfig().exclude_link_anchor = True


class TestLogging:
    """Test logging configuration of the package logger."""

    @pytest.fixture(autouse=True)
    def restore_package_logger(self):
        package_logger = logging.getLogger("htmlquill")
        yield
        for handler in package_logger.handlers:
            handler.close()
        package_logger.handlers.clear()
        package_logger.setLevel(logging.NOTSET)

    def test_rich_console(self):
        configure_logging("debug")

        package_logger = logging.getLogger("htmlquill")
        assert package_logger.level == logging.DEBUG
        assert len(package_logger.handlers) == 1
        assert isinstance(package_logger.handlers[0], RichHandler)

    def test_plain_console_and_file(self, tmp_path):
        log_file = tmp_path / "logs" / "htmlquill.log"
        configure_logging("INFO", log_file=str(log_file), use_rich=False)

        get_logger("htmlquill.test").info("written to file")
        for handler in logging.getLogger("htmlquill").handlers:
            handler.flush()

        assert "written to file" in log_file.read_text()

    def test_invalid_level(self):
        with pytest.raises(ValueError):
            configure_logging("LOUD")

    def test_add_file_handler_validation(self, tmp_path):
        with pytest.raises(ValueError):
            add_file_handler("not a logger", str(tmp_path / "x.log"))
        with pytest.raises(ValueError):
            add_file_handler(logging.getLogger("htmlquill"), "")

    def test_get_logger_requires_name(self):
        with pytest.raises(ValueError):
            get_logger("")
