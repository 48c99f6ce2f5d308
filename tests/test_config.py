"""Tests for formatting option files and logging setup."""

import logging

import pytest

from scadgen.config import load_format_options
from scadgen.errors import ValidationError
from scadgen.logging_config import setup_logging
from scadgen.serializer import FormatOptions


def write(tmp_path, text):
    path = tmp_path / "format.yaml"
    path.write_text(text, encoding="utf-8")
    return path


def test_load_options(tmp_path):
    path = write(tmp_path, "precision: 3\nindent: \"    \"\nfn: 48\n")
    assert load_format_options(path) == FormatOptions(precision=3, indent="    ", fn=48)


def test_empty_file_gives_defaults(tmp_path):
    assert load_format_options(write(tmp_path, "")) == FormatOptions()


@pytest.mark.parametrize("text", [
    "precision: [1\n",
    "- precision\n",
    "precision: 3\ncolour: red\n",
    "precision: high\n",
    "fs: -1\n",
])
def test_bad_options(tmp_path, text):
    with pytest.raises(ValidationError):
        load_format_options(write(tmp_path, text))


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_format_options(tmp_path / "missing.yaml")


def test_setup_logging(tmp_path):
    log_file = tmp_path / "scadgen.log"
    setup_logging(logging.DEBUG, str(log_file))
    setup_logging(logging.DEBUG, str(log_file))
    logger = logging.getLogger("scadgen")
    try:
        assert logger.level == logging.DEBUG
        # Calling twice does not duplicate handlers
        assert len(logger.handlers) == 2
        logging.getLogger("scadgen.test").debug("hello from the test")
        for handler in logger.handlers:
            handler.flush()
        assert "scadgen.test - DEBUG - hello from the test" in log_file.read_text(encoding="utf-8")
    finally:
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)
