"""Tests for the logging helpers."""

# pylint: disable=C0116:missing-function-docstring

import logging

from pyCertStatus import logs


def test_module_loggers_sit_under_the_package_logger():
    assert logs.get_logger("pyCertStatus.checks._crl").name == "pyCertStatus.checks._crl"
    assert logs.get_logger("tests").name == "pyCertStatus.tests"
    assert logs.get_logger("pyCertStatus") is logs.get_root_logger()


def test_console_level_for_verbosity():
    assert logs.console_level_for(0) == logging.WARNING
    assert logs.console_level_for(1) == logging.INFO
    assert logs.console_level_for(3) == logging.DEBUG


def test_log_file_location(tmp_path):
    assert logs.log_file(tmp_path) == tmp_path / "logs.txt"
