"""Test for virtualstain global workspace."""

import importlib
import logging
import subprocess
import sys

import pytest

import virtualstain
from virtualstain import DuplicateFilter, logger, read_registry_files


def test_set_logger() -> None:
    """Test for setting new logger."""
    logger = logging.getLogger()
    old_handlers = logger.handlers
    logger.handlers = []  # reset first to overwrite import
    handler_1 = logging.StreamHandler()
    handler_2 = logging.StreamHandler()
    handler_3 = logging.StreamHandler()
    logger.addHandler(handler_1)
    logger.addHandler(handler_2)
    logger.addHandler(handler_3)
    assert len(logger.handlers) == 3
    # skipcq
    importlib.reload(virtualstain)
    # should not overwrite, so still have 3 handler
    assert len(logger.handlers) == 3
    logger.handlers = []  # remove all handler
    # skipcq
    importlib.reload(virtualstain)
    assert len(logger.handlers) == 2
    logger.handlers = old_handlers


def helper_logger_test(level: str) -> None:
    """Helper for logger tests."""
    if level.lower() in ["debug", "info"]:
        output = "out"
        order = (0, 1)
    else:
        output = "err"
        order = (1, 0)
    run_statement = (
        f"from virtualstain import logger; "
        f"import logging; "
        f"logger.setLevel(logging.{level.upper()}); "
        f'logger.{level.lower()}("Test if {level.lower()} is written to std{output}.")'
    )

    proc = subprocess.Popen(  # noqa: S603
        [
            sys.executable,
            "-c",
            run_statement,
        ],
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
    )
    outputs = proc.communicate()

    assert (
        f"[{level.upper()}] Test if {level.lower()} is written to std{output}.".encode()
        in outputs[order[0]]
    )
    assert outputs[order[1]] == b""


def test_logger_output() -> None:
    """Test if logger is writing output to correct value."""
    # Test DEBUG is written to stdout
    helper_logger_test(level="debug")

    # Test INFO is written to stdout
    helper_logger_test(level="info")

    # Test WARNING is written to stderr
    helper_logger_test(level="warning")

    # Test ERROR is written to stderr
    helper_logger_test(level="error")


def test_duplicate_filter(caplog: pytest.LogCaptureFixture) -> None:
    """Test DuplicateFilter for warnings."""
    for _ in range(2):
        logger.warning("Test duplicate filter warnings.")
    assert "Test duplicate filter warnings." in caplog.text
    assert "\n" in caplog.text[:-2]

    caplog.clear()

    duplicate_filter = DuplicateFilter()
    logger.addFilter(duplicate_filter)
    for _ in range(2):
        logger.warning("Test duplicate filter warnings.")
    logger.removeFilter(duplicate_filter)
    assert "Test duplicate filter warnings." in caplog.text
    assert "\n" not in caplog.text[:-2]


def test_rc_param_stain_registry() -> None:
    """Test the stain coefficient registry loaded into rcParam."""
    from virtualstain import rcParam

    assert set(rcParam) == {"stain_coefficients", "default_stain", "default_strength"}
    registry = rcParam["stain_coefficients"]
    assert rcParam["default_stain"] in registry
    assert rcParam["default_strength"] == 2.5
    for name, stain in registry.items():
        assert len(stain["hematoxylin"]) == 3, name
        assert len(stain["eosin"]) == 3, name


def test_read_registry_files() -> None:
    """Test reading the packaged yaml registry."""
    registry = read_registry_files("data/stain_coefficients.yaml")
    assert registry["stains"]["he"]["hematoxylin"] == [0.86, 1.0, 0.3]
    assert registry["stains"]["he"]["eosin"] == [0.05, 1.0, 0.544]
