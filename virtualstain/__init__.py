"""Top-level package for virtualstain."""

from __future__ import annotations

import importlib.resources as importlib_resources
import sys
from pathlib import Path
from typing import TYPE_CHECKING, TypedDict

import yaml

if TYPE_CHECKING:  # pragma: no cover
    from logging import LogRecord

__author__ = """virtualstain developers"""
__version__ = "0.3.0"

# Initialize internal logging facilities, such that the pipeline and the
# command line interface share one reporting mechanism
import logging

# We only create a logger if root has no handler to prevent overwriting use existing
# logging
logging.captureWarnings(capture=True)
if not logging.getLogger().hasHandlers():
    formatter = logging.Formatter(
        "|%(asctime)s.%(msecs)03d| [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d|%H:%M:%S",
    )
    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(formatter)
    stdout_handler.addFilter(lambda record: record.levelno <= logging.INFO)

    stderr_handler = logging.StreamHandler()
    stderr_handler.setFormatter(formatter)
    stderr_handler.setLevel(logging.WARNING)

    logger = logging.getLogger()  # get root logger
    logger.setLevel(logging.INFO)
    logger.addHandler(stdout_handler)
    logger.addHandler(stderr_handler)
else:
    logger = logging.getLogger()


class DuplicateFilter(logging.Filter):
    """Define an object to filter duplicate logs.

    The DuplicateFilter filters logs to avoid printing them multiple times
    while rendering a batch of images in a loop.

    """

    def filter(self: DuplicateFilter, record: LogRecord) -> bool:
        """Filter input record."""
        current_log = (record.module, record.levelno, record.msg)
        if current_log != getattr(self, "last_log", None):
            self.last_log = current_log
            return True
        return False


class _RcParam(TypedDict):
    """All the parameters in the rcParam dictionary should be defined here."""

    stain_coefficients: dict[str, dict]
    default_stain: str
    default_strength: float


def read_registry_files(path_to_registry: str | Path) -> dict:
    """Reads registry files using importlib_resources.

    Args:
        path_to_registry (str or Path):
            Path to registry files from virtualstain root.

    Returns:
        Contents of yaml file.

    """
    registry_path = importlib_resources.as_file(
        importlib_resources.files("virtualstain") / str(path_to_registry),
    )

    with registry_path as registry_file_path, Path.open(
        registry_file_path
    ) as registry_handle:
        return yaml.safe_load(registry_handle)


# runtime context parameters
rcParam: _RcParam = {  # noqa: N816
    "stain_coefficients": read_registry_files(
        "data/stain_coefficients.yaml",
    )["stains"],  # Named extinction coefficient sets (hematoxylin, eosin)
    "default_stain": "he",
    "default_strength": 2.5,
}
