"""pytest fixtures."""

from __future__ import annotations

from pathlib import Path

import cv2
import numpy as np
import pytest

import virtualstain
from virtualstain import logger

# -------------------------------------------------------------------------------------
# Generate Parameterized Tests
# -------------------------------------------------------------------------------------


def pytest_configure() -> None:
    """Perform initial configuration for virtualstain tests."""
    logger.info(
        "🏁 Starting tests. virtualstain Version: %s.",
        virtualstain.__version__,
    )


def pytest_generate_tests(metafunc: pytest.Metafunc) -> None:
    """Generate (parameterize) test scenarios.

    Adapted from pytest documentation. For more information on
    parameterized tests see:
    https://docs.pytest.org/en/6.2.x/example/parametrize.html#a-quick-port-of-testscenarios

    """
    # Return if the test is not part of a class or if the class does not
    # have a scenarios attribute.
    if metafunc.cls is None or not hasattr(metafunc.cls, "scenarios"):
        return
    idlist = []
    argvalues = []
    argnames = None
    for scenario in metafunc.cls.scenarios:
        idlist.append(scenario[0])
        items = scenario[1].items()
        argnames = [x[0] for x in items]
        argvalues.append([x[1] for x in items])
    metafunc.parametrize(argnames, argvalues, ids=idlist, scope="class")


# -------------------------------------------------------------------------------------
# Fixtures
# -------------------------------------------------------------------------------------


@pytest.fixture(scope="session")
def nucleus_16bit() -> np.ndarray:
    """Synthetic 16-bit nucleus channel with bright round nuclei."""
    rng = np.random.default_rng(0)
    yy, xx = np.mgrid[0:96, 0:128]
    img = rng.integers(0, 2000, size=(96, 128)).astype(np.float64)
    for cy, cx in [(20, 30), (50, 90), (75, 40)]:
        img += 60000 * np.exp(-((yy - cy) ** 2 + (xx - cx) ** 2) / 60.0)
    return np.clip(img, 0, 65535).astype(np.uint16)


@pytest.fixture(scope="session")
def eosin_16bit() -> np.ndarray:
    """Synthetic 16-bit eosin channel with a smooth background gradient."""
    rng = np.random.default_rng(1)
    gradient = np.linspace(5000, 30000, 128)[np.newaxis, :].repeat(96, axis=0)
    noise = rng.integers(0, 1000, size=(96, 128))
    return (gradient + noise).astype(np.uint16)


@pytest.fixture(scope="session")
def nucleus_8bit(nucleus_16bit: np.ndarray) -> np.ndarray:
    """8-bit version of the synthetic nucleus channel."""
    return (nucleus_16bit // 257).astype(np.uint8)


@pytest.fixture(scope="session")
def eosin_8bit(eosin_16bit: np.ndarray) -> np.ndarray:
    """8-bit version of the synthetic eosin channel."""
    return (eosin_16bit // 257).astype(np.uint8)


@pytest.fixture(scope="session")
def tmp_samples_path(tmp_path_factory: pytest.TempPathFactory) -> Path:
    """Return a temporary path."""
    return tmp_path_factory.mktemp("data")


@pytest.fixture(scope="session")
def sample_nucleus_tif(tmp_samples_path: Path, nucleus_16bit: np.ndarray) -> Path:
    """Sample 16-bit nucleus channel saved as tif."""
    path = tmp_samples_path / "nucleus.tif"
    cv2.imwrite(str(path), nucleus_16bit)
    return path


@pytest.fixture(scope="session")
def sample_eosin_tif(tmp_samples_path: Path, eosin_16bit: np.ndarray) -> Path:
    """Sample 16-bit eosin channel saved as tif."""
    path = tmp_samples_path / "autof.tif"
    cv2.imwrite(str(path), eosin_16bit)
    return path


@pytest.fixture(scope="session")
def sample_eosin_8bit_png(tmp_samples_path: Path, eosin_8bit: np.ndarray) -> Path:
    """Sample 8-bit eosin channel saved as png."""
    path = tmp_samples_path / "autof_8bit.png"
    cv2.imwrite(str(path), eosin_8bit)
    return path


@pytest.fixture(scope="session")
def sample_rgb_png(tmp_samples_path: Path) -> Path:
    """Sample colour image, not a valid channel input."""
    path = tmp_samples_path / "colour.png"
    cv2.imwrite(str(path), np.full((16, 16, 3), 128, dtype=np.uint8))
    return path
