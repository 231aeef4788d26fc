"""Tests for utils."""

from pathlib import Path

import cv2
import numpy as np
import pandas as pd
import pytest

from virtualstain import utils
from virtualstain.utils.exceptions import (
    FileNotSupportedError,
    ImageReadError,
    ImageWriteError,
)
from virtualstain.utils.transforms import transmittance2rgb


def test_split_path_name_ext() -> None:
    """Test func for splitting a path name and extension."""
    dir_path, file_name, extensions = utils.misc.split_path_name_ext(
        full_path="/data/nucleus.ome.tif",
    )
    assert dir_path == Path("/data")
    assert file_name == "nucleus.ome.tif"
    assert extensions == [".ome", ".tif"]


def test_imread_channel_16bit(sample_nucleus_tif: Path, nucleus_16bit: np.ndarray) -> None:
    """Test reading a 16-bit grayscale tif at native depth."""
    img, depth = utils.imread_channel(sample_nucleus_tif)
    assert depth == 16
    assert img.dtype == np.uint16
    assert np.array_equal(img, nucleus_16bit)

    img, depth = utils.imread_channel(str(sample_nucleus_tif))
    assert depth == 16


def test_imread_channel_8bit(sample_eosin_8bit_png: Path, eosin_8bit: np.ndarray) -> None:
    """Test reading a 8-bit grayscale png."""
    img, depth = utils.imread_channel(sample_eosin_8bit_png)
    assert depth == 8
    assert img.dtype == np.uint8
    assert np.array_equal(img, eosin_8bit)


def test_imread_channel_npy(tmp_path: Path) -> None:
    """Test reading a channel stored as npy."""
    channel = np.arange(12, dtype=np.uint16).reshape(3, 4)
    np.save(tmp_path / "channel.npy", channel)
    img, depth = utils.imread_channel(tmp_path / "channel.npy")
    assert depth == 16
    assert np.array_equal(img, channel)

    np.save(tmp_path / "float.npy", channel.astype(np.float32))
    with pytest.raises(ImageReadError, match="8-bit or 16-bit"):
        utils.imread_channel(tmp_path / "float.npy")


def test_imread_channel_errors(sample_rgb_png: Path, tmp_path: Path) -> None:
    """Test read errors for missing, undecodable and colour images."""
    with pytest.raises(TypeError, match="Please provide path to an image"):
        utils.imread_channel(np.zeros((10, 10)))

    with pytest.raises(ImageReadError, match="not found"):
        utils.imread_channel(tmp_path / "missing.tif")

    with pytest.raises(ImageReadError, match="grayscale"):
        utils.imread_channel(sample_rgb_png)

    not_an_image = tmp_path / "not_an_image.tif"
    not_an_image.write_text("this is not a tif")
    with pytest.raises(ImageReadError, match="Could not decode"):
        utils.imread_channel(not_an_image)


def test_imwrite(tmp_path: Path) -> None:
    """Test writing an RGB image."""
    image_path = tmp_path / "test_imwrite.tif"
    img = np.zeros([20, 30, 3], dtype=np.uint8)
    img[..., 0] = 255  # red

    utils.imwrite(image_path, img)
    assert image_path.is_file()

    # OpenCV reads BGR
    read_img = cv2.imread(str(image_path))
    assert read_img.shape == img.shape
    assert np.all(read_img[..., 2] == 255)
    assert np.all(read_img[..., 0] == 0)

    with pytest.raises(IOError, match="Could not write image"):
        utils.imwrite(
            tmp_path / "this_folder_does_not_exist" / "test_imwrite.tif",
            img,
        )

    with pytest.raises(ImageWriteError):
        utils.imwrite(tmp_path / "no_extension", img)


def test_load_stain_matrix(tmp_path: Path) -> None:
    """Test to load stain matrix."""
    with pytest.raises(FileNotSupportedError):
        utils.misc.load_stain_matrix("/samplefile.xlsx")

    with pytest.raises(TypeError):
        # load_stain_matrix requires numpy array as input providing list here
        utils.misc.load_stain_matrix([1, 2, 3])

    stain_matrix = np.array([[0.86, 1.0, 0.30], [0.05, 1.0, 0.544]])
    pd.DataFrame(stain_matrix).to_csv(
        tmp_path / "sm.csv",
        index=False,
        header=False,
    )
    out_stain_matrix = utils.misc.load_stain_matrix(tmp_path / "sm.csv")
    assert np.allclose(out_stain_matrix, stain_matrix)

    np.save(str(tmp_path / "sm.npy"), stain_matrix)
    out_stain_matrix = utils.misc.load_stain_matrix(tmp_path / "sm.npy")
    assert np.all(out_stain_matrix == stain_matrix)

    assert utils.misc.load_stain_matrix(stain_matrix) is stain_matrix


def test_transmittance2rgb() -> None:
    """Test quantization of transmittance to uint8."""
    rgb = transmittance2rgb(np.array([0.1165, 0.0821, 0.4724]))
    assert rgb.dtype == np.uint8
    assert rgb.tolist() == [30, 21, 120]

    # saturation instead of errors
    rgb = transmittance2rgb(np.array([-0.2, 0.0, 1.0, 1.3]))
    assert rgb.tolist() == [0, 0, 255, 255]


def test_transmittance2rgb_rounding() -> None:
    """Test rounding to the nearest integer with halves rounded up."""
    rgb = transmittance2rgb(np.array([0.5, 0.25, 0.75, 0.0]))
    # 127.5, 63.75, 191.25, 0.0
    assert rgb.tolist() == [128, 64, 191, 0]


def test_transmittance2rgb_out() -> None:
    """Test writing quantized values into an existing array."""
    out = np.zeros((2, 2, 3), dtype=np.uint8)
    transmittance2rgb(np.ones((1, 2, 3)), out=out[:1])
    assert np.all(out[0] == 255)
    assert np.all(out[1] == 0)
