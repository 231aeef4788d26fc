"""Miscellaneous small functions repeatedly used in virtualstain."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import cv2
import numpy as np
import pandas as pd

from virtualstain.utils.exceptions import (
    FileNotSupportedError,
    ImageReadError,
    ImageWriteError,
)

if TYPE_CHECKING:  # pragma: no cover
    from os import PathLike

# Sample depth (bits) for each supported grayscale dtype.
CHANNEL_DEPTHS = {np.dtype(np.uint8): 8, np.dtype(np.uint16): 16}


def split_path_name_ext(
    full_path: PathLike | str,
) -> tuple[Path, str, list[str]]:
    """Split path of a file to directory path, file name and extensions.

    Args:
        full_path (PathLike | str):
            Path to a file.

    Returns:
        tuple:
            Three parts of the input file path:
            - :py:obj:`Path` - Parent directory path
            - :py:obj:`str` - File name
            - :py:obj:`list(str)` - File extensions

    Examples:
        >>> from virtualstain.utils.misc import split_path_name_ext
        >>> dir_path, file_name, extensions = split_path_name_ext(full_path)

    """
    input_path = Path(full_path)
    return input_path.parent.absolute(), input_path.name, input_path.suffixes


def imwrite(image_path: PathLike, img: np.ndarray) -> None:
    """Write an RGB numpy array to an image.

    Args:
        image_path (PathLike):
            File path (including extension) to save image to.
        img (:class:`numpy.ndarray`):
            Image array of dtype uint8, MxNx3.

    Raises:
        ImageWriteError:
            If the destination is not writable or the format is not
            recognised by OpenCV.

    Examples:
        >>> from virtualstain import utils
        >>> import numpy as np
        >>> utils.misc.imwrite('BlankImage.tif',
        ...     np.ones([100, 100, 3]).astype('uint8')*255)

    """
    image_path_str = str(image_path)

    try:
        written = cv2.imwrite(image_path_str, cv2.cvtColor(img, cv2.COLOR_RGB2BGR))
    except cv2.error as err:
        msg = f"Could not write image to {image_path_str}."
        raise ImageWriteError(msg) from err

    if not written:
        msg = f"Could not write image to {image_path_str}."
        raise ImageWriteError(msg)


def imread_channel(image_path: PathLike) -> tuple[np.ndarray, int]:
    """Read a single channel (grayscale) image with its sample depth.

    The image is decoded at its native bit depth, no conversion to uint8
    is performed. Only 8-bit and 16-bit unsigned grayscale images are
    accepted.

    Args:
        image_path (PathLike):
            File path (including extension) to read image.

    Returns:
        tuple:
            - :class:`numpy.ndarray` - Image array of dtype uint8 or
              uint16, MxN.
            - :py:obj:`int` - Sample depth in bits (8 or 16).

    Raises:
        ImageReadError:
            If the file does not exist, cannot be decoded or is not a
            8/16-bit grayscale image.

    Examples:
        >>> from virtualstain import utils
        >>> img, depth = utils.misc.imread_channel('nucleus.tif')

    """
    if not isinstance(image_path, (str, Path)):
        msg = "Please provide path to an image."
        raise TypeError(msg)

    image_path = Path(image_path)
    if not image_path.is_file():
        msg = f"Image file not found: {image_path}"
        raise ImageReadError(msg)

    if image_path.suffix == ".npy":
        image = np.load(str(image_path))
    else:
        image = cv2.imread(str(image_path), cv2.IMREAD_UNCHANGED)

    if image is None:
        msg = f"Could not decode image: {image_path}"
        raise ImageReadError(msg)

    if image.ndim != 2:  # noqa: PLR2004
        msg = f"Image must be grayscale, got shape {image.shape}: {image_path}"
        raise ImageReadError(msg)

    depth = CHANNEL_DEPTHS.get(image.dtype)
    if depth is None:
        msg = (
            f"Image must be 8-bit or 16-bit unsigned, "
            f"got dtype {image.dtype}: {image_path}"
        )
        raise ImageReadError(msg)

    return image, depth


def load_stain_matrix(stain_matrix_input: np.ndarray | PathLike) -> np.ndarray:
    """Load a stain coefficient matrix as a numpy array.

    Args:
        stain_matrix_input (ndarray | PathLike):
            Either a 2x3 numpy array or a path to a saved .npy / .csv
            file. If using a .csv file, there should be no column
            headers provided.

    Returns:
        stain_matrix (:class:`numpy.ndarray`):
            The loaded stain matrix.

    Examples:
        >>> from virtualstain import utils
        >>> sm = utils.misc.load_stain_matrix(stain_matrix_input)

    """
    if isinstance(stain_matrix_input, (str, Path)):
        _, __, suffixes = split_path_name_ext(stain_matrix_input)
        if not suffixes or suffixes[-1] not in [".csv", ".npy"]:
            msg = (
                "If supplying a path to a stain matrix, "
                "use either a npy or a csv file"
            )
            raise FileNotSupportedError(
                msg,
            )

        if suffixes[-1] == ".csv":
            return pd.read_csv(stain_matrix_input, header=None).to_numpy()

        # only other option left for suffix[-1] is .npy
        return np.load(str(stain_matrix_input))

    if isinstance(stain_matrix_input, np.ndarray):
        return stain_matrix_input

    msg = "Stain_matrix must be either a path to npy/csv file or a numpy array"
    raise TypeError(
        msg,
    )
