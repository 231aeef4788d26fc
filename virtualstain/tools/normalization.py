"""Channel normalization classes.

Raw fluorescence channels are rescaled to floating point intensities in
:math:`[0, 1]` before being used as stain concentrations.

"""

from __future__ import annotations

import numpy as np

from virtualstain import logger
from virtualstain.utils.exceptions import (
    InvalidConfigurationError,
    InvalidInputError,
    MethodNotSupportedError,
)
from virtualstain.utils.misc import CHANNEL_DEPTHS

# Maximum representable sample value for each supported depth.
MAX_SAMPLE_VALUES = {8: 255, 16: 65535}


def max_sample_value(depth: int) -> int:
    """Return the full-scale sample value of a bit depth.

    Args:
        depth (int):
            Sample depth in bits, 8 or 16.

    Returns:
        int:
            255 for 8-bit and 65535 for 16-bit samples.

    """
    if depth not in MAX_SAMPLE_VALUES:
        msg = f"Unsupported sample depth {depth}, expected 8 or 16."
        raise InvalidInputError(msg)
    return MAX_SAMPLE_VALUES[depth]


def check_raster(raster: np.ndarray, depth: int | None = None) -> int:
    """Validate a raw channel and return its sample depth.

    Args:
        raster (:class:`numpy.ndarray`):
            Raw single channel image, `HxW`.
        depth (int):
            Declared sample depth. If None it is inferred from the dtype
            of `raster` (uint8 -> 8, uint16 -> 16).

    Returns:
        int:
            Sample depth in bits.

    Raises:
        InvalidInputError:
            If the raster is not a non-empty 2D array with a known depth.

    """
    if not isinstance(raster, np.ndarray):
        msg = f"Raster must be a numpy array, got {type(raster).__name__}."
        raise InvalidInputError(msg)
    if raster.ndim != 2:  # noqa: PLR2004
        msg = f"Raster must be a single channel 2D array, got shape {raster.shape}."
        raise InvalidInputError(msg)
    if raster.size == 0:
        msg = f"Raster is empty, got shape {raster.shape}."
        raise InvalidInputError(msg)

    if depth is None:
        depth = CHANNEL_DEPTHS.get(raster.dtype)
        if depth is None:
            msg = (
                "Sample depth cannot be inferred from dtype "
                f"{raster.dtype}, expected uint8 or uint16."
            )
            raise InvalidInputError(msg)

    max_sample_value(depth)
    return depth


class ChannelNormalizer:
    """Channel normalization base class.

    A normalizer is first fitted to a whole raw channel and can then
    transform the full channel or any band of rows of it. Fitting and
    transforming separately gives identical values to transforming the
    whole image at once.

    Attributes:
        depth (int):
            Sample depth of the fitted channel.
        dtype (:class:`numpy.dtype`):
            Floating point type of the normalized output.

    """

    def __init__(self: ChannelNormalizer, dtype: type = np.float32) -> None:
        """Initialize :class:`ChannelNormalizer`."""
        self.dtype = np.dtype(dtype)
        self.depth: int | None = None

    def fit(
        self: ChannelNormalizer,
        raster: np.ndarray,
        depth: int | None = None,
    ) -> ChannelNormalizer:
        """Fit to a raw channel.

        Args:
            raster (:class:`numpy.ndarray`):
                Raw single channel image of dtype uint8 or uint16.
            depth (int):
                Declared sample depth, inferred from dtype if None.

        Returns:
            ChannelNormalizer:
                The fitted normalizer.

        """
        self.depth = check_raster(raster, depth)
        return self

    def scale(self: ChannelNormalizer, raster: np.ndarray) -> np.ndarray:
        """Divide raw samples by the full-scale value of the fitted depth."""
        if self.depth is None:
            msg = "Normalizer must be fitted before calling transform."
            raise ValueError(msg)
        out = raster.astype(self.dtype)
        out /= self.dtype.type(max_sample_value(self.depth))
        return out

    def transform(self: ChannelNormalizer, raster: np.ndarray) -> np.ndarray:
        """Transform a raw channel (or a band of it).

        Args:
            raster (:class:`numpy.ndarray`):
                Raw samples, not modified.

        Returns:
            :class:`numpy.ndarray`:
                Normalized intensities.

        """
        return self.scale(raster)

    def fit_transform(
        self: ChannelNormalizer,
        raster: np.ndarray,
        depth: int | None = None,
    ) -> np.ndarray:
        """Fit to a raw channel and return its normalized intensities."""
        return self.fit(raster, depth).transform(raster)


class FixedRangeNormalizer(ChannelNormalizer):
    """Fixed range channel normalizer.

    Each sample is divided by the maximum representable value of its
    depth (255 or 65535). The input is assumed to be exposure calibrated,
    no contrast stretching is performed.

    Examples:
        >>> from virtualstain.tools.normalization import FixedRangeNormalizer
        >>> norm = FixedRangeNormalizer()
        >>> h = norm.fit_transform(nucleus)

    """


class PercentileNormalizer(ChannelNormalizer):
    """Percentile (histogram) scaling channel normalizer.

    The fixed range intensity at the given percentile becomes the
    saturation point: every sample is divided by it and clipped to 1.0.
    With the default of 99.999, one pixel in 100,000 saturates.

    Args:
        percentile (float):
            Percentile in (0, 100] used as the saturation point.

    Attributes:
        threshold (float):
            Normalized intensity at `percentile` in the fitted channel.

    Examples:
        >>> from virtualstain.tools.normalization import PercentileNormalizer
        >>> norm = PercentileNormalizer(percentile=99.999)
        >>> h = norm.fit_transform(nucleus)

    """

    def __init__(
        self: PercentileNormalizer,
        percentile: float = 99.999,
        dtype: type = np.float32,
    ) -> None:
        """Initialize :class:`PercentileNormalizer`."""
        super().__init__(dtype=dtype)
        if not 0 < percentile <= 100:  # noqa: PLR2004
            msg = f"Percentile must be in (0, 100], got {percentile}."
            raise InvalidConfigurationError(msg)
        self.percentile = percentile
        self.threshold: float | None = None

    def fit(
        self: PercentileNormalizer,
        raster: np.ndarray,
        depth: int | None = None,
    ) -> PercentileNormalizer:
        """Find the saturation threshold of a raw channel."""
        super().fit(raster, depth)
        flat = self.scale(raster).ravel()
        index = min(int(self.percentile / 100.0 * flat.size), flat.size - 1)
        self.threshold = float(np.partition(flat, index)[index])
        if self.threshold == 0:
            logger.warning(
                "Intensity at percentile %s is zero, the channel will be blank.",
                self.percentile,
            )
        return self

    def transform(self: PercentileNormalizer, raster: np.ndarray) -> np.ndarray:
        """Scale a raw channel by the fitted threshold and clip to 1.0."""
        out = self.scale(raster)
        if not self.threshold:
            out[...] = 0
            return out
        out /= self.dtype.type(self.threshold)
        np.minimum(out, 1.0, out=out)
        return out


def get_channel_normalizer(
    method_name: str,
    percentile: float = 99.999,
    dtype: type = np.float32,
) -> ChannelNormalizer:
    """Return a :class:`.ChannelNormalizer` with corresponding name.

    Args:
        method_name (str):
            Name of the normalization method, must be one of "fixed" or
            "percentile".
        percentile (float):
            Saturation percentile, only used by "percentile".
        dtype (type):
            Floating point type of the normalized output.

    Returns:
        ChannelNormalizer:
            An unfitted normalizer.

    Examples:
        >>> from virtualstain.tools.normalization import get_channel_normalizer
        >>> norm = get_channel_normalizer("fixed")
        >>> h = norm.fit_transform(nucleus)

    """
    if method_name.lower() == "fixed":
        return FixedRangeNormalizer(dtype=dtype)
    if method_name.lower() == "percentile":
        return PercentileNormalizer(percentile=percentile, dtype=dtype)
    raise MethodNotSupportedError


def normalize_channel(
    raster: np.ndarray,
    depth: int | None = None,
    method: str = "fixed",
    percentile: float = 99.999,
    dtype: type = np.float32,
) -> np.ndarray:
    """Normalize a raw channel to intensities in :math:`[0, 1]`.

    Args:
        raster (:class:`numpy.ndarray`):
            Raw single channel image, uint8 or uint16.
        depth (int):
            Declared sample depth, inferred from dtype if None.
        method (str):
            "fixed" (default) or "percentile".
        percentile (float):
            Saturation percentile for the "percentile" method.
        dtype (type):
            Floating point type of the output.

    Returns:
        :class:`numpy.ndarray`:
            Normalized channel with the same shape as `raster`.

    Examples:
        >>> import numpy as np
        >>> from virtualstain.tools.normalization import normalize_channel
        >>> normalize_channel(np.array([[0, 255]], dtype=np.uint8))
        array([[0., 1.]], dtype=float32)

    """
    return get_channel_normalizer(method, percentile, dtype).fit_transform(
        raster,
        depth,
    )
