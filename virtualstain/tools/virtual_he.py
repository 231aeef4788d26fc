"""Render virtual H&E images from fluorescence channels."""

from __future__ import annotations

import numpy as np
from joblib import Parallel, delayed

from virtualstain import DuplicateFilter, logger, rcParam
from virtualstain.tools.normalization import (
    ChannelNormalizer,
    check_raster,
    get_channel_normalizer,
)
from virtualstain.tools.stainmodel import (
    StainCoefficients,
    get_stain_coefficients,
    transmittance,
    validate_strength,
)
from virtualstain.utils.exceptions import (
    DimensionMismatchError,
    InvalidConfigurationError,
)
from virtualstain.utils.transforms import transmittance2rgb


class VirtualHERenderer:
    """Virtual hematoxylin and eosin renderer.

    Converts a nucleus channel and an eosin (autofluorescence or
    counterstain) channel into a bright-field looking RGB image. Both
    channels are normalized to :math:`[0, 1]`, used as stain
    concentrations in a Beer-Lambert absorbance model and the resulting
    transmittance is quantized to uint8.

    The renderer keeps no state between calls, rendering the same input
    twice gives byte identical output.

    Args:
        k (float):
            Strength factor scaling the overall absorbance. Higher values
            give a darker, more saturated stain. Must be positive.
        coefficients (StainCoefficients or str):
            Extinction coefficients or the name of a registered set.
            Defaults to `rcParam["default_stain"]`.
        method (str):
            Channel normalization method, "fixed" (default) or
            "percentile".
        percentile (float):
            Saturation percentile used by the "percentile" method.
        chunk_rows (int):
            If given, normalization, the stain model and quantization are
            fused and run on bands of `chunk_rows` rows, so that only the
            output and one band of intermediate buffers are held in
            memory. None (default) processes the whole image at once.
        n_workers (int):
            Number of threads used to process bands. Only used with
            `chunk_rows`.
        dtype (type):
            Floating point type of intermediate buffers.

    Examples:
        >>> from virtualstain.tools.virtual_he import VirtualHERenderer
        >>> renderer = VirtualHERenderer(k=2.5)
        >>> rgb = renderer.render(nucleus, eosin)

    """

    def __init__(
        self: VirtualHERenderer,
        k: float = rcParam["default_strength"],
        coefficients: StainCoefficients | str | None = None,
        method: str = "fixed",
        percentile: float = 99.999,
        chunk_rows: int | None = None,
        n_workers: int = 1,
        dtype: type = np.float32,
    ) -> None:
        """Initialize :class:`VirtualHERenderer`."""
        self.k = validate_strength(k)
        if coefficients is None or isinstance(coefficients, str):
            coefficients = get_stain_coefficients(coefficients)
        self.coefficients = coefficients
        if chunk_rows is not None and chunk_rows < 1:
            msg = f"`chunk_rows` must be a positive integer, got {chunk_rows}."
            raise InvalidConfigurationError(msg)
        if n_workers < 1:
            msg = f"`n_workers` must be a positive integer, got {n_workers}."
            raise InvalidConfigurationError(msg)
        self.method = method
        self.percentile = percentile
        self.chunk_rows = chunk_rows
        self.n_workers = n_workers
        self.dtype = dtype
        # fail early on an unsupported method or percentile
        self._normalizer()

    def _normalizer(self: VirtualHERenderer) -> ChannelNormalizer:
        return get_channel_normalizer(self.method, self.percentile, self.dtype)

    def render(
        self: VirtualHERenderer,
        nucleus: np.ndarray,
        eosin: np.ndarray,
        nucleus_depth: int | None = None,
        eosin_depth: int | None = None,
    ) -> np.ndarray:
        """Render a virtual H&E image.

        Args:
            nucleus (:class:`numpy.ndarray`):
                Raw nucleus channel, `HxW` uint8 or uint16.
            eosin (:class:`numpy.ndarray`):
                Raw eosin channel with the same shape as `nucleus`.
            nucleus_depth (int):
                Sample depth of `nucleus`, inferred from dtype if None.
            eosin_depth (int):
                Sample depth of `eosin`, inferred from dtype if None.

        Returns:
            :class:`numpy.ndarray`:
                RGB image of dtype uint8, `HxWx3`.

        Raises:
            DimensionMismatchError:
                If the two channels differ in shape.
            InvalidInputError:
                If a channel is empty or not a 8/16-bit single channel
                image.

        """
        nucleus_shape = np.shape(nucleus)
        eosin_shape = np.shape(eosin)
        if nucleus_shape != eosin_shape:
            msg = (
                f"Nucleus image shape {nucleus_shape} does not match "
                f"eosin image shape {eosin_shape}."
            )
            raise DimensionMismatchError(msg)

        nucleus_depth = check_raster(nucleus, nucleus_depth)
        eosin_depth = check_raster(eosin, eosin_depth)

        logger.debug("Normalizing channels (%s).", self.method)
        # Report a blank channel warning once when both channels are blank.
        duplicate_filter = DuplicateFilter()
        logger.addFilter(duplicate_filter)
        try:
            nucleus_norm = self._normalizer().fit(nucleus, nucleus_depth)
            eosin_norm = self._normalizer().fit(eosin, eosin_depth)
        finally:
            logger.removeFilter(duplicate_filter)

        if self.chunk_rows is None:
            return self._render_full(nucleus, eosin, nucleus_norm, eosin_norm)
        return self._render_bands(nucleus, eosin, nucleus_norm, eosin_norm)

    def _render_full(
        self: VirtualHERenderer,
        nucleus: np.ndarray,
        eosin: np.ndarray,
        nucleus_norm: ChannelNormalizer,
        eosin_norm: ChannelNormalizer,
    ) -> np.ndarray:
        h = nucleus_norm.transform(nucleus)
        e = eosin_norm.transform(eosin)
        logger.debug("Computing transmittance for %d pixels.", h.size)
        trans = transmittance(h, e, self.k, self.coefficients)
        del h, e
        return transmittance2rgb(trans)

    def _render_bands(
        self: VirtualHERenderer,
        nucleus: np.ndarray,
        eosin: np.ndarray,
        nucleus_norm: ChannelNormalizer,
        eosin_norm: ChannelNormalizer,
    ) -> np.ndarray:
        height, width = nucleus.shape
        rgb = np.empty((height, width, 3), dtype=np.uint8)
        starts = range(0, height, self.chunk_rows)
        logger.debug(
            "Rendering %d bands of %d rows with %d worker(s).",
            len(starts),
            self.chunk_rows,
            self.n_workers,
        )

        def render_band(start: int) -> None:
            stop = min(start + self.chunk_rows, height)
            h = nucleus_norm.transform(nucleus[start:stop])
            e = eosin_norm.transform(eosin[start:stop])
            trans = transmittance(h, e, self.k, self.coefficients)
            transmittance2rgb(trans, out=rgb[start:stop])

        if self.n_workers == 1:
            for start in starts:
                render_band(start)
        else:
            Parallel(n_jobs=self.n_workers, prefer="threads")(
                delayed(render_band)(start) for start in starts
            )
        return rgb


def render(
    nucleus: np.ndarray,
    eosin: np.ndarray,
    k: float = rcParam["default_strength"],
    coefficients: StainCoefficients | str | None = None,
    *,
    nucleus_depth: int | None = None,
    eosin_depth: int | None = None,
    method: str = "fixed",
    percentile: float = 99.999,
    chunk_rows: int | None = None,
    n_workers: int = 1,
) -> np.ndarray:
    """Render a virtual H&E image from a nucleus and an eosin channel.

    Args:
        nucleus (:class:`numpy.ndarray`):
            Raw nucleus channel, `HxW` uint8 or uint16.
        eosin (:class:`numpy.ndarray`):
            Raw eosin channel with the same shape as `nucleus`.
        k (float):
            Strength factor, default 2.5.
        coefficients (StainCoefficients or str):
            Extinction coefficients or the name of a registered set.
        nucleus_depth (int):
            Sample depth of `nucleus`, inferred from dtype if None.
        eosin_depth (int):
            Sample depth of `eosin`, inferred from dtype if None.
        method (str):
            Channel normalization method, "fixed" or "percentile".
        percentile (float):
            Saturation percentile used by the "percentile" method.
        chunk_rows (int):
            Process the image in fused bands of this many rows.
        n_workers (int):
            Number of threads used to process bands.

    Returns:
        :class:`numpy.ndarray`:
            RGB image of dtype uint8, `HxWx3`.

    Examples:
        >>> import numpy as np
        >>> from virtualstain.tools.virtual_he import render
        >>> nucleus = np.array([[65535]], dtype=np.uint16)
        >>> eosin = np.array([[0]], dtype=np.uint16)
        >>> render(nucleus, eosin, k=2.5)
        array([[[ 30,  21, 120]]], dtype=uint8)

    """
    renderer = VirtualHERenderer(
        k=k,
        coefficients=coefficients,
        method=method,
        percentile=percentile,
        chunk_rows=chunk_rows,
        n_workers=n_workers,
    )
    return renderer.render(nucleus, eosin, nucleus_depth, eosin_depth)
