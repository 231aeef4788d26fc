"""Define image transforms between transmittance and RGB."""

from __future__ import annotations

import numpy as np


def transmittance2rgb(
    transmittance: np.ndarray,
    out: np.ndarray | None = None,
) -> np.ndarray:
    r"""Quantize transmittance fractions to 8-bit RGB values.

    .. math::
        RGB = \lfloor 255 \cdot clip(T, 0, 1) + 0.5 \rfloor

    Values outside :math:`[0, 1]` saturate, they are not an error.
    Rounding is half away from zero so that results are reproducible
    across platforms.

    Args:
        transmittance (:class:`numpy.ndarray`):
            Transmittance fractions, typically of shape `HxWx3`.
        out (:class:`numpy.ndarray`):
            Optional uint8 array of the same shape to write into.

    Returns:
        :class:`numpy.ndarray`:
            Array of dtype uint8 with the same shape as the input.

    Examples:
        >>> from virtualstain.utils import transforms
        >>> import numpy as np
        >>> transforms.transmittance2rgb(np.array([0.1165, 0.0821, 0.4724]))
        array([ 30,  21, 120], dtype=uint8)

    """
    scaled = np.floor(np.clip(transmittance, 0.0, 1.0) * 255.0 + 0.5)
    if out is None:
        return scaled.astype(np.uint8)
    out[...] = scaled
    return out
