"""Beer-Lambert stain transmittance model.

Each simulated stain attenuates the red, green and blue components of
white transmitted light in proportion to its local concentration and a
per channel extinction coefficient. Absorbances of the two stains add up
before exponentiation:

.. math::
    A_c = k (h \\beta_{H,c} + e \\beta_{E,c}), \\quad T_c = e^{-A_c}

"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import SupportsFloat

import numpy as np

from virtualstain import rcParam
from virtualstain.utils.exceptions import InvalidConfigurationError
from virtualstain.utils.misc import load_stain_matrix

N_COLOURS = 3


def _as_coefficient_row(values: np.ndarray | list[float], name: str) -> np.ndarray:
    row = np.array(values, dtype=np.float64)
    if row.shape != (N_COLOURS,):
        msg = f"{name} coefficients must have shape (3,), got {row.shape}."
        raise InvalidConfigurationError(msg)
    if not np.all(np.isfinite(row)) or np.any(row < 0):
        msg = f"{name} coefficients must be finite and non-negative, got {row}."
        raise InvalidConfigurationError(msg)
    row.setflags(write=False)
    return row


@dataclass(frozen=True)
class StainCoefficients:
    """Extinction coefficients of the hematoxylin and eosin stains.

    Rows are immutable once constructed so that one instance can be
    shared between rendering threads.

    Args:
        hematoxylin (array-like):
            Red, green and blue coefficients of the nuclear stain.
        eosin (array-like):
            Red, green and blue coefficients of the counterstain.

    Examples:
        >>> from virtualstain.tools.stainmodel import StainCoefficients
        >>> coefficients = StainCoefficients(
        ...     hematoxylin=[0.86, 1.0, 0.30],
        ...     eosin=[0.05, 1.0, 0.54],
        ... )

    """

    hematoxylin: np.ndarray
    eosin: np.ndarray

    def __post_init__(self: StainCoefficients) -> None:
        """Validate and freeze the coefficient rows."""
        object.__setattr__(
            self,
            "hematoxylin",
            _as_coefficient_row(self.hematoxylin, "Hematoxylin"),
        )
        object.__setattr__(self, "eosin", _as_coefficient_row(self.eosin, "Eosin"))

    def __eq__(self: StainCoefficients, other: object) -> bool:
        """Compare coefficient values."""
        if not isinstance(other, StainCoefficients):
            return NotImplemented
        return bool(np.array_equal(self.matrix, other.matrix))

    def __hash__(self: StainCoefficients) -> int:
        """Hash coefficient values."""
        return hash(self.matrix.tobytes())

    @property
    def matrix(self: StainCoefficients) -> np.ndarray:
        """Return the 2x3 coefficient matrix, hematoxylin on the first row."""
        matrix = np.stack([self.hematoxylin, self.eosin])
        matrix.setflags(write=False)
        return matrix

    @classmethod
    def from_matrix(
        cls: type[StainCoefficients],
        stain_matrix: np.ndarray | str,
    ) -> StainCoefficients:
        """Create coefficients from a 2x3 matrix.

        Args:
            stain_matrix (:class:`numpy.ndarray` or str or pathlib.Path):
                A 2x3 array or a path to a .csv or .npy file holding
                one. Hematoxylin must be on the first row.

        Returns:
            StainCoefficients:
                Coefficients built from the matrix rows.

        """
        matrix = np.asarray(load_stain_matrix(stain_matrix), dtype=np.float64)
        if matrix.shape != (2, N_COLOURS):
            msg = f"Stain matrix must have shape (2, 3), got {matrix.shape}."
            raise InvalidConfigurationError(msg)
        return cls(hematoxylin=matrix[0], eosin=matrix[1])


def get_stain_coefficients(name: str | None = None) -> StainCoefficients:
    """Return a named coefficient set from the stain registry.

    Args:
        name (str):
            Registry key, see `virtualstain/data/stain_coefficients.yaml`.
            Defaults to `rcParam["default_stain"]`.

    Returns:
        StainCoefficients:
            The registered coefficients.

    """
    name = rcParam["default_stain"] if name is None else name
    registry = rcParam["stain_coefficients"]
    if name not in registry:
        msg = (
            f"Unknown stain coefficients '{name}', "
            f"available: {', '.join(sorted(registry))}."
        )
        raise InvalidConfigurationError(msg)
    return StainCoefficients(
        hematoxylin=registry[name]["hematoxylin"],
        eosin=registry[name]["eosin"],
    )


def validate_strength(k: SupportsFloat) -> float:
    """Check that the strength factor is a finite positive real.

    Args:
        k (float):
            Strength factor scaling the overall absorbance.

    Returns:
        float:
            `k` as a float.

    Raises:
        InvalidConfigurationError:
            If `k` is not a finite real greater than zero.

    """
    msg = f"Strength factor k must be a real number, got {k!r}."
    if isinstance(k, (bool, np.bool_, str, bytes)):
        raise InvalidConfigurationError(msg)
    try:
        k_value = float(k)
    except (TypeError, ValueError) as err:
        raise InvalidConfigurationError(msg) from err
    if not math.isfinite(k_value) or k_value <= 0:
        msg = f"Strength factor k must be finite and positive, got {k_value}."
        raise InvalidConfigurationError(msg)
    return k_value


def absorbance(
    h: np.ndarray | float,
    e: np.ndarray | float,
    k: float,
    coefficients: StainCoefficients,
) -> np.ndarray:
    """Combined absorbance of both stains for each colour channel.

    Inputs are not clamped, values slightly outside :math:`[0, 1]` are
    used as given.

    Args:
        h (:class:`numpy.ndarray` or float):
            Normalized nucleus intensities.
        e (:class:`numpy.ndarray` or float):
            Normalized eosin intensities, broadcastable with `h`.
        k (float):
            Strength factor.
        coefficients (StainCoefficients):
            Extinction coefficients.

    Returns:
        :class:`numpy.ndarray`:
            Absorbance with a trailing axis of length 3 (red, green,
            blue). The dtype follows the floating point type of `h`.

    """
    h = np.asarray(h)
    e = np.asarray(e)
    dtype = np.result_type(h, e, np.float32)
    h = h[..., np.newaxis]
    e = e[..., np.newaxis]
    beta_h = coefficients.hematoxylin.astype(dtype)
    beta_e = coefficients.eosin.astype(dtype)
    out = h * beta_h + e * beta_e
    out *= dtype.type(k)
    return out


def transmittance(
    h: np.ndarray | float,
    e: np.ndarray | float,
    k: float,
    coefficients: StainCoefficients,
) -> np.ndarray:
    """Fraction of white light transmitted through both stains.

    Values are in :math:`(0, 1]` for non-negative finite input, equal to
    1.0 where both intensities are zero, and non-increasing in `h`, `e`
    and `k`.

    Args:
        h (:class:`numpy.ndarray` or float):
            Normalized nucleus intensities.
        e (:class:`numpy.ndarray` or float):
            Normalized eosin intensities, broadcastable with `h`.
        k (float):
            Strength factor.
        coefficients (StainCoefficients):
            Extinction coefficients.

    Returns:
        :class:`numpy.ndarray`:
            Transmittance with a trailing axis of length 3 (red, green,
            blue).

    Examples:
        >>> from virtualstain.tools.stainmodel import (
        ...     get_stain_coefficients, transmittance)
        >>> t = transmittance(1.0, 0.0, 2.5, get_stain_coefficients())
        >>> t.round(4)
        array([0.1165, 0.0821, 0.4724])

    """
    out = absorbance(h, e, k, coefficients)
    np.negative(out, out=out)
    np.exp(out, out=out)
    return out
