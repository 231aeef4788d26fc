"""Custom Errors and Exceptions for virtualstain."""

from __future__ import annotations


class VirtualStainError(Exception):
    """Base class for errors raised while rendering a virtual stain.

    Args:
        message (str) : Display message for the error.

    """

    def __init__(
        self: VirtualStainError,
        message: str = "Virtual stain rendering failed",
    ) -> None:
        """Initialize :class:`VirtualStainError`."""
        super().__init__(message)


class InvalidInputError(VirtualStainError, ValueError):
    """Raise when a raster is empty or malformed.

    Args:
        message (str) : Display message for the error.

    """

    def __init__(
        self: InvalidInputError,
        message: str = "Input raster is empty or malformed",
    ) -> None:
        """Initialize :class:`InvalidInputError`."""
        super().__init__(message)


class DimensionMismatchError(VirtualStainError, ValueError):
    """Raise when the nucleus and eosin rasters differ in size.

    Args:
        message (str) : Display message for the error.

    """

    def __init__(
        self: DimensionMismatchError,
        message: str = "Nucleus and eosin images must have the same dimensions",
    ) -> None:
        """Initialize :class:`DimensionMismatchError`."""
        super().__init__(message)


class InvalidConfigurationError(VirtualStainError, ValueError):
    """Raise when the strength factor or stain coefficients are invalid.

    Args:
        message (str) : Display message for the error.

    """

    def __init__(
        self: InvalidConfigurationError,
        message: str = "Invalid rendering configuration",
    ) -> None:
        """Initialize :class:`InvalidConfigurationError`."""
        super().__init__(message)


class ImageReadError(VirtualStainError, OSError):
    """Raise when an input channel image cannot be read.

    Args:
        message (str) : Display message for the error.

    """

    def __init__(
        self: ImageReadError,
        message: str = "Could not read image",
    ) -> None:
        """Initialize :class:`ImageReadError`."""
        super().__init__(message)


class ImageWriteError(VirtualStainError, OSError):
    """Raise when the output image cannot be written.

    Args:
        message (str) : Display message for the error.

    """

    def __init__(
        self: ImageWriteError,
        message: str = "Could not write image",
    ) -> None:
        """Initialize :class:`ImageWriteError`."""
        super().__init__(message)


class FileNotSupportedError(VirtualStainError, ValueError):
    """Raise No supported file found error.

    Args:
        message (str) : Display message for the error.

    """

    def __init__(
        self: FileNotSupportedError,
        message: str = "File format is not supported",
    ) -> None:
        """Initialize :class:`FileNotSupportedError`."""
        super().__init__(message)


class MethodNotSupportedError(VirtualStainError, ValueError):
    """Raise when a normalization method is not supported.

    Args:
        message (str) : Display message for the error.

    """

    def __init__(
        self: MethodNotSupportedError,
        message: str = "Method is not supported",
    ) -> None:
        """Initialize :class:`MethodNotSupportedError`."""
        super().__init__(message)
