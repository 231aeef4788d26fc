"""Utils package for virtualstain utilities."""

from virtualstain.utils import (
    exceptions,
    misc,
    transforms,
)

from .misc import (
    imread_channel,
    imwrite,
    load_stain_matrix,
)

__all__ = [
    "imread_channel",
    "imwrite",
    "load_stain_matrix",
]
