"""This package contains the tools to render virtual stains."""
from virtualstain.tools import (
    normalization,
    stainmodel,
    virtual_he,
)
