# Auto-register passes on package import (e.g., when importing any submodule)
from . import passes  # noqa: F401
from .core import convert_pages, convert_pdf, normalize
from .errors import ExtractionError

__version__ = "1.0.0"

__all__ = [
    "ExtractionError",
    "convert_pages",
    "convert_pdf",
    "normalize",
    "__version__",
]
