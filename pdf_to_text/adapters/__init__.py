"""IO adapters around the normalization core."""

from . import io_pdf

__all__ = ["io_pdf"]
