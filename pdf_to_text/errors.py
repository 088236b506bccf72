class ExtractionError(RuntimeError):
    """Raised when text cannot be extracted from a PDF.

    Covers unreadable or corrupt data, encrypted documents and documents
    without pages. The normalization pipeline never raises or catches it.
    """
