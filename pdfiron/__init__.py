"""pdfiron - turn scanned PDFs into cleaned, searchable PDFs."""

__version__ = "0.3.0"
