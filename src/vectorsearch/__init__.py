"""Local semantic search over text and PDF files."""

__version__ = "0.1.0"
