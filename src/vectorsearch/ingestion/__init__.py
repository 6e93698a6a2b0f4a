"""Text extraction from source files."""
