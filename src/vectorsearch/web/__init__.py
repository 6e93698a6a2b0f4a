"""HTTP surface for the tool operations."""
