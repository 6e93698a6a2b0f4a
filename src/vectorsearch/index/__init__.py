"""Chunk catalog, ANN backends and the index coordinator."""
