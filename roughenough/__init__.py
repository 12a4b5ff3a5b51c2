"""Roughtime Merkle trees, identity seeds, an in-memory seed backend and seed envelope encryption."""

__version__ = "2.0.0"
__all__ = ["backends", "cli", "cloud", "envelope", "merkle", "seed", "storage"]