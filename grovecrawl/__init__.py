"""A top-down roguelike with procedural forest maps and a sparse-set entity registry."""

__version__ = "0.1.0"