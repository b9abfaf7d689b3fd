"""gridwall — procedural wall placement on a grid, budgeted per host frame."""

__version__ = "0.1.0"
