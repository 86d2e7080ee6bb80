"""Toolkit for grepping, joining, renaming, counting and pretty-printing CSV/TSV files."""

__version__ = "0.1.0"