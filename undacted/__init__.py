"""
Undacted - pixel-buffer analysis for redaction blocks in rendered documents.

This package provides scanline detection of dark redaction blocks, lazy
redaction (non-uniform fill) classification, hidden-length estimation from a
reference word, and annotated report compositing.
"""

__version__ = "0.1.0"
