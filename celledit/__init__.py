"""
Cell-edit lifecycle controller for spreadsheet-style grids.
"""

__version__ = "1.0.0"
