"""
Exception classes for the cell editor.
"""


class CellEditError(Exception):
    """Base class for all cell editor exceptions."""
    pass


class PersistenceError(CellEditError):
    """A write to the document failed (unknown column or row, rejected value)."""
    pass


class FormulaErrorLookupError(CellEditError):
    """Detailed error information for a formula cell could not be fetched."""
    pass


class CommandError(CellEditError):
    """A command table was misused (e.g. a handler for an unknown command)."""
    pass
