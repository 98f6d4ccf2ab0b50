"""
Exceptions raised by the cell editor.
"""

from .app_exceptions import (
    CellEditError,
    PersistenceError,
    FormulaErrorLookupError,
    CommandError,
)

__all__ = [
    "CellEditError",
    "PersistenceError",
    "FormulaErrorLookupError",
    "CommandError",
]
