"""
Cell editing: edit sessions, editor widgets and the collaborators they use.
"""

from .cleanup import CleanupPolicy, EditableCleanup, ReadonlyCleanup
from .commands import CommandGroup, CommandRouter, EditCommand
from .context import DocumentContext
from .edit_commands import EditableCommands, ReadonlyCommands
from .fast_accept import maybe_accept_without_editor, set_and_save
from .formula_flow import FormulaEditSession, open_formula_editor
from .host import AppHost, FormulaConversionOffer, NavigationGuard
from .monitor import EditorMonitor, EditorStateStore
from .save_coordinator import SaveCoordinator
from .session import EditSession
from .widgets import (
    END_OF_TEXT, NOT_HANDLED, CellAnchor, CheckBoxEditor, EditorOptions, EditorWidget,
    FormulaEditor, NumericEditor, TextEditor,
)

__all__ = [
    "AppHost",
    "CellAnchor",
    "CheckBoxEditor",
    "CleanupPolicy",
    "CommandGroup",
    "CommandRouter",
    "DocumentContext",
    "EditCommand",
    "EditSession",
    "EditableCleanup",
    "EditableCommands",
    "EditorMonitor",
    "EditorOptions",
    "EditorStateStore",
    "EditorWidget",
    "END_OF_TEXT",
    "FormulaConversionOffer",
    "FormulaEditSession",
    "FormulaEditor",
    "NavigationGuard",
    "NOT_HANDLED",
    "NumericEditor",
    "ReadonlyCleanup",
    "ReadonlyCommands",
    "SaveCoordinator",
    "TextEditor",
    "maybe_accept_without_editor",
    "open_formula_editor",
    "set_and_save",
]
