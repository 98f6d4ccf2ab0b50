"""
Per-document collaborators shared by all editors of a document.
"""

from typing import Optional

from ..config.settings import Settings, get_settings
from ..document.doc_data import DocData
from .commands import CommandRouter
from .host import AppHost
from .monitor import EditorMonitor, EditorStateStore


class DocumentContext:
    """The open document as seen by an editor."""

    def __init__(self, doc_data: DocData, *, doc_id: str = "default",
                 router: Optional[CommandRouter] = None,
                 host: Optional[AppHost] = None,
                 store: Optional[EditorStateStore] = None,
                 settings: Optional[Settings] = None) -> None:
        self.doc_id = doc_id
        self.doc_data = doc_data
        self.router = router or CommandRouter()
        self.host = host or AppHost()
        self.editor_monitor = EditorMonitor(doc_id, store)
        self.settings = settings or get_settings()
