"""
Editor monitor: remembers the state of an open editor so it can be reopened
after the page reloads.
"""

from typing import TYPE_CHECKING, Dict, Optional

from ..config.logging_config import LoggerMixin
from ..models.lifecycle_model import LifecycleEvent

if TYPE_CHECKING:
    from .session import EditSession


class EditorStateStore:
    """Last known editor state per document, in serialized form."""

    def __init__(self) -> None:
        self._states: Dict[str, dict] = {}

    def save(self, doc_id: str, event: LifecycleEvent) -> None:
        self._states[doc_id] = event.to_dict()

    def load(self, doc_id: str) -> Optional[dict]:
        return self._states.get(doc_id)

    def clear(self, doc_id: str) -> bool:
        return self._states.pop(doc_id, None) is not None

    def __contains__(self, doc_id: str) -> bool:
        return doc_id in self._states


class EditorMonitor(LoggerMixin):
    """Tracks the editor open in one document.

    Live changes are stored; a save or cancel clears what was stored, since
    there is nothing left to restore.
    """

    def __init__(self, doc_id: str, store: Optional[EditorStateStore] = None) -> None:
        self.doc_id = doc_id
        self.store = store if store is not None else EditorStateStore()

    def monitor_editor(self, session: "EditSession") -> None:
        session.auto_dispose(session.change_emitter.add_listener(self._on_change))
        session.auto_dispose(session.save_emitter.add_listener(self._on_close))
        session.auto_dispose(session.cancel_emitter.add_listener(self._on_close))

    def restore_state(self) -> Optional[LifecycleEvent]:
        """The stored state of an editor that was open when the page went away."""
        data = self.store.load(self.doc_id)
        if data is None:
            return None
        return LifecycleEvent.from_dict(data)

    def _on_change(self, event: LifecycleEvent) -> None:
        self.store.save(self.doc_id, event)

    def _on_close(self, event: LifecycleEvent) -> None:
        if self.store.clear(self.doc_id):
            self.logger.debug("Cleared editor state", doc_id=self.doc_id,
                              position=event.position.to_dict())
