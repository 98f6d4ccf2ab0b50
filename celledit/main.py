"""
HTTP API over stored editor state.

A client that reloads while a cell editor is open asks for the stored state
of its document and reopens the editor from it.
"""

from typing import Optional

import uvicorn
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from .config.logging_config import get_logger, setup_logging
from .config.settings import get_settings
from .editor.monitor import EditorStateStore

logger = get_logger(__name__)


def create_app(store: Optional[EditorStateStore] = None) -> FastAPI:
    settings = get_settings()
    store = store if store is not None else EditorStateStore()

    app = FastAPI(title=settings.APP_NAME, version=settings.APP_VERSION,
                  description="Editor state recovery for cell editors",
                  docs_url="/api/docs" if settings.ENABLE_DOCS else None,
                  redoc_url="/api/redoc" if settings.ENABLE_DOCS else None)
    app.add_middleware(CORSMiddleware, **settings.get_cors_config())
    app.state.editor_states = store

    @app.get("/health")
    async def health_check():
        return {"status": "healthy", "version": settings.APP_VERSION}

    @app.get("/api/editor-state/{doc_id}")
    async def get_editor_state(doc_id: str):
        state = store.load(doc_id)
        if state is None:
            raise HTTPException(status_code=404, detail=f"No open editor for {doc_id}")
        return state

    @app.delete("/api/editor-state/{doc_id}")
    async def clear_editor_state(doc_id: str):
        cleared = store.clear(doc_id)
        logger.info("Editor state cleared", doc_id=doc_id, existed=cleared)
        return {"cleared": cleared}

    return app


if __name__ == "__main__":
    setup_logging()
    settings = get_settings()
    uvicorn.run("celledit.main:create_app", factory=True, host=settings.HOST,
                port=settings.PORT, log_level="info", access_log=True)
