"""
Single-flight save.
"""

import asyncio
from typing import Awaitable, Callable, Generic, Optional, TypeVar

from ..config.logging_config import OperationTimer, get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class SaveCoordinator(Generic[T]):
    """Runs an async save operation at most once.

    The first call starts the operation and caches its future; every later
    call, before or after it settles, gets that same future. The cache is
    never reset, since an edit session saves at most once.
    """

    def __init__(self, operation: Callable[[], Awaitable[T]], name: str = "save") -> None:
        self._operation = operation
        self._name = name
        self._future: Optional["asyncio.Future[T]"] = None

    def __call__(self) -> "asyncio.Future[T]":
        if self._future is None:
            logger.debug("Starting operation", operation=self._name)
            self._future = asyncio.ensure_future(self._run())
        else:
            logger.debug("Joining operation already started", operation=self._name)
        return self._future

    async def _run(self) -> T:
        with OperationTimer(self._name, logger):
            return await self._operation()

    @property
    def started(self) -> bool:
        return self._future is not None

    @property
    def done(self) -> bool:
        return self._future is not None and self._future.done()
