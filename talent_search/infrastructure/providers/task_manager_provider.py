"""Provider for the background task manager."""

from __future__ import annotations

import asyncio
from typing import Optional

from talent_search.infrastructure.task_manager import TaskManager

_task_manager: Optional[TaskManager] = None
_lock = asyncio.Lock()


async def get_task_manager() -> TaskManager:
    """Return the singleton task manager."""
    global _task_manager

    if _task_manager is not None:
        return _task_manager

    async with _lock:
        if _task_manager is None:
            _task_manager = TaskManager()
        return _task_manager


async def reset_task_manager() -> None:
    """Shut down and drop the cached task manager."""
    global _task_manager
    async with _lock:
        if _task_manager is not None:
            await _task_manager.shutdown()
            _task_manager = None


__all__ = ["get_task_manager", "reset_task_manager"]
