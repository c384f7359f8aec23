"""Background task management for periodic maintenance jobs."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Optional

import structlog

logger = structlog.get_logger(__name__)


class TaskStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    IDLE = "idle"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass
class TaskInfo:
    """Bookkeeping for one named background job."""

    name: str
    interval_seconds: float
    status: TaskStatus = TaskStatus.PENDING
    runs: int = 0
    failures: int = 0
    last_started_at: Optional[datetime] = None
    last_completed_at: Optional[datetime] = None
    last_error: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.utcnow)

    def mark_started(self) -> None:
        self.status = TaskStatus.RUNNING
        self.last_started_at = datetime.utcnow()

    def mark_completed(self) -> None:
        self.status = TaskStatus.IDLE
        self.runs += 1
        self.last_completed_at = datetime.utcnow()
        self.last_error = None

    def mark_failed(self, error: str) -> None:
        self.status = TaskStatus.FAILED
        self.runs += 1
        self.failures += 1
        self.last_completed_at = datetime.utcnow()
        self.last_error = error

    def mark_cancelled(self) -> None:
        self.status = TaskStatus.CANCELLED


class TaskManager:
    """Runs named periodic jobs and cancels them on shutdown."""

    def __init__(self):
        self._tasks: Dict[str, asyncio.Task] = {}
        self._task_info: Dict[str, TaskInfo] = {}
        self._shutdown = False

    def schedule_periodic(
        self,
        name: str,
        job: Callable[[], Awaitable[Any]],
        interval_seconds: float,
        *,
        run_immediately: bool = False,
    ) -> asyncio.Task:
        """
        Run ``job`` every ``interval_seconds`` until shutdown.

        A failing run is logged and the loop continues with the next interval.
        Scheduling a name that is already running replaces the old job.
        """
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")

        existing = self._tasks.get(name)
        if existing is not None and not existing.done():
            existing.cancel()

        info = TaskInfo(name=name, interval_seconds=interval_seconds)

        async def loop() -> None:
            if not run_immediately:
                await asyncio.sleep(interval_seconds)
            while not self._shutdown:
                info.mark_started()
                try:
                    await job()
                except asyncio.CancelledError:
                    info.mark_cancelled()
                    raise
                except Exception as e:
                    info.mark_failed(str(e))
                    logger.error("Background job failed", task=name, error=str(e))
                else:
                    info.mark_completed()
                    logger.debug("Background job completed", task=name, runs=info.runs)
                await asyncio.sleep(interval_seconds)

        task = asyncio.create_task(loop(), name=name)
        self._tasks[name] = task
        self._task_info[name] = info
        logger.info("Scheduled background job", task=name, interval_seconds=interval_seconds)
        return task

    def get_task_info(self, name: str) -> Optional[TaskInfo]:
        return self._task_info.get(name)

    def get_active_task_count(self) -> int:
        return sum(1 for task in self._tasks.values() if not task.done())

    def get_task_stats(self) -> Dict[str, Any]:
        return {
            "total_tasks": len(self._task_info),
            "active_tasks": self.get_active_task_count(),
            "tasks": {
                name: {
                    "status": info.status.value,
                    "runs": info.runs,
                    "failures": info.failures,
                    "last_error": info.last_error,
                }
                for name, info in self._task_info.items()
            },
        }

    async def check_health(self) -> Dict[str, Any]:
        return {
            "status": "healthy" if not self._shutdown else "shutting_down",
            "active_tasks": self.get_active_task_count(),
            "total_tasks": len(self._task_info),
        }

    async def shutdown(self) -> None:
        """Cancel every job and wait for the cancellations to land."""
        self._shutdown = True
        active_tasks = [task for task in self._tasks.values() if not task.done()]
        for task in active_tasks:
            task.cancel()
        if active_tasks:
            await asyncio.gather(*active_tasks, return_exceptions=True)
        for info in self._task_info.values():
            if info.status in (TaskStatus.PENDING, TaskStatus.RUNNING, TaskStatus.IDLE):
                info.mark_cancelled()
        logger.info("Task manager shutdown completed", cancelled_tasks=len(active_tasks))


__all__ = ["TaskManager", "TaskInfo", "TaskStatus"]
