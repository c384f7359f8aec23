"""Fixtures for HTTP tests."""

from collections.abc import AsyncIterator

import pytest

from talent_search.infrastructure.providers import (
    reset_ai_services,
    reset_repositories,
    reset_search_services,
    reset_task_manager,
)


@pytest.fixture(autouse=True)
async def reset_provider_state() -> AsyncIterator[None]:
    """Ensure each test starts with clean provider singletons."""
    await reset_search_services()
    await reset_ai_services()
    await reset_repositories()
    yield
    await reset_task_manager()
    await reset_search_services()
    await reset_ai_services()
    await reset_repositories()
