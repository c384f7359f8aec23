"""Provider utilities for AI-related services."""

from __future__ import annotations

import asyncio
from typing import Optional

import structlog
from openai import AsyncOpenAI

from talent_search.core.config import get_settings
from talent_search.infrastructure.ai.analysis_generator import OpenAIAnalysisGenerator
from talent_search.infrastructure.ai.cache_manager import AnalysisCacheManager
from talent_search.infrastructure.ai.embedding_service import EmbeddingService
from talent_search.infrastructure.ai.prompt_manager import PromptManager
from talent_search.infrastructure.providers.repository_provider import get_analysis_repository

logger = structlog.get_logger(__name__)

_openai_client: Optional[AsyncOpenAI] = None
_embedding_service: Optional[EmbeddingService] = None
_analysis_generator: Optional[OpenAIAnalysisGenerator] = None
_prompt_manager: Optional[PromptManager] = None
_analysis_cache: Optional[AnalysisCacheManager] = None

_client_lock = asyncio.Lock()
_embedding_lock = asyncio.Lock()
_generator_lock = asyncio.Lock()
_prompt_lock = asyncio.Lock()
_cache_lock = asyncio.Lock()


async def get_openai_client() -> Optional[AsyncOpenAI]:
    """Return the shared AsyncOpenAI client, or None when no API key is configured."""
    global _openai_client

    if _openai_client is not None:
        return _openai_client

    async with _client_lock:
        if _openai_client is not None:
            return _openai_client

        settings = get_settings()
        if not settings.is_openai_configured():
            logger.warning("OpenAI is not configured, semantic features disabled")
            return None

        config = settings.get_openai_config()
        _openai_client = AsyncOpenAI(api_key=config["api_key"], base_url=config["base_url"])
        return _openai_client


async def get_embedding_service() -> Optional[EmbeddingService]:
    """Return singleton embedding service, or None when OpenAI is not configured."""
    global _embedding_service

    if _embedding_service is not None:
        return _embedding_service

    async with _embedding_lock:
        if _embedding_service is not None:
            return _embedding_service

        client = await get_openai_client()
        if client is None:
            return None
        _embedding_service = EmbeddingService(client=client)
        return _embedding_service


async def get_prompt_manager() -> PromptManager:
    """Return prompt manager instance."""
    global _prompt_manager

    if _prompt_manager is not None:
        return _prompt_manager

    async with _prompt_lock:
        if _prompt_manager is None:
            _prompt_manager = PromptManager()
        return _prompt_manager


async def get_analysis_generator() -> Optional[OpenAIAnalysisGenerator]:
    """Return singleton analysis generator, or None when OpenAI is not configured."""
    global _analysis_generator

    if _analysis_generator is not None:
        return _analysis_generator

    async with _generator_lock:
        if _analysis_generator is not None:
            return _analysis_generator

        client = await get_openai_client()
        if client is None:
            return None
        prompt_manager = await get_prompt_manager()
        _analysis_generator = OpenAIAnalysisGenerator(client=client, prompt_manager=prompt_manager)
        return _analysis_generator


async def get_analysis_cache() -> AnalysisCacheManager:
    """Return the process-wide analysis cache backed by the player_analyses table."""
    global _analysis_cache

    if _analysis_cache is not None:
        return _analysis_cache

    async with _cache_lock:
        if _analysis_cache is None:
            repository = await get_analysis_repository()
            _analysis_cache = AnalysisCacheManager(repository=repository)
        return _analysis_cache


async def reset_ai_services() -> None:
    """Reset cached AI service instances (for testing)."""
    global _openai_client, _embedding_service, _analysis_generator, _prompt_manager, _analysis_cache

    async with _client_lock:
        _openai_client = None
    async with _embedding_lock:
        _embedding_service = None
    async with _generator_lock:
        _analysis_generator = None
    async with _prompt_lock:
        _prompt_manager = None
    async with _cache_lock:
        _analysis_cache = None


__all__ = [
    "get_openai_client",
    "get_embedding_service",
    "get_prompt_manager",
    "get_analysis_generator",
    "get_analysis_cache",
    "reset_ai_services",
]
