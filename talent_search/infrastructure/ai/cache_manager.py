"""
Analysis Cache Manager

Two-tier cache for generated player analyses:
- Memory tier for ultra-fast repeated views of the same card
- Persistent tier (player_analyses table) shared across processes
- Staleness by age and by player source hash
- Single-flight generation per key
"""

import asyncio
from collections import OrderedDict
from datetime import datetime, timedelta
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple

import structlog

from talent_search.core.config import get_settings
from talent_search.domain.entities.analysis import PlayerAnalysis, StoredAnalysis
from talent_search.domain.exceptions import PersistenceError
from talent_search.domain.interfaces import IAnalysisCache
from talent_search.domain.repositories.analysis_repository import IPlayerAnalysisRepository

logger = structlog.get_logger(__name__)


class CacheEntry:
    """Represents a cached analysis with the metadata needed to judge staleness."""

    def __init__(
        self,
        key: str,
        player_id: str,
        context_hash: str,
        source_hash: str,
        value: PlayerAnalysis,
        ttl: Optional[int] = None,
    ):
        self.key = key
        self.player_id = player_id
        self.context_hash = context_hash
        self.source_hash = source_hash
        self.value = value
        self.ttl = ttl
        self.access_count = 1
        self.last_accessed = value.generated_at

    def is_expired(self, now: datetime) -> bool:
        if self.ttl is None:
            return False
        return now >= self.value.generated_at + timedelta(seconds=self.ttl)

    def is_fresh_for(self, source_hash: str, now: datetime) -> bool:
        return self.source_hash == source_hash and not self.is_expired(now)

    def update_access(self, now: datetime) -> None:
        self.access_count += 1
        self.last_accessed = now


class AnalysisCacheManager(IAnalysisCache):
    """
    Keyed analysis cache with single-flight generation.

    All work for a missing key (persistent lookup, generation, storage) runs in
    one task per key. Concurrent callers await that task through
    ``asyncio.shield`` so a cancelled caller never cancels the generation that
    other callers, or the next request, depend on. Failures are never cached.
    """

    def __init__(
        self,
        repository: Optional[IPlayerAnalysisRepository] = None,
        ttl_seconds: Optional[int] = None,
        max_memory_entries: Optional[int] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.settings = get_settings()
        self.repository = repository
        self.ttl_seconds = ttl_seconds if ttl_seconds is not None else self.settings.ANALYSIS_CACHE_TTL_SECONDS
        self._max_memory_entries = max_memory_entries or self.settings.ANALYSIS_MEMORY_CACHE_SIZE
        self._now = clock or datetime.utcnow

        self._memory_cache: "OrderedDict[str, CacheEntry]" = OrderedDict()
        # (cache key, source hash) -> generation task
        self._inflight: Dict[Tuple[str, str], asyncio.Task] = {}

        self._metrics = {
            "memory_hits": 0,
            "persistent_hits": 0,
            "misses": 0,
            "generations": 0,
            "generation_failures": 0,
            "single_flight_joins": 0,
            "sets": 0,
            "invalidations": 0,
        }

    async def get_or_generate(
        self,
        key: str,
        player_id: str,
        context_hash: str,
        source_hash: str,
        generate: Callable[[], Awaitable[PlayerAnalysis]],
    ) -> Tuple[PlayerAnalysis, bool]:
        entry = self._get_from_memory(key, source_hash)
        if entry is not None:
            self._metrics["memory_hits"] += 1
            logger.debug("Analysis memory cache hit", key=key)
            return entry.value.as_cached(), True

        flight_key = (key, source_hash)
        task = self._inflight.get(flight_key)
        if task is None:
            task = asyncio.create_task(
                self._load_or_generate(key, player_id, context_hash, source_hash, generate)
            )
            self._inflight[flight_key] = task
            task.add_done_callback(lambda t, k=flight_key: self._on_task_done(k, t))
        else:
            self._metrics["single_flight_joins"] += 1
            logger.debug("Joining in-flight analysis generation", key=key)

        return await asyncio.shield(task)

    def _on_task_done(self, flight_key: Tuple[str, str], task: asyncio.Task) -> None:
        if self._inflight.get(flight_key) is task:
            del self._inflight[flight_key]
        # Retrieve the exception so an unawaited failure is not reported twice
        if not task.cancelled():
            task.exception()

    async def _load_or_generate(
        self,
        key: str,
        player_id: str,
        context_hash: str,
        source_hash: str,
        generate: Callable[[], Awaitable[PlayerAnalysis]],
    ) -> Tuple[PlayerAnalysis, bool]:
        stored = await self._get_from_repository(player_id, context_hash)
        if stored is not None:
            entry = CacheEntry(key, player_id, context_hash, stored.source_hash, stored.analysis, self.ttl_seconds)
            if entry.is_fresh_for(source_hash, self._now()):
                self._metrics["persistent_hits"] += 1
                self._store_in_memory(entry)
                logger.debug("Analysis persistent cache hit", key=key)
                return stored.analysis.as_cached(), True

        self._metrics["misses"] += 1
        try:
            analysis = await generate()
        except Exception:
            self._metrics["generation_failures"] += 1
            raise
        self._metrics["generations"] += 1

        analysis = PlayerAnalysis(
            overview=analysis.overview,
            pros=list(analysis.pros),
            cons=list(analysis.cons),
            generated_at=analysis.generated_at,
            is_cached=False,
        )
        self._store_in_memory(
            CacheEntry(key, player_id, context_hash, source_hash, analysis, self.ttl_seconds)
        )
        await self._save_to_repository(
            StoredAnalysis(
                player_id=player_id,
                context_hash=context_hash,
                source_hash=source_hash,
                analysis=analysis,
            )
        )
        self._metrics["sets"] += 1
        logger.info("Analysis generated and cached", key=key, player_id=player_id)
        return analysis, False

    def _get_from_memory(self, key: str, source_hash: str) -> Optional[CacheEntry]:
        entry = self._memory_cache.get(key)
        if entry is None:
            return None
        now = self._now()
        if not entry.is_fresh_for(source_hash, now):
            del self._memory_cache[key]
            return None
        entry.update_access(now)
        self._memory_cache.move_to_end(key)
        return entry

    def _store_in_memory(self, entry: CacheEntry) -> None:
        self._memory_cache[entry.key] = entry
        self._memory_cache.move_to_end(entry.key)
        while len(self._memory_cache) > self._max_memory_entries:
            evicted_key, _ = self._memory_cache.popitem(last=False)
            logger.debug("Evicted analysis from memory cache", key=evicted_key)

    async def _get_from_repository(self, player_id: str, context_hash: str) -> Optional[StoredAnalysis]:
        if self.repository is None:
            return None
        try:
            return await self.repository.get(player_id, context_hash)
        except PersistenceError as e:
            logger.warning("Analysis cache read failed, treating as miss", player_id=player_id, error=str(e))
            return None

    async def _save_to_repository(self, stored: StoredAnalysis) -> None:
        if self.repository is None:
            return
        try:
            await self.repository.save(stored)
        except PersistenceError as e:
            logger.warning(
                "Analysis cache write failed, kept in memory only",
                player_id=stored.player_id,
                error=str(e),
            )

    async def invalidate_player(self, player_id: str) -> int:
        keys = [key for key, entry in self._memory_cache.items() if entry.player_id == player_id]
        for key in keys:
            del self._memory_cache[key]
        removed = len(keys)
        if self.repository is not None:
            removed = max(removed, await self.repository.delete_for_player(player_id))
        self._metrics["invalidations"] += 1
        logger.info("Invalidated player analyses", player_id=player_id, removed=removed)
        return removed

    def get_metrics(self) -> Dict[str, Any]:
        return {
            **self._metrics,
            "memory_entries": len(self._memory_cache),
            "inflight": len(self._inflight),
        }

    async def check_health(self) -> Dict[str, Any]:
        return {
            "status": "healthy",
            "persistent_tier": self.repository is not None,
            "metrics": self.get_metrics(),
        }


__all__ = ["CacheEntry", "AnalysisCacheManager"]
