"""
Embedding Refresh Service

Keeps the player_embeddings table in step with player profiles:
- Batched refresh of missing or stale vectors, or all vectors when forced
- Back-pressure between batches to respect provider rate limits
- Single-player refresh for profile edits
- Coverage statistics for the admin dashboard
"""

import asyncio
from datetime import datetime
from typing import List, Optional, Sequence

import structlog

from talent_search.domain.entities.embedding import (
    EmbeddingBatchResult,
    EmbeddingRefreshOptions,
    EmbeddingStats,
    PlayerEmbeddingRecord,
    RefreshMode,
)
from talent_search.domain.entities.player import PlayerProfile
from talent_search.domain.exceptions import (
    ConfigurationError,
    PersistenceError,
    PlayerNotFoundError,
)
from talent_search.domain.interfaces import IEmbeddingProvider
from talent_search.domain.repositories.embedding_repository import IPlayerEmbeddingRepository
from talent_search.domain.repositories.player_repository import IPlayerRepository
from talent_search.infrastructure.ai.prompt_manager import build_player_text

logger = structlog.get_logger(__name__)


class EmbeddingRefreshService:
    """
    Batch job that regenerates player embeddings.

    A player is skipped in only-missing mode when its stored source hash still
    matches the current profile. Every vector is written in one atomic upsert,
    so an interrupted run leaves each player either fully old or fully new.
    """

    def __init__(
        self,
        player_repository: IPlayerRepository,
        embedding_repository: IPlayerEmbeddingRepository,
        embedding_provider: Optional[IEmbeddingProvider],
    ):
        self.player_repository = player_repository
        self.embedding_repository = embedding_repository
        self.embedding_provider = embedding_provider
        self._last_run: Optional[EmbeddingBatchResult] = None
        self._last_run_at: Optional[datetime] = None

    @property
    def is_configured(self) -> bool:
        return self.embedding_provider is not None

    def _require_provider(self) -> IEmbeddingProvider:
        if self.embedding_provider is None:
            raise ConfigurationError("Embedding provider is not configured")
        return self.embedding_provider

    async def refresh(self, options: Optional[EmbeddingRefreshOptions] = None) -> EmbeddingBatchResult:
        """Refresh embeddings for every player, one batch at a time."""
        options = options or EmbeddingRefreshOptions()
        provider = self._require_provider()

        player_ids = await self.player_repository.list_player_ids()
        result = EmbeddingBatchResult()
        logger.info(
            "Embedding refresh started",
            mode=options.mode.value,
            players=len(player_ids),
            batch_size=options.batch_size,
        )

        called_provider = False
        for start in range(0, len(player_ids), options.batch_size):
            if called_provider:
                await asyncio.sleep(options.batch_delay_ms / 1000)
            batch_ids = player_ids[start:start + options.batch_size]
            called_provider = await self._refresh_batch(provider, batch_ids, options.mode, result)

        self._last_run = result
        self._last_run_at = datetime.utcnow()
        logger.info(
            "Embedding refresh completed",
            processed=result.processed,
            succeeded=result.succeeded,
            failed=result.failed,
            skipped=result.skipped,
        )
        return result

    async def _refresh_batch(
        self,
        provider: IEmbeddingProvider,
        batch_ids: Sequence[str],
        mode: RefreshMode,
        result: EmbeddingBatchResult,
    ) -> bool:
        """Process one batch; returns whether the provider was called."""
        try:
            players = await self.player_repository.get_by_ids(batch_ids)
            stored_hashes = (
                await self.embedding_repository.get_source_hashes(batch_ids)
                if mode == RefreshMode.ONLY_MISSING
                else {}
            )
        except PersistenceError as e:
            logger.warning("Embedding refresh batch could not be loaded", players=len(batch_ids), error=str(e))
            for player_id in batch_ids:
                result.record_failure(player_id)
            return False

        by_id = {player.id: player for player in players}
        pending: List[tuple] = []
        for player_id in batch_ids:
            player = by_id.get(player_id)
            if player is None:
                continue
            data = player.to_embedding_data()
            source_hash = data.source_hash()
            if mode == RefreshMode.ONLY_MISSING and stored_hashes.get(player_id) == source_hash:
                result.record_skip()
                continue
            pending.append((player_id, build_player_text(data), source_hash))

        if not pending:
            return False

        vectors = await provider.embed_batch([text for _, text, _ in pending])
        for (player_id, text, source_hash), vector in zip(pending, vectors):
            if vector is None:
                result.record_failure(player_id)
                continue
            try:
                await self.embedding_repository.save(
                    PlayerEmbeddingRecord(
                        player_id=player_id,
                        vector=vector,
                        embedding_text=text,
                        source_hash=source_hash,
                        embedding_model=provider.model_name,
                    )
                )
            except PersistenceError as e:
                logger.warning("Embedding write failed", player_id=player_id, error=str(e))
                result.record_failure(player_id)
                continue
            result.record_success()
        return True

    async def refresh_player(self, player_id: str) -> PlayerEmbeddingRecord:
        """Regenerate the vector for one player regardless of its source hash."""
        provider = self._require_provider()
        player = await self.player_repository.get_by_id(player_id)
        if player is None:
            raise PlayerNotFoundError(player_id)

        record = await self._embed_player(provider, player)
        await self.embedding_repository.save(record)
        logger.info("Player embedding refreshed", player_id=player_id)
        return record

    async def _embed_player(self, provider: IEmbeddingProvider, player: PlayerProfile) -> PlayerEmbeddingRecord:
        data = player.to_embedding_data()
        text = build_player_text(data)
        vector = await provider.embed(text)
        return PlayerEmbeddingRecord(
            player_id=player.id,
            vector=vector,
            embedding_text=text,
            source_hash=data.source_hash(),
            embedding_model=provider.model_name,
        )

    async def delete_player_embedding(self, player_id: str) -> bool:
        deleted = await self.embedding_repository.delete(player_id)
        if deleted:
            logger.info("Player embedding deleted", player_id=player_id)
        return deleted

    async def get_stats(self) -> EmbeddingStats:
        total_players = await self.player_repository.count()
        total_embeddings = await self.embedding_repository.count()
        coverage = min(round(total_embeddings / total_players * 100, 1), 100.0) if total_players else 0.0
        return EmbeddingStats(
            total_embeddings=total_embeddings,
            missing_embeddings=max(total_players - total_embeddings, 0),
            total_players=total_players,
            coverage_percent=coverage,
            is_configured=self.is_configured,
        )

    @property
    def last_run(self) -> Optional[EmbeddingBatchResult]:
        return self._last_run


__all__ = ["EmbeddingRefreshService"]
