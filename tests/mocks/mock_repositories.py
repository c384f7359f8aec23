"""
Mock repository implementations for testing.

These mocks implement the repository interfaces, keep test data in memory
and track method calls for verification. ``should_fail`` flags make a
repository raise PersistenceError to exercise failure paths.
"""

from datetime import datetime
from typing import Dict, List, Optional, Sequence, Set, Tuple

import numpy as np

from talent_search.domain.entities import (
    FavoriteRecord,
    PlayerEmbeddingRecord,
    PlayerProfile,
    RecruiterProfile,
    StoredAnalysis,
)
from talent_search.domain.exceptions import PersistenceError
from talent_search.domain.repositories import (
    IFavoriteRepository,
    IPlayerAnalysisRepository,
    IPlayerEmbeddingRepository,
    IPlayerRepository,
    IRecruiterRepository,
)


class CallLogMixin:
    """Call tracking helpers shared by the mocks."""

    def _log(self, *call) -> None:
        self.call_log.append(call)

    def get_call_count(self, method: str) -> int:
        return len([call for call in self.call_log if call[0] == method])

    def clear_call_log(self) -> None:
        self.call_log.clear()


class MockPlayerRepository(CallLogMixin, IPlayerRepository):
    """In-memory player store."""

    def __init__(self, players: Optional[Sequence[PlayerProfile]] = None):
        self.players: Dict[str, PlayerProfile] = {}
        self.call_log: List[tuple] = []
        self.should_fail = False
        for player in players or []:
            self.add_player(player)

    def add_player(self, player: PlayerProfile) -> None:
        self.players[player.id] = player

    def _check(self, method: str) -> None:
        if self.should_fail:
            raise PersistenceError(f"Mock player store failure in {method}")

    async def get_by_id(self, player_id: str) -> Optional[PlayerProfile]:
        self._log("get_by_id", player_id)
        self._check("get_by_id")
        return self.players.get(player_id)

    async def get_by_ids(self, player_ids: Sequence[str]) -> List[PlayerProfile]:
        self._log("get_by_ids", tuple(player_ids))
        self._check("get_by_ids")
        # Reverse to prove callers do not rely on ordering
        return [self.players[pid] for pid in reversed(list(player_ids)) if pid in self.players]

    async def list_candidates(self, game_id: Optional[str] = None) -> List[PlayerProfile]:
        self._log("list_candidates", game_id)
        self._check("list_candidates")
        players = list(self.players.values())
        if game_id:
            players = [p for p in players if p.has_game(game_id)]
        return players

    async def list_player_ids(self) -> List[str]:
        self._log("list_player_ids")
        self._check("list_player_ids")
        return sorted(self.players)

    async def count(self) -> int:
        self._log("count")
        self._check("count")
        return len(self.players)


class MockRecruiterRepository(CallLogMixin, IRecruiterRepository):
    def __init__(self, profiles: Optional[Sequence[RecruiterProfile]] = None):
        self.profiles: Dict[str, RecruiterProfile] = {p.id: p for p in profiles or []}
        self.call_log: List[tuple] = []
        self.should_fail = False

    async def get_profile(self, recruiter_id: str) -> Optional[RecruiterProfile]:
        self._log("get_profile", recruiter_id)
        if self.should_fail:
            raise PersistenceError("Mock recruiter store failure")
        return self.profiles.get(recruiter_id)


class MockFavoriteRepository(CallLogMixin, IFavoriteRepository):
    """In-memory favorites unique on (recruiter_id, player_id)."""

    def __init__(self):
        self.favorites: Dict[Tuple[str, str], FavoriteRecord] = {}
        self.call_log: List[tuple] = []
        self.should_fail = False

    def _check(self, method: str) -> None:
        if self.should_fail:
            raise PersistenceError(f"Mock favorite store failure in {method}")

    async def add(self, record: FavoriteRecord) -> FavoriteRecord:
        self._log("add", record.recruiter_id, record.player_id)
        self._check("add")
        key = (record.recruiter_id, record.player_id)
        return self.favorites.setdefault(key, record)

    async def upsert(self, record: FavoriteRecord) -> FavoriteRecord:
        self._log("upsert", record.recruiter_id, record.player_id)
        self._check("upsert")
        key = (record.recruiter_id, record.player_id)
        existing = self.favorites.get(key)
        if existing is not None:
            record = FavoriteRecord(
                recruiter_id=record.recruiter_id,
                player_id=record.player_id,
                created_at=existing.created_at,
                updated_at=record.updated_at,
                notes=record.notes,
                tags=list(record.tags),
            )
        self.favorites[key] = record
        return record

    async def remove(self, recruiter_id: str, player_id: str) -> bool:
        self._log("remove", recruiter_id, player_id)
        self._check("remove")
        return self.favorites.pop((recruiter_id, player_id), None) is not None

    async def get(self, recruiter_id: str, player_id: str) -> Optional[FavoriteRecord]:
        self._log("get", recruiter_id, player_id)
        self._check("get")
        return self.favorites.get((recruiter_id, player_id))

    async def list_for_recruiter(self, recruiter_id: str) -> List[FavoriteRecord]:
        self._log("list_for_recruiter", recruiter_id)
        self._check("list_for_recruiter")
        records = [r for (rid, _), r in self.favorites.items() if rid == recruiter_id]
        return sorted(records, key=lambda r: r.created_at, reverse=True)

    async def favorited_among(self, recruiter_id: str, player_ids: Sequence[str]) -> Set[str]:
        self._log("favorited_among", recruiter_id, tuple(player_ids))
        self._check("favorited_among")
        return {pid for pid in player_ids if (recruiter_id, pid) in self.favorites}


class MockEmbeddingRepository(CallLogMixin, IPlayerEmbeddingRepository):
    """In-memory vector store with exact cosine similarity."""

    def __init__(self):
        self.records: Dict[str, PlayerEmbeddingRecord] = {}
        self.call_log: List[tuple] = []
        self.should_fail = False
        self.fail_on_save_for: Set[str] = set()

    def _check(self, method: str) -> None:
        if self.should_fail:
            raise PersistenceError(f"Mock embedding store failure in {method}")

    async def save(self, record: PlayerEmbeddingRecord) -> None:
        self._log("save", record.player_id)
        self._check("save")
        if record.player_id in self.fail_on_save_for:
            raise PersistenceError(f"Mock save failure for {record.player_id}")
        self.records[record.player_id] = record

    async def get(self, player_id: str) -> Optional[PlayerEmbeddingRecord]:
        self._log("get", player_id)
        self._check("get")
        return self.records.get(player_id)

    async def delete(self, player_id: str) -> bool:
        self._log("delete", player_id)
        self._check("delete")
        return self.records.pop(player_id, None) is not None

    async def get_source_hashes(self, player_ids: Sequence[str]) -> Dict[str, str]:
        self._log("get_source_hashes", tuple(player_ids))
        self._check("get_source_hashes")
        return {pid: self.records[pid].source_hash for pid in player_ids if pid in self.records}

    async def count(self) -> int:
        self._log("count")
        self._check("count")
        return len(self.records)

    async def similarity_search(
        self,
        vector: Sequence[float],
        limit: int,
        min_similarity: float,
    ) -> List[Tuple[str, float]]:
        self._log("similarity_search", limit, min_similarity)
        self._check("similarity_search")
        query = np.asarray(vector, dtype=float)
        scored = []
        for player_id, record in self.records.items():
            stored = np.asarray(record.vector, dtype=float)
            denominator = np.linalg.norm(query) * np.linalg.norm(stored)
            similarity = float(np.dot(query, stored) / denominator) if denominator else 0.0
            if similarity >= min_similarity:
                scored.append((player_id, similarity))
        scored.sort(key=lambda item: (-item[1], item[0]))
        return scored[:limit]

    def put_vector(self, player_id: str, vector: Sequence[float], source_hash: str = "hash") -> None:
        """Test helper: store a vector directly."""
        self.records[player_id] = PlayerEmbeddingRecord(
            player_id=player_id,
            vector=list(vector),
            embedding_text="",
            source_hash=source_hash,
            embedding_model="mock-embedding",
            updated_at=datetime.utcnow(),
        )


class MockAnalysisRepository(CallLogMixin, IPlayerAnalysisRepository):
    def __init__(self):
        self.analyses: Dict[Tuple[str, str], StoredAnalysis] = {}
        self.call_log: List[tuple] = []
        self.should_fail = False

    async def get(self, player_id: str, context_hash: str) -> Optional[StoredAnalysis]:
        self._log("get", player_id, context_hash)
        if self.should_fail:
            raise PersistenceError("Mock analysis store failure")
        return self.analyses.get((player_id, context_hash))

    async def save(self, stored: StoredAnalysis) -> None:
        self._log("save", stored.player_id, stored.context_hash)
        if self.should_fail:
            raise PersistenceError("Mock analysis store failure")
        self.analyses[(stored.player_id, stored.context_hash)] = stored

    async def delete_for_player(self, player_id: str) -> int:
        self._log("delete_for_player", player_id)
        keys = [key for key in self.analyses if key[0] == player_id]
        for key in keys:
            del self.analyses[key]
        return len(keys)
