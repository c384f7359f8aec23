"""Player embedding records and refresh job bookkeeping."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List

from talent_search.domain.exceptions import InvalidInputError

MIN_BATCH_SIZE = 1
MAX_BATCH_SIZE = 50
MIN_BATCH_DELAY_MS = 100
MAX_BATCH_DELAY_MS = 10000


class RefreshMode(str, Enum):
    ONLY_MISSING = "only_missing"  # missing or stale vectors only
    FORCE = "force"


@dataclass
class PlayerEmbeddingRecord:
    player_id: str
    vector: List[float]
    embedding_text: str
    source_hash: str
    embedding_model: str
    updated_at: datetime = field(default_factory=datetime.utcnow)


@dataclass(frozen=True)
class EmbeddingRefreshOptions:
    mode: RefreshMode = RefreshMode.ONLY_MISSING
    batch_size: int = 10
    batch_delay_ms: int = 1000

    def __post_init__(self):
        if not MIN_BATCH_SIZE <= self.batch_size <= MAX_BATCH_SIZE:
            raise InvalidInputError(f"batch_size must be between {MIN_BATCH_SIZE} and {MAX_BATCH_SIZE}")
        if not MIN_BATCH_DELAY_MS <= self.batch_delay_ms <= MAX_BATCH_DELAY_MS:
            raise InvalidInputError(
                f"batch_delay_ms must be between {MIN_BATCH_DELAY_MS} and {MAX_BATCH_DELAY_MS}"
            )


@dataclass
class EmbeddingBatchResult:
    """Outcome of one refresh run."""

    processed: int = 0
    succeeded: int = 0
    failed: int = 0
    skipped: int = 0
    failed_ids: List[str] = field(default_factory=list)

    def record_success(self) -> None:
        self.processed += 1
        self.succeeded += 1

    def record_failure(self, player_id: str) -> None:
        self.processed += 1
        self.failed += 1
        self.failed_ids.append(player_id)

    def record_skip(self) -> None:
        self.skipped += 1


@dataclass(frozen=True)
class EmbeddingStats:
    total_embeddings: int
    missing_embeddings: int
    total_players: int
    coverage_percent: float
    is_configured: bool
