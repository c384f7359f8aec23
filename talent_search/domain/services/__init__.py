"""Domain services package."""

from .filter_engine import FilterEngine
from .rank_normalizer import RankNormalizer
from .relevance_ranker import RankedCandidate, RankingWeights, RelevanceRanker

__all__ = [
    "FilterEngine",
    "RankNormalizer",
    "RankedCandidate",
    "RankingWeights",
    "RelevanceRanker",
]
