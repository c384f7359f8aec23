"""AI infrastructure services.

This module contains AI-related infrastructure implementations:
- Embedding service for player and query vectors
- Analysis generator for recruiter-personalized player analyses
- Prompt manager for template-based prompts
- Cache manager for generated analyses
"""

from talent_search.infrastructure.ai.analysis_generator import OpenAIAnalysisGenerator
from talent_search.infrastructure.ai.cache_manager import AnalysisCacheManager, CacheEntry
from talent_search.infrastructure.ai.embedding_service import EmbeddingService
from talent_search.infrastructure.ai.prompt_manager import PromptManager, PromptType, build_player_text

__all__ = [
    "OpenAIAnalysisGenerator",
    "AnalysisCacheManager",
    "CacheEntry",
    "EmbeddingService",
    "PromptManager",
    "PromptType",
    "build_player_text",
]
