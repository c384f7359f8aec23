"""
Player analysis generation through an OpenAI-compatible chat model.
"""

import asyncio
import json
from datetime import datetime
from typing import Any, Dict, List, Optional

import structlog
from openai import AsyncOpenAI, OpenAIError
from pydantic import BaseModel, Field, ValidationError as PydanticValidationError

from talent_search.core.config import get_settings
from talent_search.domain.entities.analysis import PlayerAnalysis
from talent_search.domain.entities.player import PlayerEmbeddingData
from talent_search.domain.exceptions import AnalysisUnavailableError
from talent_search.domain.interfaces import IAnalysisGenerator
from talent_search.domain.value_objects import RecruiterContext
from talent_search.infrastructure.ai.prompt_manager import PromptManager

logger = structlog.get_logger(__name__)


class AnalysisPayload(BaseModel):
    """Shape the model is asked to return."""

    overview: str = Field(..., min_length=1)
    pros: List[str] = Field(default_factory=list)
    cons: List[str] = Field(default_factory=list)


def strip_code_fences(text: str) -> str:
    cleaned = text.strip()
    if cleaned.startswith("```json"):
        cleaned = cleaned[7:]
    elif cleaned.startswith("```"):
        cleaned = cleaned[3:]
    if cleaned.endswith("```"):
        cleaned = cleaned[:-3]
    return cleaned.strip()


def parse_analysis_response(text: Optional[str]) -> AnalysisPayload:
    """Parse model output into an AnalysisPayload or raise AnalysisUnavailableError."""
    if not text or not text.strip():
        raise AnalysisUnavailableError("Analysis model returned an empty response")
    try:
        return AnalysisPayload.model_validate(json.loads(strip_code_fences(text)))
    except (json.JSONDecodeError, PydanticValidationError) as e:
        raise AnalysisUnavailableError(f"Analysis response could not be parsed: {e}") from e


class OpenAIAnalysisGenerator(IAnalysisGenerator):
    """Generates overview, pros and cons for a player, written for one recruiter."""

    def __init__(
        self,
        client: AsyncOpenAI,
        prompt_manager: Optional[PromptManager] = None,
        model: Optional[str] = None,
    ):
        self.settings = get_settings()
        self.client = client
        self.prompt_manager = prompt_manager or PromptManager()
        self.model = model or self.settings.OPENAI_MODEL
        self._metrics = {
            "analyses_generated": 0,
            "failures": 0,
        }

    async def generate(self, player: PlayerEmbeddingData, context: RecruiterContext) -> PlayerAnalysis:
        prompt = await self.prompt_manager.create_player_analysis_prompt(player, context)
        try:
            response = await asyncio.wait_for(
                self.client.chat.completions.create(
                    model=self.model,
                    messages=prompt["messages"],
                    temperature=prompt["temperature"],
                    max_tokens=prompt["max_tokens"],
                    response_format={"type": "json_object"},
                ),
                timeout=self.settings.ANALYSIS_TIMEOUT_SECONDS,
            )
        except asyncio.TimeoutError as e:
            self._metrics["failures"] += 1
            logger.warning("Analysis generation timed out", player_id=player.player_id)
            raise AnalysisUnavailableError("Analysis generation timed out") from e
        except OpenAIError as e:
            self._metrics["failures"] += 1
            logger.warning("Analysis provider error", player_id=player.player_id, error=str(e))
            raise AnalysisUnavailableError(f"Analysis provider error: {e}") from e

        if not response.choices:
            self._metrics["failures"] += 1
            raise AnalysisUnavailableError("Analysis model returned no choices")

        try:
            payload = parse_analysis_response(response.choices[0].message.content)
        except AnalysisUnavailableError:
            self._metrics["failures"] += 1
            logger.warning("Unparsable analysis response", player_id=player.player_id)
            raise

        self._metrics["analyses_generated"] += 1
        return PlayerAnalysis(
            overview=payload.overview.strip(),
            pros=[p.strip() for p in payload.pros if p and p.strip()],
            cons=[c.strip() for c in payload.cons if c and c.strip()],
            generated_at=datetime.utcnow(),
            is_cached=False,
        )

    async def check_health(self) -> Dict[str, Any]:
        return {"status": "healthy", "model": self.model, "metrics": dict(self._metrics)}


__all__ = ["AnalysisPayload", "OpenAIAnalysisGenerator", "parse_analysis_response", "strip_code_fences"]
