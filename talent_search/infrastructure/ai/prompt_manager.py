"""
Prompt Manager for AI Operations

Centralized prompt and text templates:
- Player text used both for embeddings and as analysis input
- Recruiter-personalized analysis prompt
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Union

import structlog

from talent_search.core.config import get_settings
from talent_search.domain.entities.player import PlayerEmbeddingData
from talent_search.domain.value_objects import RecruiterContext

logger = structlog.get_logger(__name__)


class PromptType(Enum):
    """Types of prompts supported by the system"""
    PLAYER_ANALYSIS = "player_analysis"


def _format_gpa(gpa: float) -> str:
    return f"{gpa:g}"


def build_player_text(player: PlayerEmbeddingData) -> str:
    """
    Searchable text capturing a player's key attributes.

    The same rendering feeds the embedding model and the analysis prompt.
    """
    parts: List[str] = []

    name = " ".join(part for part in (player.first_name, player.last_name) if part)
    parts.append(f"Player: {name or player.username or player.player_id}")
    if player.username:
        parts.append(f"Username: {player.username}")
    if player.location:
        parts.append(f"Location: {player.location}")

    if player.school:
        parts.append(f"School: {player.school}")
    if player.school_type:
        parts.append(f"School Type: {player.school_type.label}")
    if player.class_year:
        parts.append(f"Class Year: {player.class_year}")
    if player.gpa is not None:
        parts.append(f"GPA: {_format_gpa(player.gpa)}")
    if player.intended_major:
        parts.append(f"Intended Major: {player.intended_major}")

    if player.bio:
        parts.append(f"Bio: {player.bio}")
    if player.main_game:
        parts.append(f"Main Game: {player.main_game}")

    if player.game_profiles:
        details = []
        for profile in player.game_profiles:
            fields = [profile.get("game") or "Unknown game"]
            if profile.get("rank"):
                fields.append(f"Rank: {profile['rank']}")
            if profile.get("role"):
                fields.append(f"Role: {profile['role']}")
            if profile.get("agents"):
                fields.append(f"Plays: {', '.join(profile['agents'])}")
            if profile.get("play_style"):
                fields.append(f"Style: {profile['play_style']}")
            details.append(", ".join(fields))
        parts.append(f"Games: {'; '.join(details)}")

    return ". ".join(parts)


def describe_recruiter(context: RecruiterContext) -> str:
    if not context.school_name:
        return "a coach"
    description = f"a coach at {context.school_name}"
    if context.school_type:
        description += f" ({context.school_type.label.lower()})"
    return description


class PromptManager:
    """
    Template-based prompt generation for the analysis model.
    """

    def __init__(self):
        self.settings = get_settings()
        self._prompt_templates = self._initialize_templates()
        self._metrics = {
            "prompts_generated": 0,
            "template_usage": {},
        }

    def _initialize_templates(self) -> Dict[str, Dict[str, Any]]:
        """Initialize prompt templates"""
        return {
            PromptType.PLAYER_ANALYSIS.value: {
                "system": """You are an esports recruiting assistant helping {recruiter} evaluate a potential player.
{games_context}

Focus on:
- Competitive gaming experience and achievements
- Academic standing and potential
- Game-specific skills and versatility
- Team fit and coachability indicators
- Be balanced and constructive in the cons section; frame them as growth areas rather than weaknesses""",
                "user": """Analyze the following player profile and provide a structured assessment:

{player_text}

Return a JSON object with:
- "overview": a 2-3 sentence overview of the player highlighting their key attributes and potential fit for collegiate/scholastic esports
- "pros": list of strengths
- "cons": list of areas for improvement

Return ONLY the JSON object, no additional text or formatting.""",
                "temperature": self.settings.OPENAI_TEMPERATURE,
                "max_tokens": self.settings.OPENAI_MAX_TOKENS,
            },
        }

    async def generate_prompt(
        self,
        prompt_type: Union[PromptType, str],
        context: Dict[str, Any],
        custom_instructions: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Generate chat messages for a prompt type.

        Args:
            prompt_type: Type of prompt to generate
            context: Context variables for template substitution
            custom_instructions: Additional custom instructions

        Returns:
            Dictionary with messages, temperature and max_tokens
        """
        prompt_type_str = prompt_type if isinstance(prompt_type, str) else prompt_type.value
        if prompt_type_str not in self._prompt_templates:
            raise ValueError(f"Unknown prompt type: {prompt_type_str}")

        template = self._prompt_templates[prompt_type_str]
        system_message = template["system"].format(**context).strip()
        user_message = template["user"].format(**context)
        if custom_instructions:
            user_message += f"\n\nAdditional Instructions: {custom_instructions}"

        self._metrics["prompts_generated"] += 1
        usage = self._metrics["template_usage"]
        usage[prompt_type_str] = usage.get(prompt_type_str, 0) + 1

        logger.debug("Generated prompt", prompt_type=prompt_type_str, context_keys=list(context.keys()))

        return {
            "messages": [
                {"role": "system", "content": system_message},
                {"role": "user", "content": user_message},
            ],
            "temperature": template.get("temperature", 0.7),
            "max_tokens": template.get("max_tokens", 500),
            "prompt_type": prompt_type_str,
            "generated_at": datetime.utcnow().isoformat(),
        }

    async def create_player_analysis_prompt(
        self,
        player: PlayerEmbeddingData,
        context: RecruiterContext,
    ) -> Dict[str, Any]:
        games_context = (
            f"The coach's team competes in: {', '.join(context.games)}." if context.games else ""
        )
        return await self.generate_prompt(
            PromptType.PLAYER_ANALYSIS,
            {
                "recruiter": describe_recruiter(context),
                "games_context": games_context,
                "player_text": build_player_text(player),
            },
        )

    def get_metrics(self) -> Dict[str, Any]:
        return dict(self._metrics)


__all__ = ["PromptType", "PromptManager", "build_player_text", "describe_recruiter"]
