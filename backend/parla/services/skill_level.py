"""
Skill-level estimator

Classifies a learner as beginner / intermediate / advanced from the skill
notes of their most recent sessions. No smoothing between runs: each estimate
stands on its own and may move the level up or down.
"""
import logging
from typing import Sequence

from ..config import settings
from .base import TextGenerationService
from .prompts import SKILL_LEVELS, build_skill_level_prompt

logger = logging.getLogger(__name__)

DEFAULT_LEVEL = "beginner"


def normalize_level(reply: str) -> str:
    """Accept only an exact level literal (after trim + lowercase)"""
    level = (reply or "").strip().lower()
    return level if level in SKILL_LEVELS else DEFAULT_LEVEL


class SkillLevelEstimator:
    def __init__(self, generator: TextGenerationService, max_tokens: int = settings.classify_max_tokens):
        self.generator = generator
        self.max_tokens = max_tokens

    async def estimate(self, skill_notes_history: Sequence[str]) -> str:
        """
        Estimate the level from skill notes, most recent first.

        With no notes the learner stays a beginner and no call is made.
        """
        notes = [n for n in skill_notes_history if n]
        if not notes:
            return DEFAULT_LEVEL

        reply = await self.generator.generate(
            [{"role": "user", "content": build_skill_level_prompt(notes)}],
            max_tokens=self.max_tokens,
        )
        level = normalize_level(reply)
        if level == DEFAULT_LEVEL and reply.strip().lower() != DEFAULT_LEVEL:
            logger.info("Unrecognized skill level reply %r, defaulting to %s", reply[:40], DEFAULT_LEVEL)
        return level
