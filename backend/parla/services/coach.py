"""
Coach service

Request-level flows built from the pipeline components:
- reply: one coaching turn with personalized context
- save_session: summarize -> persist -> embed (best effort) -> re-estimate level
- progress_summary: narrative over the user's history
"""
import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from ..config import settings
from ..models import PracticeSession, User
from .base import ChatMessage, EmbeddingService, TextGenerationService
from .context_retriever import ContextRetriever
from .embeddings import DIGEST_CHARS, create_embedding_content
from .personalities import get_personality
from .prompts import GREETING_PROMPT, build_progress_prompt, build_system_prompt
from .skill_level import SkillLevelEstimator
from .store import SessionStore
from .summarizer import SessionSummarizer

logger = logging.getLogger(__name__)

PROGRESS_HISTORY_LIMIT = 50


@dataclass
class SavedSession:
    session: PracticeSession
    summary: str
    skill_notes: str
    skill_level: str


class CoachService:
    def __init__(
        self,
        store: SessionStore,
        generator: TextGenerationService,
        embedder: EmbeddingService,
        summarizer: SessionSummarizer,
        estimator: SkillLevelEstimator,
        retriever: ContextRetriever,
    ):
        self.store = store
        self.generator = generator
        self.embedder = embedder
        self.summarizer = summarizer
        self.estimator = estimator
        self.retriever = retriever

    async def reply(
        self,
        user: User,
        message: str,
        history: Sequence[ChatMessage],
        *,
        is_greeting: bool,
    ) -> str:
        """Generate the coach's next line"""
        user_context = await self.retriever.build_context(
            user.id,
            history,
            message,
            is_first_turn=is_greeting,
        )
        system = build_system_prompt(
            get_personality(user.personality),
            user.name,
            user.skill_level or "beginner",
            user_context,
        )

        if is_greeting:
            messages = [{"role": "user", "content": GREETING_PROMPT}]
        else:
            messages = [{"role": h["role"], "content": h["content"]} for h in history]
            messages.append({"role": "user", "content": message})

        return await self.generator.generate(messages, system=system, max_tokens=settings.chat_max_tokens)

    async def save_session(self, user: User, transcript: str, duration_seconds: int = 0) -> SavedSession:
        """
        Persist a finished conversation.

        Summarization failures propagate (nothing is saved); embedding failures
        are logged and the session is kept without one.
        """
        result = await self.summarizer.summarize(transcript, user.name)
        summary, skill_notes = result.summary, result.skill_notes

        session = await self.store.create_session(user.id, transcript, summary, skill_notes, duration_seconds)
        logger.info("Saved session %s for user %s (%ds)", session.id, user.id, duration_seconds)

        await self._store_embedding(session, user.id)

        skill_level = user.skill_level
        if skill_notes:
            skill_level = await self._reassess_skill_level(user)

        return SavedSession(session=session, summary=summary, skill_notes=skill_notes, skill_level=skill_level)

    async def _store_embedding(self, session: PracticeSession, user_id: int) -> None:
        content = create_embedding_content(session.summary, session.skill_notes, session.transcript)
        if not content:
            return
        try:
            vector = await self.embedder.embed(content)
            await self.store.store_session_embedding(session.id, user_id, vector, content[:DIGEST_CHARS])
        except Exception:
            logger.warning("Failed to generate session embedding for session %s", session.id, exc_info=True)

    async def _reassess_skill_level(self, user: User) -> str:
        recent = await self.store.get_recent_sessions(user.id, settings.skill_notes_window)
        notes = [s.skill_notes for s in recent if s.skill_notes]
        if not notes:
            return user.skill_level

        new_level = await self.estimator.estimate(notes)
        if new_level != user.skill_level:
            await self.store.update_user_skill(user.id, new_level)
            logger.info("User %s skill level %s -> %s", user.id, user.skill_level, new_level)
            user.skill_level = new_level
        return new_level

    async def progress_summary(self, user: User) -> Optional[tuple[str, int]]:
        """Narrative progress analysis; None when the user has no sessions"""
        sessions = await self.store.list_sessions(user.id, PROGRESS_HISTORY_LIMIT)
        if not sessions:
            return None
        text = await self.generator.generate(
            [{"role": "user", "content": build_progress_prompt(user.name or "a student", sessions)}],
            max_tokens=settings.progress_max_tokens,
        )
        return text, len(sessions)
