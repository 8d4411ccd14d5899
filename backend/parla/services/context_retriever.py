"""
Context retriever

Builds the USER CONTEXT block spliced into the coach's system prompt.

Two tiers:
1. Recency: the last few sessions' summaries and skill notes, always present.
2. Relevance: past sessions whose embeddings are close to what is being
   talked about right now. Only on non-greeting turns for users with history,
   appended after the recency block. Any failure here is logged and the turn
   goes ahead with recency context alone.
"""
import logging
from typing import List, Optional, Sequence

from ..config import settings
from .base import ChatMessage, EmbeddingService
from .store import SessionStore, SimilarSession

logger = logging.getLogger(__name__)

FIRST_SESSION_MARKER = "This is their first session. Start fresh and assess their level through conversation."
RELEVANT_HEADER = "RELEVANT PAST SESSIONS:"


def format_recent_context(session_count: int, recent_sessions: Sequence) -> str:
    """Recency tier text; recent_sessions is most recent first"""
    if session_count == 0:
        return FIRST_SESSION_MARKER

    lines = [f"This user has completed {session_count} previous session(s)."]
    if recent_sessions:
        lines.append("\nRecent sessions:")
        for i, session in enumerate(recent_sessions, start=1):
            if session.summary:
                lines.append(f"\nSession {i}: {session.summary}")
            if session.skill_notes:
                lines.append(f"Notes: {session.skill_notes}")
    lines.append("\nUse this context to personalize the conversation and build on previous progress.")
    return "\n".join(lines)


def format_relevant_sessions(sessions: Sequence[SimilarSession]) -> Optional[str]:
    """Relevance tier text, in ranking order; None when there is nothing to add"""
    if not sessions:
        return None
    parts = []
    for s in sessions:
        date = f"{s.date:%b} {s.date.day}"
        parts.append(f"[{date}] {s.summary} {s.skill_notes}".strip())
    return RELEVANT_HEADER + "\n" + "\n".join(parts)


def build_query_text(recent_turns: Sequence[ChatMessage], pending_message: str, turns: int) -> str:
    """Last `turns` conversation turns plus the message about to be answered"""
    window = list(recent_turns)[-turns:] if turns > 0 else []
    texts = [t["content"] for t in window if t.get("content")]
    if pending_message:
        texts.append(pending_message)
    return "\n".join(texts)


def select_relevant(candidates: Sequence[SimilarSession], threshold: float, limit: int) -> List[SimilarSession]:
    """Rank strictly by similarity (ties by session id), keep up to limit above threshold"""
    ranked = sorted(candidates, key=lambda s: (-s.similarity, s.session_id))
    return [s for s in ranked if s.similarity > threshold][:limit]


class ContextRetriever:
    def __init__(
        self,
        store: SessionStore,
        embedder: EmbeddingService,
        *,
        recency_window: int = settings.recency_window,
        threshold: float = settings.relevance_threshold,
        limit: int = settings.relevance_limit,
        query_turns: int = settings.relevance_turns,
    ):
        self.store = store
        self.embedder = embedder
        self.recency_window = recency_window
        self.threshold = threshold
        self.limit = limit
        self.query_turns = query_turns

    async def build_context(
        self,
        user_id: int,
        recent_turns: Sequence[ChatMessage],
        pending_message: str,
        *,
        is_first_turn: bool,
        limit: Optional[int] = None,
    ) -> Optional[str]:
        """Assemble the user context for the next coaching turn"""
        session_count = await self.store.count_sessions(user_id)
        recent = await self.store.get_recent_sessions(user_id, self.recency_window) if session_count else []
        context = format_recent_context(session_count, recent)

        if is_first_turn or session_count == 0:
            return context

        query = build_query_text(recent_turns, pending_message, self.query_turns)
        relevant = await self.retrieve_relevant(user_id, query, self.limit if limit is None else limit)
        if relevant:
            context = f"{context}\n\n{relevant}"
        return context

    async def retrieve_relevant(self, user_id: int, query: str, limit: int) -> Optional[str]:
        """Relevance tier; returns None on any failure"""
        if not query.strip() or limit <= 0:
            return None
        try:
            query_embedding = await self.embedder.embed(query)
            # Candidates are already ranked; filtering the top `limit` keeps the same prefix
            candidates = await self.store.find_similar_sessions(user_id, query_embedding, limit)
        except Exception:
            logger.warning("Failed to retrieve relevant context for user %s", user_id, exc_info=True)
            return None
        return format_relevant_sessions(select_relevant(candidates, self.threshold, limit))
