"""
Session store

The narrow query interface the coaching pipeline uses on top of the Tortoise
models. Every session-level read and write is scoped by (session_id, user_id).
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Sequence

from tortoise.exceptions import IntegrityError

from ..models import PracticeSession, SessionEmbedding, SessionScores, User
from ..schemas.scores import ScoreCard
from .embeddings import cosine_similarity

logger = logging.getLogger(__name__)


@dataclass
class SimilarSession:
    """A past session ranked by embedding similarity to a query"""
    session_id: int
    date: datetime
    summary: str
    skill_notes: str
    similarity: float  # 1 - cosine distance


class SessionStore:
    """Tortoise-backed persistence for users, sessions, embeddings and scores"""

    # ----- users -----

    async def get_user(self, user_id: int) -> Optional[User]:
        return await User.get_or_none(id=user_id)

    async def get_user_by_email(self, email: str) -> Optional[User]:
        return await User.get_or_none(email=email)

    async def update_user_skill(self, user_id: int, skill_level: str) -> None:
        await User.filter(id=user_id).update(skill_level=skill_level)

    async def update_user_settings(
        self,
        user_id: int,
        *,
        tts_speed: Optional[float] = None,
        personality: Optional[str] = None,
    ) -> None:
        changes = {}
        if tts_speed is not None:
            changes["tts_speed"] = tts_speed
        if personality is not None:
            changes["personality"] = personality
        if changes:
            await User.filter(id=user_id).update(**changes)

    # ----- sessions -----

    async def create_session(
        self,
        user_id: int,
        transcript: str,
        summary: str,
        skill_notes: str,
        duration_seconds: int,
    ) -> PracticeSession:
        return await PracticeSession.create(
            user_id=user_id,
            transcript=transcript,
            summary=summary,
            skill_notes=skill_notes,
            duration_seconds=duration_seconds,
        )

    async def get_session(self, session_id: int, user_id: int) -> Optional[PracticeSession]:
        return await PracticeSession.get_or_none(id=session_id, user_id=user_id)

    async def get_recent_sessions(self, user_id: int, limit: int = 3) -> List[PracticeSession]:
        """Most recent first"""
        return await PracticeSession.filter(user_id=user_id).order_by("-date", "-id").limit(limit)

    async def count_sessions(self, user_id: int) -> int:
        return await PracticeSession.filter(user_id=user_id).count()

    async def list_sessions(self, user_id: int, limit: int = 50) -> List[PracticeSession]:
        """Most recent first, with scores prefetched"""
        return await (
            PracticeSession.filter(user_id=user_id)
            .order_by("-date", "-id")
            .limit(limit)
            .prefetch_related("scores")
        )

    async def get_sessions_without_scores(self, user_id: int, limit: int = 10) -> List[PracticeSession]:
        """Oldest first, so a backfill works through history in order"""
        scored_ids = await SessionScores.filter(user_id=user_id).values_list("session_id", flat=True)
        query = PracticeSession.filter(user_id=user_id)
        if scored_ids:
            query = query.exclude(id__in=list(scored_ids))
        return await query.order_by("date", "id").limit(limit)

    # ----- embeddings -----

    async def store_session_embedding(
        self,
        session_id: int,
        user_id: int,
        embedding: Sequence[float],
        content: str,
    ) -> bool:
        """
        Insert the embedding for a session if it has none yet.

        Returns True when a row was written.
        """
        if await SessionEmbedding.exists(session_id=session_id):
            return False
        try:
            await SessionEmbedding.create(
                session_id=session_id,
                user_id=user_id,
                embedding=list(embedding),
                content=content,
            )
        except IntegrityError:
            # Lost a race with a concurrent insert for the same session
            return False
        return True

    async def find_similar_sessions(
        self,
        user_id: int,
        query_embedding: Sequence[float],
        limit: int = 3,
    ) -> List[SimilarSession]:
        """
        Rank the user's embedded sessions by similarity to query_embedding.

        Strictly descending by similarity; ties go to the lower session id.
        """
        rows = await SessionEmbedding.filter(user_id=user_id).prefetch_related("session")
        ranked = []
        for row in rows:
            session = row.session
            try:
                similarity = cosine_similarity(query_embedding, row.embedding)
            except ValueError:
                # Stale vector from a different embedding model
                logger.warning("Skipping embedding of session %s: %d dimensions, query has %d",
                               session.id, len(row.embedding or []), len(query_embedding))
                continue
            ranked.append(SimilarSession(
                session_id=session.id,
                date=session.date,
                summary=session.summary or "",
                skill_notes=session.skill_notes or "",
                similarity=similarity,
            ))
        ranked.sort(key=lambda s: (-s.similarity, s.session_id))
        return ranked[:limit]

    # ----- scores -----

    async def get_session_scores(self, session_id: int, user_id: int) -> Optional[SessionScores]:
        return await SessionScores.get_or_none(session_id=session_id, user_id=user_id)

    async def upsert_scores(self, session_id: int, user_id: int, scores: ScoreCard) -> SessionScores:
        """Write scores for a session, overwriting any previous row"""
        row, created = await SessionScores.update_or_create(
            defaults=scores.model_dump(),
            session_id=session_id,
            user_id=user_id,
        )
        logger.info("Stored scores for session %s (created=%s)", session_id, created)
        return row
