"""
Scoring engine

Scores a session transcript against the PLIDA B1 rubric and persists the
result. Scoring is cached per session: without `force`, a scored session is
never sent to the model again.
"""
import json
import logging
import re
from dataclasses import dataclass
from typing import List

from pydantic import ValidationError

from ..config import settings
from ..core.errors import InvalidInputError, MalformedResponseError, NotFoundError
from ..schemas.scores import BackfillItem, BackfillResult, ScoreCard
from .base import TextGenerationService
from .prompts import build_scoring_prompt
from .store import SessionStore

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


def parse_scores(text: str) -> ScoreCard:
    """
    Parse the scoring reply into a ScoreCard.

    A surrounding ``` / ```json fence is tolerated; anything else that is not
    the exact nine-field shape raises MalformedResponseError.
    """
    raw = (text or "").strip()
    fenced = _FENCE_RE.match(raw)
    if fenced:
        raw = fenced.group(1)

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise MalformedResponseError("Invalid JSON response from scoring") from e
    if not isinstance(data, dict):
        raise MalformedResponseError("Scoring response is not a JSON object")

    try:
        return ScoreCard.model_validate(data)
    except ValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        raise MalformedResponseError(f"Invalid scoring fields: {fields}") from e


@dataclass
class ScoringOutcome:
    scores: ScoreCard
    cached: bool


class ScoringEngine:
    def __init__(
        self,
        store: SessionStore,
        generator: TextGenerationService,
        max_tokens: int = settings.scoring_max_tokens,
    ):
        self.store = store
        self.generator = generator
        self.max_tokens = max_tokens

    async def generate_scores(self, transcript: str) -> ScoreCard:
        """One scoring call for a transcript (no persistence)"""
        if not transcript or not transcript.strip():
            raise InvalidInputError("Session has no transcript")
        text = await self.generator.generate(
            [{"role": "user", "content": build_scoring_prompt(transcript)}],
            max_tokens=self.max_tokens,
        )
        try:
            return parse_scores(text)
        except MalformedResponseError:
            logger.error("Failed to parse scores reply (%d chars)", len(text))
            raise

    async def score_session(self, session_id: int, user_id: int, *, force: bool = False) -> ScoringOutcome:
        """
        Score a session owned by user_id.

        Raises:
            NotFoundError: session missing or owned by someone else
            InvalidInputError: the session has no transcript
            UpstreamError / MalformedResponseError: scoring failed, nothing stored
        """
        session = await self.store.get_session(session_id, user_id)
        if session is None:
            raise NotFoundError("Session not found")
        if not (session.transcript or "").strip():
            raise InvalidInputError("Session has no transcript")

        if not force:
            existing = await self.store.get_session_scores(session_id, user_id)
            if existing is not None:
                return ScoringOutcome(scores=ScoreCard.from_record(existing), cached=True)

        scores = await self.generate_scores(session.transcript)
        await self.store.upsert_scores(session_id, user_id, scores)
        return ScoringOutcome(scores=scores, cached=False)

    async def backfill(self, user_id: int, limit: int = settings.backfill_default_limit) -> BackfillResult:
        """
        Score up to `limit` of the user's unscored sessions, oldest first.

        Each session is independent: a failure is recorded for that item and
        the batch carries on.
        """
        sessions = await self.store.get_sessions_without_scores(user_id, limit)
        if not sessions:
            return BackfillResult(message="All sessions already have scores", scored=0, total=0)

        results: List[BackfillItem] = []
        for session in sessions:
            if not (session.transcript or "").strip():
                results.append(BackfillItem(sessionId=session.id, status="skipped", reason="no transcript"))
                continue
            try:
                scores = await self.generate_scores(session.transcript)
                await self.store.upsert_scores(session.id, user_id, scores)
            except Exception as e:
                logger.error("Failed to score session %s: %s", session.id, e)
                results.append(BackfillItem(sessionId=session.id, status="error", error=str(e)))
                continue
            results.append(BackfillItem(sessionId=session.id, status="scored", overallScore=scores.overall_score))

        scored = sum(1 for r in results if r.status == "scored")
        return BackfillResult(
            message=f"Scored {scored} of {len(sessions)} sessions",
            scored=scored,
            total=len(sessions),
            results=results,
        )
