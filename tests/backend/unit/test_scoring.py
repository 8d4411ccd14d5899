"""
Unit tests for services.scoring module.
Tests reply parsing, per-session caching and the backfill batch.
"""
import json

import pytest
from unittest.mock import AsyncMock
from parla.core.errors import (
    InvalidInputError,
    MalformedResponseError,
    NotFoundError,
    UpstreamError,
)
from parla.models import SessionScores
from parla.services.scoring import ScoringEngine, parse_scores
from parla.services.store import SessionStore


VALID_SCORES = {
    "fluencyCoherence": 3,
    "vocabularyRange": 4,
    "grammarAccuracy": 2,
    "grammarRange": 3,
    "interaction": 4,
    "overallScore": 3,
    "feedback": "Good effort overall.",
    "strengths": "Natural interaction.",
    "areasToImprove": "Articles and prepositions.",
}


def _reply(**overrides) -> str:
    data = dict(VALID_SCORES)
    data.update(overrides)
    return json.dumps(data)


class TestParseScores:
    def test_plain_json(self):
        card = parse_scores(_reply())
        assert card.overall_score == 3
        assert card.areas_to_improve == "Articles and prepositions."

    def test_fenced_json(self):
        card = parse_scores("```json\n" + _reply(overallScore=5) + "\n```")
        assert card.overall_score == 5

    def test_bare_fence(self):
        assert parse_scores("```\n" + _reply() + "\n```").interaction == 4

    def test_missing_field(self):
        data = dict(VALID_SCORES)
        del data["overallScore"]
        with pytest.raises(MalformedResponseError):
            parse_scores(json.dumps(data))

    @pytest.mark.parametrize("value", [0, 6, "4", 3.5, True, None])
    def test_out_of_range_or_wrong_type(self, value):
        with pytest.raises(MalformedResponseError):
            parse_scores(_reply(grammarRange=value))

    def test_non_string_feedback(self):
        with pytest.raises(MalformedResponseError):
            parse_scores(_reply(feedback=["a", "b"]))

    def test_not_json(self):
        with pytest.raises(MalformedResponseError):
            parse_scores("Here are the scores: great job!")

    def test_json_array(self):
        with pytest.raises(MalformedResponseError):
            parse_scores("[1, 2, 3]")


async def _session(user, transcript="User: Ciao\nCoach: Ciao! Come stai?"):
    return await SessionStore().create_session(user.id, transcript, "summary", "notes", 120)


class TestScoringEngine:
    @pytest.mark.asyncio
    async def test_scores_are_cached(self, db, create_user):
        user, _ = await create_user()
        session = await _session(user)
        generator = AsyncMock()
        generator.generate.return_value = _reply()
        engine = ScoringEngine(SessionStore(), generator, max_tokens=1000)

        first = await engine.score_session(session.id, user.id)
        second = await engine.score_session(session.id, user.id)

        assert first.cached is False
        assert second.cached is True
        assert second.scores == first.scores
        assert generator.generate.await_count == 1
        assert generator.generate.call_args[1]["max_tokens"] == 1000

    @pytest.mark.asyncio
    async def test_force_rescores_and_overwrites(self, db, create_user):
        user, _ = await create_user()
        session = await _session(user)
        generator = AsyncMock()
        generator.generate.side_effect = [_reply(overallScore=2), _reply(overallScore=4)]
        engine = ScoringEngine(SessionStore(), generator)

        await engine.score_session(session.id, user.id)
        outcome = await engine.score_session(session.id, user.id, force=True)

        assert outcome.cached is False
        assert outcome.scores.overall_score == 4
        assert await SessionScores.filter(session_id=session.id).count() == 1
        assert (await SessionScores.get(session_id=session.id)).overall_score == 4

    @pytest.mark.asyncio
    async def test_malformed_reply_stores_nothing(self, db, create_user):
        user, _ = await create_user()
        session = await _session(user)
        generator = AsyncMock()
        data = dict(VALID_SCORES)
        del data["interaction"]
        generator.generate.return_value = json.dumps(data)

        with pytest.raises(MalformedResponseError):
            await ScoringEngine(SessionStore(), generator).score_session(session.id, user.id)
        assert await SessionScores.filter(session_id=session.id).count() == 0

    @pytest.mark.asyncio
    async def test_other_users_session_is_not_found(self, db, create_user):
        owner, _ = await create_user()
        stranger, _ = await create_user()
        session = await _session(owner)
        generator = AsyncMock()

        with pytest.raises(NotFoundError):
            await ScoringEngine(SessionStore(), generator).score_session(session.id, stranger.id)
        generator.generate.assert_not_called()

    @pytest.mark.asyncio
    async def test_session_without_transcript(self, db, create_user):
        user, _ = await create_user()
        session = await _session(user, transcript="")
        generator = AsyncMock()

        with pytest.raises(InvalidInputError):
            await ScoringEngine(SessionStore(), generator).score_session(session.id, user.id)
        generator.generate.assert_not_called()

    @pytest.mark.asyncio
    async def test_backfill_reports_each_session(self, db, create_user):
        user, _ = await create_user()
        empty = await _session(user, transcript="")
        good = await _session(user)
        broken = await _session(user)
        generator = AsyncMock()
        generator.generate.side_effect = [_reply(overallScore=4), UpstreamError("timeout")]

        result = await ScoringEngine(SessionStore(), generator).backfill(user.id, limit=10)

        assert result.total == 3
        assert result.scored == 1
        assert result.message == "Scored 1 of 3 sessions"
        by_id = {item.sessionId: item for item in result.results}
        assert by_id[empty.id].status == "skipped"
        assert by_id[empty.id].reason == "no transcript"
        assert by_id[good.id].status == "scored"
        assert by_id[good.id].overallScore == 4
        assert by_id[broken.id].status == "error"

    @pytest.mark.asyncio
    async def test_backfill_skips_whitespace_transcript(self, db, create_user):
        user, _ = await create_user()
        blank = await _session(user, transcript="  \n\t ")
        generator = AsyncMock()

        result = await ScoringEngine(SessionStore(), generator).backfill(user.id)

        assert [(item.sessionId, item.status, item.reason) for item in result.results] == [
            (blank.id, "skipped", "no transcript"),
        ]
        generator.generate.assert_not_called()

    @pytest.mark.asyncio
    async def test_whitespace_transcript_is_invalid_input(self, db, create_user):
        user, _ = await create_user()
        session = await _session(user, transcript="   ")
        with pytest.raises(InvalidInputError):
            await ScoringEngine(SessionStore(), AsyncMock()).score_session(session.id, user.id)

    @pytest.mark.asyncio
    async def test_backfill_with_nothing_to_do(self, db, create_user):
        user, _ = await create_user()
        generator = AsyncMock()
        result = await ScoringEngine(SessionStore(), generator).backfill(user.id)
        assert result.message == "All sessions already have scores"
        assert result.total == 0
        generator.generate.assert_not_called()
