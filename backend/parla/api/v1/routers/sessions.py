# parla/api/v1/routers/sessions.py
import logging
import secrets
from fastapi import APIRouter, Depends, Header, Request
from parla.api.v1.deps import get_current_user, get_services
from parla.config import settings
from parla.core.bootstrap import ServiceContainer
from parla.core.errors import InvalidInputError, NotFoundError
from parla.models import PracticeSession, User
from parla.schemas.scores import BackfillRequest, ScoreCard, ScoreRequest, ScoreResponse
from parla.schemas.session import ProgressSummaryResponse, SaveSessionRequest, SaveSessionResponse, SessionOut

logger = logging.getLogger("uvicorn.error")

router = APIRouter(prefix="/sessions", tags=["sessions"])

SESSION_LIST_LIMIT = 50

def _session_out(s: PracticeSession, overall_score: int | None = None) -> SessionOut:
    return SessionOut(
        id=s.id,
        date=s.date.isoformat(),
        topic=s.topic or "",
        transcript=s.transcript or "",
        summary=s.summary or "",
        skillNotes=s.skill_notes or "",
        durationSeconds=s.duration_seconds or 0,
        overallScore=overall_score,
    )

def _parse_session_id(sid: str) -> int:
    try:
        return int(sid)
    except ValueError:
        raise InvalidInputError("Invalid session ID")

@router.post("", response_model=dict)
async def save_session(
    body: SaveSessionRequest,
    user: User = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services),
):
    """
    Save a finished conversation.

    Summarizes the transcript, stores the session, embeds it for later recall
    (best effort) and re-estimates the learner's skill level.

    Raises:
        400: No transcript provided
        502: Summarization failed (nothing was saved)
    """
    if not body.transcript or not body.transcript.strip():
        raise InvalidInputError("No transcript provided")
    saved = await services.coach.save_session(user, body.transcript, body.durationSeconds)
    out = SaveSessionResponse(
        session=_session_out(saved.session),
        summary=saved.summary,
        skillNotes=saved.skill_notes,
        skillLevel=saved.skill_level,
    )
    return {"success": True, "data": out.model_dump()}

@router.get("", response_model=dict)
async def list_sessions(
    user: User = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services),
):
    """List the user's most recent sessions (newest first) with their overall score when scored."""
    rows = await services.store.list_sessions(user.id, SESSION_LIST_LIMIT)
    items = []
    for s in rows:
        scores = s.scores
        items.append(_session_out(s, scores.overall_score if scores else None).model_dump())
    return {"success": True, "data": {"items": items}}

@router.get("/summary", response_model=dict)
async def progress_summary(
    user: User = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services),
):
    """Narrative progress analysis over the user's recent history."""
    result = await services.coach.progress_summary(user)
    if result is None:
        out = ProgressSummaryResponse(
            summary=None,
            sessionCount=0,
            message="No sessions yet. Start a conversation to begin tracking your progress!",
        )
    else:
        text, count = result
        out = ProgressSummaryResponse(summary=text, sessionCount=count)
    return {"success": True, "data": out.model_dump(exclude_none=result is not None)}

@router.post("/backfill-scores", response_model=dict)
async def backfill_scores(
    request: Request,
    body: BackfillRequest | None = None,
    authorization: str | None = Header(default=None),
    services: ServiceContainer = Depends(get_services),
):
    """
    Score sessions that have no scores yet.

    Authenticated either by the usual token, or by BACKFILL_SECRET + email
    (for operator-driven bulk runs). Each session succeeds or fails on its own.
    """
    body = body or BackfillRequest()
    if body.secret and body.email and settings.backfill_secret \
            and secrets.compare_digest(body.secret, settings.backfill_secret):
        user = await services.store.get_user_by_email(body.email.strip().lower())
        if not user:
            raise NotFoundError("User not found")
    else:
        user = await get_current_user(request, authorization)

    limit = body.limit or settings.backfill_default_limit
    result = await services.scoring.backfill(user.id, limit)
    logger.info("[backfill] user=%s %s", user.id, result.message)
    return {"success": True, "data": result.model_dump()}

@router.get("/{sid}", response_model=dict)
async def get_session_detail(
    sid: str,
    user: User = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services),
):
    """Get one session. Sessions of other users are reported as not found."""
    session = await services.store.get_session(_parse_session_id(sid), user.id)
    if not session:
        raise NotFoundError("Session not found")
    return {"success": True, "data": {"session": _session_out(session).model_dump()}}

@router.post("/{sid}/score", response_model=dict)
async def score_session(
    sid: str,
    body: ScoreRequest | None = None,
    user: User = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services),
):
    """
    Score a session against the PLIDA B1 rubric.

    Returns the cached scores unless force is true.

    Raises:
        400: Invalid session id, or session has no transcript
        404: Session not found for this user
        502: Scoring call failed or returned an invalid shape
    """
    force = body.force if body else False
    outcome = await services.scoring.score_session(_parse_session_id(sid), user.id, force=force)
    out = ScoreResponse(scores=outcome.scores, cached=outcome.cached)
    return {"success": True, "data": out.model_dump(by_alias=True)}

@router.get("/{sid}/score", response_model=dict)
async def get_session_scores(
    sid: str,
    user: User = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services),
):
    """Get stored scores for a session."""
    row = await services.store.get_session_scores(_parse_session_id(sid), user.id)
    if not row:
        raise NotFoundError("No scores found")
    return {"success": True, "data": {"scores": ScoreCard.from_record(row).model_dump(by_alias=True)}}
