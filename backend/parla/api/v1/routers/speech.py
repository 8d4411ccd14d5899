# parla/api/v1/routers/speech.py
"""
Speech endpoints: browser recordings in, coach audio out.
"""
import io
from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import StreamingResponse
from parla.api.v1.deps import get_current_user, get_services
from parla.config import settings
from parla.core.bootstrap import ServiceContainer
from parla.core.errors import InvalidInputError
from parla.models.user import User
from parla.schemas.settings import SpeakRequest
from parla.services.personalities import get_personality

router = APIRouter(tags=["speech"])

@router.post("/transcribe", response_model=dict)
async def transcribe(
    audio: UploadFile | None = File(default=None),
    user: User = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services),
):
    """
    Transcribe one recorded learner utterance (Italian language hint).

    Raises:
        400: No audio file provided
        502: Transcription failed
    """
    if audio is None:
        raise InvalidInputError("No audio file provided")
    data = await audio.read()
    if not data:
        raise InvalidInputError("No audio file provided")
    result = await services.asr.transcribe(
        data,
        filename=audio.filename or "audio.webm",
        language=settings.transcription_language,
    )
    return {"success": True, "data": {"text": result.full_text}}

@router.post("/speak")
async def speak(
    body: SpeakRequest,
    user: User = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services),
):
    """
    Synthesize a coach reply with the user's personality voice and TTS speed.

    Returns:
        audio/mpeg stream
    """
    if not body.text or not body.text.strip():
        raise InvalidInputError("No text provided")
    voice = get_personality(user.personality).voice
    audio = await services.tts.synthesize(body.text, voice, user.tts_speed)
    return StreamingResponse(
        io.BytesIO(audio),
        media_type="audio/mpeg",
        headers={
            "Content-Disposition": "inline; filename=speech.mp3",
            "Content-Length": str(len(audio)),
            "Cache-Control": "no-cache",
        },
    )
