# parla/api/v1/routers/settings.py
from fastapi import APIRouter, Depends
from parla.api.v1.deps import get_current_user, get_services
from parla.config import TTS_SPEED_OPTIONS
from parla.core.bootstrap import ServiceContainer
from parla.core.errors import InvalidInputError
from parla.models.user import User
from parla.schemas.settings import PersonalityOut, SettingsOut, SettingsUpdateIn
from parla.services.personalities import get_all_personalities, is_valid_personality

router = APIRouter(tags=["settings"])

@router.get("/settings", response_model=dict)
async def get_settings(user: User = Depends(get_current_user)):
    """Current TTS speed (plus the allowed options) and coach personality."""
    out = SettingsOut(ttsSpeed=user.tts_speed, ttsSpeedOptions=TTS_SPEED_OPTIONS, personality=user.personality)
    return {"success": True, "data": out.model_dump()}

@router.post("/settings", response_model=dict)
async def update_settings(
    body: SettingsUpdateIn,
    user: User = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services),
):
    """
    Update TTS speed and/or coach personality.

    Raises:
        400: Speed not one of the allowed options, or unknown personality
    """
    if body.ttsSpeed is not None and body.ttsSpeed not in TTS_SPEED_OPTIONS:
        raise InvalidInputError("Invalid speed setting")
    if body.personality is not None and not is_valid_personality(body.personality):
        raise InvalidInputError("Invalid personality")

    await services.store.update_user_settings(user.id, tts_speed=body.ttsSpeed, personality=body.personality)
    out = SettingsOut(
        ttsSpeed=body.ttsSpeed if body.ttsSpeed is not None else user.tts_speed,
        ttsSpeedOptions=TTS_SPEED_OPTIONS,
        personality=body.personality or user.personality,
    )
    return {"success": True, "data": out.model_dump()}

@router.get("/personalities", response_model=dict)
async def list_personalities():
    """All coach personalities a user can pick from."""
    items = [
        PersonalityOut(id=p.id.value, name=p.name, voice=p.voice, description=p.description).model_dump()
        for p in get_all_personalities()
    ]
    return {"success": True, "data": {"items": items}}
