# parla/schemas/settings.py
"""
Pydantic schemas for user settings and coach personalities.
"""
from typing import List, Optional
from pydantic import BaseModel


class SettingsOut(BaseModel):
    ttsSpeed: float
    ttsSpeedOptions: List[float]
    personality: str


class SettingsUpdateIn(BaseModel):
    """Partial update; omitted fields are left unchanged"""
    ttsSpeed: Optional[float] = None
    personality: Optional[str] = None


class PersonalityOut(BaseModel):
    id: str
    name: str
    voice: str
    description: str


class SpeakRequest(BaseModel):
    text: str
