# parla/schemas/session.py
"""
Pydantic schemas for practice sessions and chat turns.
"""
from typing import List, Literal, Optional
from pydantic import BaseModel, Field


class ChatTurn(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class ChatRequest(BaseModel):
    """Body of POST /chat"""
    message: str = ""
    history: List[ChatTurn] = []
    isGreeting: bool = False


class ChatResponse(BaseModel):
    response: str


class SaveSessionRequest(BaseModel):
    """Body of POST /sessions"""
    transcript: str = ""
    durationSeconds: int = Field(default=0, ge=0)


class SessionOut(BaseModel):
    """A stored practice session"""
    id: int
    date: str  # ISO timestamp
    topic: str = ""
    transcript: str = ""
    summary: str = ""
    skillNotes: str = ""
    durationSeconds: int = 0
    overallScore: Optional[int] = None  # Present in list views once scored


class SaveSessionResponse(BaseModel):
    session: SessionOut
    summary: str
    skillNotes: str
    skillLevel: str  # Level after re-estimation


class ProgressSummaryResponse(BaseModel):
    summary: Optional[str] = None
    sessionCount: int = 0
    message: Optional[str] = None
