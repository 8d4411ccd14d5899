# parla/schemas/scores.py
"""
Pydantic schemas for rubric scoring.
ScoreCard is the exact nine-field shape the scoring model must return;
anything else is rejected before persistence.
"""
from typing import Annotated, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field

# Integer in [1, 5]; strict so "4" / 4.0 / True are rejected
RubricScore = Annotated[int, Field(strict=True, ge=1, le=5)]


class ScoreCard(BaseModel):
    """
    Rubric assessment of one transcript.
    Field names on the wire are camelCase (as requested in the scoring prompt).
    """
    model_config = ConfigDict(populate_by_name=True)

    fluency_coherence: RubricScore = Field(alias="fluencyCoherence")
    vocabulary_range: RubricScore = Field(alias="vocabularyRange")
    grammar_accuracy: RubricScore = Field(alias="grammarAccuracy")
    grammar_range: RubricScore = Field(alias="grammarRange")
    interaction: RubricScore = Field(alias="interaction")
    overall_score: RubricScore = Field(alias="overallScore")
    feedback: Annotated[str, Field(strict=True)] = Field(alias="feedback")
    strengths: Annotated[str, Field(strict=True)] = Field(alias="strengths")
    areas_to_improve: Annotated[str, Field(strict=True)] = Field(alias="areasToImprove")

    @classmethod
    def from_record(cls, row) -> "ScoreCard":
        """Build from a stored SessionScores row"""
        return cls(**{name: getattr(row, name) for name in cls.model_fields})


class ScoreRequest(BaseModel):
    """Body of POST /sessions/{id}/score"""
    force: bool = False


class ScoreResponse(BaseModel):
    scores: ScoreCard
    cached: bool


class BackfillRequest(BaseModel):
    """Body of POST /sessions/backfill-scores"""
    limit: Optional[int] = Field(default=None, ge=1, le=100)
    secret: Optional[str] = None
    email: Optional[str] = None


class BackfillItem(BaseModel):
    """Outcome for one session in a backfill batch"""
    sessionId: int
    status: Literal["scored", "skipped", "error"]
    overallScore: Optional[int] = None
    reason: Optional[str] = None
    error: Optional[str] = None


class BackfillResult(BaseModel):
    message: str
    scored: int
    total: int
    results: List[BackfillItem] = []
