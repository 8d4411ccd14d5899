# parla/models/session_scores.py
from tortoise import fields, models
from tortoise.validators import MaxValueValidator, MinValueValidator

# 1-5 rubric scale
_SCALE = [MinValueValidator(1), MaxValueValidator(5)]


class SessionScores(models.Model):
    """
    PLIDA B1 rubric scores for one session.

    Unique per session (rescoring overwrites via update_or_create).
    """
    id = fields.IntField(pk=True)
    session = fields.OneToOneField(
        "models.PracticeSession",
        related_name="scores",
        on_delete=fields.CASCADE,
    )
    user = fields.ForeignKeyField("models.User", related_name="session_scores", on_delete=fields.CASCADE)
    fluency_coherence = fields.SmallIntField(validators=_SCALE)
    vocabulary_range = fields.SmallIntField(validators=_SCALE)
    grammar_accuracy = fields.SmallIntField(validators=_SCALE)
    grammar_range = fields.SmallIntField(validators=_SCALE)
    interaction = fields.SmallIntField(validators=_SCALE)
    overall_score = fields.SmallIntField(validators=_SCALE)
    feedback = fields.TextField(default="")
    strengths = fields.TextField(default="")
    areas_to_improve = fields.TextField(default="")
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "session_scores"
