# parla/models/session.py
"""
Database model for completed practice sessions.
A row is written once at the end of a conversation and is read-mostly
afterwards; scores and embeddings hang off it in their own tables.
"""
from tortoise import fields, models


class PracticeSession(models.Model):
    """
    One completed conversation between a learner and the coach.

    Relationships:
    - Belongs to a User (many-to-one)
    - Has at most one SessionEmbedding and one SessionScores row
    """
    id = fields.IntField(pk=True)
    user = fields.ForeignKeyField(
        "models.User",
        related_name="sessions",
        on_delete=fields.CASCADE,
    )
    date = fields.DatetimeField(auto_now_add=True)  # Creation timestamp
    topic = fields.CharField(max_length=256, default="")
    transcript = fields.TextField(default="")  # Speaker-tagged turns ("User: ...\nCoach: ...")
    summary = fields.TextField(default="")
    skill_notes = fields.TextField(default="")
    duration_seconds = fields.IntField(default=0)

    class Meta:
        table = "sessions"
        ordering = ["-date", "-id"]
