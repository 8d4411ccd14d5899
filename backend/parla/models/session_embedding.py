# parla/models/session_embedding.py
from tortoise import fields, models


class SessionEmbedding(models.Model):
    """
    Embedding of a session's summary, skill notes and transcript excerpt.

    Insert-if-absent: one row per session, never updated in place.
    The vector is stored as a JSON float array so ranking works on any backend.
    """
    id = fields.IntField(pk=True)
    session = fields.OneToOneField(
        "models.PracticeSession",
        related_name="embedding",
        on_delete=fields.CASCADE,
    )
    user = fields.ForeignKeyField("models.User", related_name="session_embeddings", on_delete=fields.CASCADE)
    embedding = fields.JSONField()  # list[float], fixed dimension
    content = fields.TextField(default="")  # Truncated digest of the embedded text
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "session_embeddings"
