# parla/models/user.py
"""
Database model for users.
Represents a learner account: credentials, display name, and the mutable
coaching state (skill level, coach personality, TTS speed).
"""
from tortoise import fields, models


class User(models.Model):
    """
    User database model.

    Relationships:
    - Has many PracticeSessions (one-to-many, via related_name="sessions")

    The skill level is only written by the skill-level estimator after a
    session is saved; everything else is user-editable settings.
    """
    id = fields.IntField(pk=True)
    email = fields.CharField(max_length=256, unique=True, index=True)  # Login identifier
    password_hash = fields.CharField(max_length=255)  # Argon2 hash, never plain text
    name = fields.CharField(max_length=128)  # Display name used in prompts
    skill_level = fields.CharField(max_length=16, default="beginner")  # beginner | intermediate | advanced
    personality = fields.CharField(max_length=16, default="maria")  # Coach personality id
    tts_speed = fields.FloatField(default=0.85)  # One of TTS_SPEED_OPTIONS
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        """Tortoise ORM metadata configuration."""
        table = "users"
