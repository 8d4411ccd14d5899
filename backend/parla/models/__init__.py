# parla/models/__init__.py
"""
Database models module initialization.
Exports all Tortoise ORM models for convenient imports.

Models exported:
- User: Learner account and coaching preferences
- PracticeSession: One completed conversation (transcript, summary, skill notes)
- SessionEmbedding: Embedding vector used for semantic recall
- SessionScores: Rubric scores for a session
"""
from .user import User
from .session import PracticeSession
from .session_embedding import SessionEmbedding
from .session_scores import SessionScores
