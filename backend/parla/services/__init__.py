"""
Services Module

Provider adapters and the coaching pipeline:
- Providers (OpenAI over HTTP): chat completions, embeddings, Whisper ASR, speech
- Store: Tortoise-backed query interface
- Pipeline: summarizer, skill-level estimator, context retriever, scoring engine
- Coach: request-level flows composed from the above
"""

# Provider interfaces and adapters
from .base import (
    ASRService,
    ChatMessage,
    EmbeddingService,
    TextGenerationService,
    TranscriptionResult,
    TTSService,
)
from .openai_chat import OpenAIChatService
from .embeddings import OpenAIEmbeddingService, cosine_similarity, create_embedding_content
from .asr_openai_adapter import OpenAIWhisperService
from .tts_openai import OpenAISpeechService

# Pipeline
from .store import SessionStore, SimilarSession
from .summarizer import ParsedSummary, SessionSummarizer, UnparsedSummary
from .skill_level import SkillLevelEstimator
from .context_retriever import ContextRetriever
from .scoring import ScoringEngine, ScoringOutcome
from .coach import CoachService, SavedSession

__all__ = [
    "ASRService",
    "ChatMessage",
    "EmbeddingService",
    "TextGenerationService",
    "TranscriptionResult",
    "TTSService",
    "OpenAIChatService",
    "OpenAIEmbeddingService",
    "OpenAIWhisperService",
    "OpenAISpeechService",
    "cosine_similarity",
    "create_embedding_content",
    "SessionStore",
    "SimilarSession",
    "ParsedSummary",
    "UnparsedSummary",
    "SessionSummarizer",
    "SkillLevelEstimator",
    "ContextRetriever",
    "ScoringEngine",
    "ScoringOutcome",
    "CoachService",
    "SavedSession",
]
