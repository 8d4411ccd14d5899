# parla/core/bootstrap.py
"""
Bootstrap module for application initialization.
Builds the provider clients and pipeline services once per process; the
resulting container lives on app.state and is handed to routers through a
dependency.
"""
import logging
from dataclasses import dataclass

from parla.config import Settings
from parla.services import (
    ASRService,
    CoachService,
    ContextRetriever,
    EmbeddingService,
    OpenAIChatService,
    OpenAIEmbeddingService,
    OpenAISpeechService,
    OpenAIWhisperService,
    ScoringEngine,
    SessionStore,
    SessionSummarizer,
    SkillLevelEstimator,
    TextGenerationService,
    TTSService,
)

logger = logging.getLogger("uvicorn.error")


@dataclass
class ServiceContainer:
    store: SessionStore
    generator: TextGenerationService
    embedder: EmbeddingService
    asr: ASRService
    tts: TTSService
    coach: CoachService
    scoring: ScoringEngine


def assemble_services(
    store: SessionStore,
    generator: TextGenerationService,
    embedder: EmbeddingService,
    asr: ASRService,
    tts: TTSService,
    settings: Settings,
) -> ServiceContainer:
    """Wire pipeline components on top of the given collaborators"""
    retriever = ContextRetriever(
        store,
        embedder,
        recency_window=settings.recency_window,
        threshold=settings.relevance_threshold,
        limit=settings.relevance_limit,
        query_turns=settings.relevance_turns,
    )
    coach = CoachService(
        store=store,
        generator=generator,
        embedder=embedder,
        summarizer=SessionSummarizer(generator, settings.summary_max_tokens),
        estimator=SkillLevelEstimator(generator, settings.classify_max_tokens),
        retriever=retriever,
    )
    scoring = ScoringEngine(store, generator, settings.scoring_max_tokens)
    return ServiceContainer(
        store=store,
        generator=generator,
        embedder=embedder,
        asr=asr,
        tts=tts,
        coach=coach,
        scoring=scoring,
    )


def build_services(settings: Settings) -> ServiceContainer:
    """Create the OpenAI-backed container for this process"""
    if not settings.openai_api_key:
        logger.warning("[bootstrap] OPENAI_API_KEY not set -> provider calls will fail with UPSTREAM_FAILED.")

    return assemble_services(
        store=SessionStore(),
        generator=OpenAIChatService(
            api_key=settings.openai_api_key,
            model=settings.chat_model,
            api_base=settings.openai_api_base,
            timeout=settings.http_timeout_sec,
        ),
        embedder=OpenAIEmbeddingService(
            api_key=settings.openai_api_key,
            model=settings.embedding_model,
            api_base=settings.openai_api_base,
            dimensions=settings.embedding_dimensions,
        ),
        asr=OpenAIWhisperService(
            api_key=settings.openai_api_key,
            model=settings.whisper_model,
            api_base=settings.openai_api_base,
        ),
        tts=OpenAISpeechService(
            api_key=settings.openai_api_key,
            model=settings.tts_model,
            api_base=settings.openai_api_base,
            timeout=settings.http_timeout_sec,
        ),
        settings=settings,
    )
