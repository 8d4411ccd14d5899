# parla/config.py
import os
from pydantic import BaseModel, Field, field_validator
from dotenv import load_dotenv

load_dotenv()  # Load environment variables from .env file

# Allowed TTS playback speeds (ten steps from slow to slightly fast)
TTS_SPEED_OPTIONS: list[float] = [0.5, 0.6, 0.7, 0.8, 0.85, 0.9, 1.0, 1.1, 1.2, 1.3]


class Settings(BaseModel):
    # General app settings
    APP_NAME: str = "Parla Coach API"
    env: str = os.getenv("ENV", "dev")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # Host & Port settings
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "8000"))

    # CORS origins for frontend
    CORS_ORIGINS: list[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # Create tables on startup (dev / SQLite only; use Aerich migrations otherwise)
    db_generate_schemas: bool = os.getenv("DB_GENERATE_SCHEMAS", "false").lower() in ("true", "1", "yes")

    # OpenAI API settings (chat, embeddings, Whisper, speech)
    openai_api_key: str | None = os.getenv("OPENAI_API_KEY")
    openai_api_base: str = os.getenv("OPENAI_API_BASE", "https://api.openai.com/v1")
    http_timeout_sec: float = float(os.getenv("HTTP_TIMEOUT_SEC", "60"))

    chat_model: str = os.getenv("CHAT_MODEL", "gpt-4o-mini")
    embedding_model: str = os.getenv("EMBEDDING_MODEL", "text-embedding-3-small")
    embedding_dimensions: int = int(os.getenv("EMBEDDING_DIMENSIONS", "1536"))
    whisper_model: str = os.getenv("WHISPER_MODEL", "whisper-1")
    transcription_language: str = os.getenv("TRANSCRIPTION_LANGUAGE", "it")
    tts_model: str = os.getenv("TTS_MODEL", "tts-1")
    default_tts_speed: float = Field(default=float(os.getenv("DEFAULT_TTS_SPEED", "0.85")), validate_default=True)

    # Output token bounds per generation call
    chat_max_tokens: int = 1024
    summary_max_tokens: int = 500
    classify_max_tokens: int = 20
    scoring_max_tokens: int = 1000
    progress_max_tokens: int = 1500

    # Context retrieval tuning (empirical defaults)
    recency_window: int = int(os.getenv("RECENCY_WINDOW", "3"))
    relevance_threshold: float = float(os.getenv("RELEVANCE_THRESHOLD", "0.7"))
    relevance_limit: int = int(os.getenv("RELEVANCE_LIMIT", "2"))
    relevance_turns: int = int(os.getenv("RELEVANCE_TURNS", "4"))
    skill_notes_window: int = 3

    # Scoring backfill
    backfill_default_limit: int = int(os.getenv("BACKFILL_DEFAULT_LIMIT", "10"))
    backfill_secret: str | None = os.getenv("BACKFILL_SECRET")

    @field_validator("default_tts_speed")
    @classmethod
    def check_tts_speed(cls, v: float) -> float:
        if v not in TTS_SPEED_OPTIONS:
            raise ValueError(f"DEFAULT_TTS_SPEED must be one of {TTS_SPEED_OPTIONS}")
        return v

settings = Settings()  # Instantiate configuration
