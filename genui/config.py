import os
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes")


def _env_float(name: str) -> Optional[float]:
    """Empty or unset means "let the provider decide"."""
    raw = os.getenv(name, "").strip()
    return float(raw) if raw else None


class Config:
    PORT = int(os.getenv("PORT", 3000))
    HOST = os.getenv("HOST", "0.0.0.0")
    DEBUG = _env_bool("DEBUG")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*").split(",")

    # Gemini
    GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")
    GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
    GEMINI_API_URL = os.getenv(
        "GEMINI_API_URL", "https://generativelanguage.googleapis.com/v1beta"
    )
    MODEL_TIMEOUT = float(os.getenv("MODEL_TIMEOUT", "60"))
    MODEL_MAX_RETRIES = int(os.getenv("MODEL_MAX_RETRIES", "3"))
    MODEL_TEMPERATURE = _env_float("MODEL_TEMPERATURE")

    # Pipeline
    PARALLEL_STAGES = _env_bool("PARALLEL_STAGES")
    MAX_MESSAGE_LENGTH = int(os.getenv("MAX_MESSAGE_LENGTH", "4000"))
    MAX_PREVIOUS_CODE_LENGTH = int(os.getenv("MAX_PREVIOUS_CODE_LENGTH", "50000"))


config = Config()
