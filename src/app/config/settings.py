import os
import logging
from functools import lru_cache
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel

# Configure logging
logger = logging.getLogger(__name__)

DEFAULT_GATEWAY_URL = "https://ai.gateway.lovable.dev/v1/chat/completions"
DEFAULT_MODEL = "google/gemini-3-flash-preview"


def _optional_float(value: Optional[str]) -> Optional[float]:
    if value is None or value.strip() == "":
        return None
    return float(value)


class Settings(BaseModel):
    """
    Process-wide configuration, read once at startup.

    Request handlers never call ``os.getenv`` themselves; they get this object
    (or the gateway built from it) through dependencies.
    """

    database_url: str = "sqlite:///./campus.db"
    secret_key: str = "your-secret-key-change-in-production"
    jwt_algorithm: str = "HS256"

    ai_gateway_url: str = DEFAULT_GATEWAY_URL
    ai_gateway_api_key: Optional[str] = None
    ai_model: str = DEFAULT_MODEL
    # None leaves the call bounded only by the hosting platform's deadline
    ai_request_timeout: Optional[float] = None

    plagiarism_flag_threshold: float = 40
    plagiarism_excerpt_chars: int = 1000
    plagiarism_min_comparison_chars: int = 50
    exam_eligibility_threshold: float = 75

    cors_origins: List[str] = ["http://localhost:3000"]
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        # Load environment variables from .env file
        load_dotenv()

        settings = cls(
            database_url=os.getenv("DATABASE_URL", "sqlite:///./campus.db"),
            secret_key=os.getenv("SECRET_KEY", "your-secret-key-change-in-production"),
            jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
            ai_gateway_url=os.getenv("AI_GATEWAY_URL", DEFAULT_GATEWAY_URL),
            ai_gateway_api_key=os.getenv("AI_GATEWAY_API_KEY") or None,
            ai_model=os.getenv("AI_MODEL", DEFAULT_MODEL),
            ai_request_timeout=_optional_float(os.getenv("AI_REQUEST_TIMEOUT")),
            plagiarism_flag_threshold=float(os.getenv("PLAGIARISM_FLAG_THRESHOLD", "40")),
            plagiarism_excerpt_chars=int(os.getenv("PLAGIARISM_EXCERPT_CHARS", "1000")),
            plagiarism_min_comparison_chars=int(os.getenv("PLAGIARISM_MIN_COMPARISON_CHARS", "50")),
            exam_eligibility_threshold=float(os.getenv("EXAM_ELIGIBILITY_THRESHOLD", "75")),
            cors_origins=[
                origin.strip()
                for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")
                if origin.strip()
            ],
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

        # Check for missing required configuration
        if not settings.ai_gateway_api_key:
            logger.error("Missing required AI gateway configuration: AI_GATEWAY_API_KEY")
            logger.error("AI endpoints will answer 'AI service not configured' until it is set")
        if os.getenv("SECRET_KEY") is None:
            logger.warning("SECRET_KEY is not set; using the development default")

        return settings


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()
