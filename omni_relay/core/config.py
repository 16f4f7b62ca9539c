import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

APP_VERSION = os.getenv("APP_VERSION", "1.0.0")

LOG_LEVEL_FROM_ENV = os.getenv("LOG_LEVEL", "INFO").upper()

API_TIMEOUT = int(os.getenv("API_TIMEOUT", "60"))
READ_TIMEOUT = float(os.getenv("READ_TIMEOUT", "60.0"))
MAX_CONNECTIONS = int(os.getenv("MAX_CONNECTIONS", "100"))

DEFAULT_GEMINI_API_BASE_URL = "https://generativelanguage.googleapis.com"
DEFAULT_GEMINI_MODEL = "gemini-2.5-flash-preview-09-2025"

DEFAULT_JUDGE0_API_URL = "https://judge0-ce.p.rapidapi.com/submissions"
DEFAULT_JUDGE0_API_HOST = "judge0-ce.p.rapidapi.com"


@dataclass(frozen=True)
class Settings:
    """Per-request view of the secrets and upstream endpoints."""

    gemini_api_key: str = ""
    gemini_api_base_url: str = DEFAULT_GEMINI_API_BASE_URL
    gemini_model: str = DEFAULT_GEMINI_MODEL
    judge0_api_key: str = ""
    judge0_api_url: str = DEFAULT_JUDGE0_API_URL
    judge0_api_host: str = DEFAULT_JUDGE0_API_HOST

    @property
    def gemini_generate_url(self) -> str:
        return f"{self.gemini_api_base_url.rstrip('/')}/v1beta/models/{self.gemini_model}:generateContent"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            gemini_api_key=os.getenv("GEMINI_API_KEY", ""),
            gemini_api_base_url=os.getenv("GEMINI_API_BASE_URL") or DEFAULT_GEMINI_API_BASE_URL,
            gemini_model=os.getenv("GEMINI_MODEL") or DEFAULT_GEMINI_MODEL,
            judge0_api_key=os.getenv("JUDGE0_API_KEY", ""),
            judge0_api_url=os.getenv("JUDGE0_API_URL") or DEFAULT_JUDGE0_API_URL,
            judge0_api_host=os.getenv("JUDGE0_API_HOST") or DEFAULT_JUDGE0_API_HOST,
        )


def get_settings() -> Settings:
    """
    FastAPI dependency. Secrets are read on every request, never cached, so a
    rotated key takes effect without a restart.
    """
    return Settings.from_env()
