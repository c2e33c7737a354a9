"""Application configuration helpers."""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"
DEFAULT_OPENROUTER_MODEL = "google/gemini-2.0-flash-001"
DEFAULT_GEOCODER_USER_AGENT = "PharmTalk/1.0"
MAX_SEARCH_RADIUS_METERS = 5000.0


class ConfigError(RuntimeError):
    """Raised when mandatory configuration is missing."""


@dataclass(frozen=True)
class Settings:
    naver_client_id: str
    naver_client_secret: str
    public_data_api_key: str = ""
    openrouter_api_key: str = ""
    openrouter_base_url: str = DEFAULT_OPENROUTER_BASE_URL
    openrouter_model: str = DEFAULT_OPENROUTER_MODEL
    geocoder_user_agent: str = DEFAULT_GEOCODER_USER_AGENT
    server_port: int = 8080
    search_radius_meters: float = MAX_SEARCH_RADIUS_METERS

    @property
    def has_search_credentials(self) -> bool:
        return bool(self.naver_client_id and self.naver_client_secret)

    def require_search_credentials(self) -> None:
        if not self.has_search_credentials:
            raise ConfigError("NAVER_CLIENT_ID and NAVER_CLIENT_SECRET must be set for pharmacy search.")

    def require_llm_credentials(self) -> None:
        if not self.openrouter_api_key:
            raise ConfigError("OPENROUTER_API_KEY must be set for AI endpoints.")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from environment variables with sensible defaults."""
    load_dotenv()

    naver_client_id = os.getenv("NAVER_CLIENT_ID", "")
    naver_client_secret = os.getenv("NAVER_CLIENT_SECRET", "")
    public_data_api_key = os.getenv("PUBLIC_DATA_API_KEY", "")
    openrouter_api_key = os.getenv("OPENROUTER_API_KEY", "")
    openrouter_base_url = (os.getenv("OPENROUTER_BASE_URL") or DEFAULT_OPENROUTER_BASE_URL).rstrip("/")
    openrouter_model = os.getenv("OPENROUTER_MODEL") or DEFAULT_OPENROUTER_MODEL
    geocoder_user_agent = os.getenv("GEOCODER_USER_AGENT") or DEFAULT_GEOCODER_USER_AGENT
    server_port = int(os.getenv("PORT") or os.getenv("SERVER_PORT") or "8080")
    search_radius_meters = float(os.getenv("SEARCH_RADIUS_METERS", "5000"))
    if search_radius_meters > MAX_SEARCH_RADIUS_METERS:
        logger.warning(
            "SEARCH_RADIUS_METERS=%s exceeds the %s m limit; capping.", search_radius_meters, MAX_SEARCH_RADIUS_METERS
        )
        search_radius_meters = MAX_SEARCH_RADIUS_METERS

    if not naver_client_id or not naver_client_secret:
        logger.warning("NAVER_CLIENT_ID/NAVER_CLIENT_SECRET are not configured; pharmacy search will fail.")
    if not public_data_api_key:
        logger.warning("PUBLIC_DATA_API_KEY is not configured; opening hours will be estimated.")
    if not openrouter_api_key:
        logger.warning("OPENROUTER_API_KEY is not configured; AI endpoints will fail.")

    return Settings(
        naver_client_id=naver_client_id,
        naver_client_secret=naver_client_secret,
        public_data_api_key=public_data_api_key,
        openrouter_api_key=openrouter_api_key,
        openrouter_base_url=openrouter_base_url,
        openrouter_model=openrouter_model,
        geocoder_user_agent=geocoder_user_agent,
        server_port=server_port,
        search_radius_meters=search_radius_meters,
    )
