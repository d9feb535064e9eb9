"""Configuration settings for the swipe service"""
import logging
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    Application settings.

    Priority (highest to lowest):
    1. Environment variables
    2. .env file
    3. Default values
    """

    # Service Identity
    SERVICE_NAME: str = "swipe-ai"
    SERVICE_PORT: int = 5001
    LOG_LEVEL: str = "INFO"

    # AI APIs - checked lazily by the providers, never at import time
    ANTHROPIC_API_KEY: str = ""
    GOOGLE_GEMINI_API_KEY: str = ""

    # Text generation (Anthropic Messages API)
    CLAUDE_MODEL: str = "claude-sonnet-4-20250514"
    ANTHROPIC_BASE_URL: str = "https://api.anthropic.com"

    # Vision generation (Gemini generateContent)
    GEMINI_MODEL: str = "gemini-2.0-flash"
    GEMINI_API_BASE: str = "https://generativelanguage.googleapis.com/v1beta"
    GEMINI_ERROR_BODY_LIMIT: int = 300

    # Seconds before a single model request is abandoned
    MODEL_REQUEST_TIMEOUT: float = 300.0

    # Headless browser / page capture
    BROWSER_HEADLESS: bool = True
    VIEWPORT_WIDTH: int = 1440
    VIEWPORT_HEIGHT: int = 900
    USER_AGENT: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/120.0.0.0 Safari/537.36"
    )
    PAGE_LOAD_TIMEOUT_MS: int = 25000
    NETWORK_IDLE_TIMEOUT_MS: int = 10000
    SETTLE_DELAY_SECONDS: float = 3.0
    SCROLL_PAUSE_SECONDS: float = 0.2
    POST_SCROLL_DELAY_SECONDS: float = 1.5
    SCREENSHOT_QUALITY: int = 70

    # Content budgets (characters)
    LANDING_HTML_BUDGET: int = 30000
    DESIGN_REFERENCE_CSS_LIMIT: int = 15000
    DESIGN_REFERENCE_PREVIEW_LIMIT: int = 5000
    BODY_COPY_LIMIT: int = 800

    # Per-stage generation settings
    PRODUCT_ANALYZER_MAX_TOKENS: int = 4096
    PRODUCT_ANALYZER_TEMPERATURE: float = 0.4
    LANDING_ANALYZER_MAX_TOKENS: int = 8192
    LANDING_ANALYZER_TEMPERATURE: float = 0.3
    CRO_ARCHITECT_MAX_TOKENS: int = 12000
    CRO_ARCHITECT_TEMPERATURE: float = 0.5
    HTML_BUILDER_MAX_TOKENS: int = 16000
    HTML_BUILDER_TEMPERATURE: float = 0.6

    # SSE keepalive ping interval (seconds)
    SSE_KEEPALIVE_SECONDS: float = 15.0

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


# Global settings instance
settings = Settings()


def _mask(secret: str) -> str:
    return "*" * 20 + secret[-4:] if secret else "NOT SET"


def log_settings_summary():
    """Log the effective configuration (mask sensitive values)"""
    logger.info(f"Service: {settings.SERVICE_NAME}")
    logger.info(f"Port: {settings.SERVICE_PORT}")
    logger.info(f"Anthropic API Key: {_mask(settings.ANTHROPIC_API_KEY)}")
    logger.info(f"Gemini API Key: {_mask(settings.GOOGLE_GEMINI_API_KEY)}")
    logger.info(f"Text model: {settings.CLAUDE_MODEL}, vision model: {settings.GEMINI_MODEL}")
    logger.info(
        f"Browser: headless={settings.BROWSER_HEADLESS}, "
        f"viewport={settings.VIEWPORT_WIDTH}x{settings.VIEWPORT_HEIGHT}"
    )
