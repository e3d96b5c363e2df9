"""
Configuration management for ProductLens.
Handles environment variables and application settings.
"""
import os
from typing import Optional
from dotenv import load_dotenv

load_dotenv()


class Config:
    """Application configuration loaded from environment variables."""

    # Server settings
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8000"))
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT: str = os.getenv("LOG_FORMAT", "json")  # json or console

    # Request settings (plain HTTP page loader)
    REQUEST_TIMEOUT: int = int(os.getenv("REQUEST_TIMEOUT", "30"))

    # Page loading
    PAGE_LOADER: str = os.getenv("PAGE_LOADER", "browser")  # browser or http
    BROWSER_HEADLESS: bool = os.getenv("BROWSER_HEADLESS", "true").lower() == "true"
    PAGE_LOAD_TIMEOUT: int = int(os.getenv("PAGE_LOAD_TIMEOUT", "45"))
    PAGE_WAIT_UNTIL: str = os.getenv("PAGE_WAIT_UNTIL", "networkidle")

    # Summaries (optional - products are returned without a summary otherwise)
    # Loaded from environment variables, NEVER hardcoded
    CLAUDE_API_KEY: Optional[str] = os.getenv("CLAUDE_API_KEY")
    SUMMARY_MODEL: str = os.getenv("SUMMARY_MODEL", "claude-3-5-haiku-20241022")
    SUMMARY_MAX_TOKENS: int = int(os.getenv("SUMMARY_MAX_TOKENS", "400"))
    SUMMARY_TIMEOUT: int = int(os.getenv("SUMMARY_TIMEOUT", "30"))

    # Canonical catalog
    CATALOG_DB_PATH: str = os.getenv("CATALOG_DB_PATH", "data/catalog.db")

    @classmethod
    def use_browser(cls) -> bool:
        """Whether pages are rendered with a headless browser."""
        return cls.PAGE_LOADER.lower() != "http"


config = Config()
