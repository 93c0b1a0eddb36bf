"""Configuration management using Pydantic and environment variables."""

from pathlib import Path
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Browser
    browser_type: Literal["chromium", "firefox", "webkit"] = Field(
        default="chromium", description="Browser engine to launch"
    )
    headless: bool = Field(default=False, description="Launch browser headless")
    cdp_endpoint: Optional[str] = Field(
        default=None,
        description="Connect to a running Chromium over CDP instead of launching "
        "(e.g. http://127.0.0.1:9222)",
    )

    # Completion gate
    completion_timeout_ms: int = Field(
        default=10000,
        ge=0,
        description="Max time to wait for requests/navigation started by a tool call",
    )
    settle_timeout_ms: int = Field(
        default=1000, ge=0, description="Extra delay after the page has settled"
    )

    # Code execution
    keep_indentation: bool = Field(
        default=False,
        description="Keep relative indentation of submitted code instead of "
        "trimming every line",
    )
    codegen: Literal["python", "none"] = Field(
        default="python", description="Echo executed code in tool responses"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")


def load_config(env_file: Optional[Path] = None) -> Config:
    """
    Load configuration from environment variables and .env file.

    Args:
        env_file: Optional path to .env file. If None, looks for .env in current directory.

    Returns:
        Config instance with loaded settings.
    """
    if env_file:
        return Config(_env_file=env_file)

    return Config()
