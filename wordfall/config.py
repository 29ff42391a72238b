"""Configuration settings for Wordfall: loaded from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with env-driven overrides.

    All values can be overridden via environment variables prefixed with WORDFALL_.
    Example: WORDFALL_TICK_RATE_MS=32 overrides tick_rate_ms.

    Gameplay values are read once at startup; the engine never re-reads them.
    """

    # Gameplay constants
    max_hp: int = 100
    hp_penalty: int = 10  # HP lost per word that reaches the danger line
    max_active_words: int = 5
    spawn_interval_sec: float = 2.0  # pacing between periodic spawns

    # Frame clock
    tick_rate_ms: int = 16

    # HTTP server
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "info"

    model_config = SettingsConfigDict(
        env_prefix="WORDFALL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )
