"""
config.py - Konfiguracja aplikacji przez zmienne środowiskowe.
Wszystkie zmienne mają prefiks MEMOCALC_.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Evaluator - limit zagnieżdżenia (ochrona przed RecursionError)
    max_depth: int = 200

    # Logging
    log_level: str = "INFO"

    # App
    app_title: str = "MemoCalc"
    app_version: str = "0.1.0"

    model_config = SettingsConfigDict(env_prefix="MEMOCALC_", env_file=".env", extra="ignore")
