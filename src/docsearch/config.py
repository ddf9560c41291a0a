"""Pydantic Settings with YAML profile support.

Priority (highest first): env vars > .env > config.yaml > config.default.yaml
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict, YamlConfigSettingsSource


# ---------------------------------------------------------------------------
# Sub-models
# ---------------------------------------------------------------------------

class DocumentsConfig(BaseModel):
    """Where the corpus lives and which files belong to it."""

    root_path: str = "./data/docs"
    suffixes: list[str] = [".docx"]


class SearchConfig(BaseModel):
    """Index build and query limits."""

    min_query_length: int = Field(default=3, ge=1)
    min_token_length: int = Field(default=2, ge=1)
    max_results: int = Field(default=50, ge=1)
    max_parallelism: int = Field(default_factory=lambda: os.cpu_count() or 1, ge=1)


class LoggingConfig(BaseModel):
    level: str = "INFO"
    format: str = "%(levelname)s %(message)s"


# ---------------------------------------------------------------------------
# Main settings
# ---------------------------------------------------------------------------

def project_root() -> Path:
    """Return the project root (``DOCSEARCH_ROOT`` or the working directory)."""
    return Path(os.environ.get("DOCSEARCH_ROOT", "."))


def _yaml_files() -> list[Path]:
    """Return YAML config file paths relative to the project root."""
    root = project_root()
    files = [root / "config.default.yaml"]
    user_cfg = root / "config.yaml"
    if user_cfg.exists():
        files.append(user_cfg)
    return files


class Settings(BaseSettings):
    """Application settings loaded from YAML + env vars."""

    model_config = SettingsConfigDict(
        env_prefix="DOCSEARCH_",
        env_nested_delimiter="__",
    )

    documents: DocumentsConfig = DocumentsConfig()
    search: SearchConfig = SearchConfig()
    logging: LoggingConfig = LoggingConfig()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            YamlConfigSettingsSource(
                settings_cls,
                yaml_file=_yaml_files(),
            ),
        )


# ---------------------------------------------------------------------------
# Singleton accessor
# ---------------------------------------------------------------------------

@lru_cache(maxsize=1)
def get_settings(**kwargs: Any) -> Settings:
    """Lazy singleton for settings. Call reset_settings() to reload."""
    load_dotenv(project_root() / ".env", override=False)
    return Settings(**kwargs)


def reset_settings() -> None:
    """Clear the settings cache so the next get_settings() reloads from disk."""
    get_settings.cache_clear()
