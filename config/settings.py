"""
Settings Configuration
Validated configuration via Pydantic
"""
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class FetchSettings(BaseSettings):
    """Remote content service settings"""
    base_url: Optional[str] = Field(default=None, description="Content service base URL")
    request_timeout: float = Field(default=30.0, description="Request timeout (seconds)")
    max_retries: int = Field(default=3, description="Attempts per request before giving up")

    class Config:
        env_prefix = "TOPIC_PACK_FETCH_"


class ResolverSettings(BaseSettings):
    """Version resolution settings"""
    version_fetch_window: int = Field(
        default=1,
        ge=1,
        description="Older versions requested per batched fetch",
    )
    max_skill_closure_rounds: int = Field(
        default=32,
        ge=1,
        description="Expansion rounds allowed before the skill closure is declared runaway",
    )
    max_concurrent_fetches: int = Field(
        default=16,
        ge=1,
        description="Structures resolved concurrently within one group",
    )

    class Config:
        env_prefix = "TOPIC_PACK_RESOLVER_"


class CompatibilitySettings(BaseSettings):
    """Highest schema versions the consuming application understands"""
    max_topic_schema_version: int = Field(default=4)
    max_subtopic_page_schema_version: int = Field(default=4)
    max_story_schema_version: int = Field(default=5)
    max_exploration_schema_version: int = Field(default=55)
    max_skill_schema_version: int = Field(default=4)

    class Config:
        env_prefix = "TOPIC_PACK_COMPAT_"


class Settings(BaseSettings):
    """Top-level settings aggregating every section"""

    fetch: FetchSettings = Field(default_factory=FetchSettings)
    resolver: ResolverSettings = Field(default_factory=ResolverSettings)
    compatibility: CompatibilitySettings = Field(default_factory=CompatibilitySettings)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @classmethod
    def load_from_env_file(cls, env_path: Optional[Path] = None) -> "Settings":
        """Load settings, reading config/.env first when present."""
        if env_path is None:
            env_path = Path(__file__).parent / ".env"

        if env_path.exists():
            from dotenv import load_dotenv
            load_dotenv(env_path)

        return cls(
            fetch=FetchSettings(),
            resolver=ResolverSettings(),
            compatibility=CompatibilitySettings(),
        )


@lru_cache()
def get_settings() -> Settings:
    """Process-wide settings singleton"""
    return Settings.load_from_env_file()


def get_fetch_settings() -> FetchSettings:
    return get_settings().fetch


def get_resolver_settings() -> ResolverSettings:
    return get_settings().resolver


def get_compatibility_settings() -> CompatibilitySettings:
    return get_settings().compatibility
