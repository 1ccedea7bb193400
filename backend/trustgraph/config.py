"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache) — single instance per process
    - Score weights strictly decrease with depth (validated at load time)

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for all non-secret settings: works out-of-the-box with docker-compose
    - Relay list is a JSON list in env (NOSTR_RELAYS='["wss://a", "wss://b"]')
"""

from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = (
        "postgresql+asyncpg://trust:trust@db:5432/trustgraph"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosting providers hand out postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Nostr relays (follow-list source)
    nostr_relays: list[str] = ["wss://relay.mappingbitcoin.com"]
    relay_timeout_seconds: float = 10.0
    relay_connect_timeout_seconds: float = 5.0

    # Follows cache
    follows_cache_ttl_hours: float = 6.0

    # Graph build
    fetch_batch_size: int = 10
    graph_insert_batch_size: int = 1000
    stale_build_threshold_minutes: int = 60

    # Trust scoring
    score_is_seeder: float = 1.0
    score_per_depth0_follower: float = 0.15
    score_per_depth1_follower: float = 0.02
    score_per_depth2_follower: float = 0.005
    score_max: float = 1.0
    default_trust_score: float = 0.02

    @model_validator(mode="after")
    def check_weights_decrease_with_depth(self) -> "Settings":
        if not (
            self.score_per_depth0_follower
            > self.score_per_depth1_follower
            > self.score_per_depth2_follower
            >= 0
        ):
            raise ValueError("score weights must strictly decrease with depth")
        return self

    # API
    cors_origins: list[str] = ["http://localhost:3000"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
