"""Configuration schema using Pydantic."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

DEFAULT_RELAY_URL = "https://r.jina.ai/"

DEFAULT_BLOCK_MARKERS = [
    "blocked your request",
    "anomaly-modal",
    "challenge-form",
    "unfortunately, bots use duckduckgo too",
    "g-recaptcha",
    "h-captcha",
]


class Base(BaseModel):
    """Base model that accepts both camelCase and snake_case keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RateLimitConfig(Base):
    """Fixed-window request ceiling per client identity."""

    max_requests: int = 3
    window_seconds: float = 60.0
    max_entries: int = 10_000


class SessionConfig(Base):
    """Browsing session lifetime."""

    ttl_seconds: float = 12 * 60
    max_entries: int = 10_000


class JitterConfig(Base):
    """Randomized delay ranges, in seconds."""

    landing_min: float = 0.3
    landing_max: float = 1.3
    typing_min: float = 0.4
    typing_max: float = 1.6


class FallbackConfig(Base):
    """Stages of the fallback chain tried after a failed primary fetch."""

    cookieless_retry: bool = True
    library: bool = True
    relay: bool = True
    relay_url: str = DEFAULT_RELAY_URL


class WebSearchConfig(Base):
    """DuckDuckGo HTML search configuration."""

    engine_url: str = "https://duckduckgo.com"
    search_path: str = "/html/"
    region: str = "wt-wt"
    timeout: float = 10.0
    block_markers: list[str] = Field(default_factory=lambda: list(DEFAULT_BLOCK_MARKERS))
    rate_limit: RateLimitConfig = Field(default_factory=RateLimitConfig)
    session: SessionConfig = Field(default_factory=SessionConfig)
    jitter: JitterConfig = Field(default_factory=JitterConfig)
    fallback: FallbackConfig = Field(default_factory=FallbackConfig)


class Config(Base):
    """Root configuration for duckscout."""

    search: WebSearchConfig = Field(default_factory=WebSearchConfig)
    log_level: str = "INFO"
