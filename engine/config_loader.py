import yaml
import os
from typing import List, Optional, Literal
from pydantic import BaseModel, Field


class LlmConfig(BaseModel):
    base_url: Optional[str] = None
    api_key: Optional[str] = None
    judge_model: str = "gpt-4o-mini"
    extraction_model: str = "gpt-4o-mini"
    temperature: float = 0.0  # 0.0 keeps the judge as repeatable as the provider allows


class RetryConfig(BaseModel):
    """
    Resilient invocation settings for every judge call.

    Delay before retry n (0-based) is base_delay_seconds * 2**n.
    """
    max_attempts: int = Field(default=3, ge=1)
    base_delay_seconds: float = Field(default=1.0, ge=0.0)


class ScoringConfig(BaseModel):
    """
    Configuration for reconciliation and recommendation.
    """
    # Default point values, also used when a verdict matches no requirement
    must_have_default: int = 10
    nice_to_have_default: int = 5

    # Recommendation thresholds on the 0-100 alignment score
    strong_threshold: float = 85.0
    reservations_threshold: float = 60.0

    # A MUST_HAVE "Not Aligned" verdict in any of these categories
    # forces "Not Recommended"
    gated_categories: List[str] = Field(default_factory=lambda: ["Experience", "Education"])


class CacheConfig(BaseModel):
    """Requirement-extraction cache settings."""
    backend: Literal["memory", "redis"] = "memory"
    redis_url: str = "redis://localhost:6379/0"
    password: Optional[str] = None
    ttl_seconds: int = 24 * 60 * 60
    max_entries: int = 256


class AppConfig(BaseModel):
    llm: LlmConfig = Field(default_factory=LlmConfig)
    retry: RetryConfig = Field(default_factory=RetryConfig)
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)


def load_config(config_path: str = "config.yaml") -> AppConfig:
    # If not found at relative path (e.g. running from another directory), use the repo copy
    if not os.path.exists(config_path):
        base_dir = os.path.dirname(os.path.abspath(__file__))
        config_path = os.path.join(base_dir, "..", "config.yaml")

    data = {}
    if os.path.exists(config_path):
        with open(config_path, "r") as f:
            data = yaml.safe_load(f) or {}

    # Allow env var override for the API key
    env_api_key = os.environ.get("OPENAI_API_KEY")
    if env_api_key:
        data.setdefault('llm', {})
        data['llm']['api_key'] = env_api_key

    # Allow env var override for LLM Base URL
    env_llm_base_url = os.environ.get("LLM_BASE_URL")
    if env_llm_base_url:
        data.setdefault('llm', {})
        data['llm']['base_url'] = env_llm_base_url

    # Allow env var override for Redis URL
    env_redis_url = os.environ.get("REDIS_URL")
    if env_redis_url:
        data.setdefault('cache', {})
        data['cache']['redis_url'] = env_redis_url

    return AppConfig(**data)
