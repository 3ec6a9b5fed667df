"""
Application settings.

Responsibilities:
- Build a typed, read-only Settings object from environment variables (.env aware).
- Provide defaults for optional values; credentials default to empty and are
  checked where they are needed (the scoring engine key raises ConfigurationError
  before any network call).
"""

from __future__ import annotations

from dataclasses import dataclass, field

from backend_trustlend.config.env import (
    DEFAULT_GITHUB_API_URL,
    DEFAULT_SCORING_ENGINE_API_URL,
    DEFAULT_SCORING_ENGINE_MODEL,
    DEFAULT_STACKEXCHANGE_API_URL,
    env_float,
    env_str,
    get_ledger_rpc_url,
    load_trustlend_env,
    mask_secret_url,
)

DEFAULT_COLLECTOR_TIMEOUT_SEC = 10.0
DEFAULT_INFERENCE_TIMEOUT_SEC = 30.0
DEFAULT_CORS_ORIGINS = ("http://localhost:8081",)


@dataclass(frozen=True)
class Settings:
    """Immutable process configuration shared by all requests."""

    github_api_url: str = DEFAULT_GITHUB_API_URL
    github_token: str = ""
    stackexchange_api_url: str = DEFAULT_STACKEXCHANGE_API_URL
    stackexchange_key: str = ""
    ledger_rpc_url: str = ""
    scoring_engine_api_url: str = DEFAULT_SCORING_ENGINE_API_URL
    scoring_engine_api_key: str = ""
    scoring_engine_model: str = DEFAULT_SCORING_ENGINE_MODEL
    scoring_engine_temperature: float = 1.0
    scoring_engine_top_p: float = 0.95
    collector_timeout_sec: float = DEFAULT_COLLECTOR_TIMEOUT_SEC
    inference_timeout_sec: float = DEFAULT_INFERENCE_TIMEOUT_SEC
    cors_origins: tuple[str, ...] = field(default=DEFAULT_CORS_ORIGINS)

    def describe(self) -> dict[str, object]:
        """Loggable view of the settings; secrets are masked or reduced to a flag."""
        return {
            "github_api_url": self.github_api_url,
            "github_token_set": bool(self.github_token),
            "stackexchange_api_url": self.stackexchange_api_url,
            "ledger_rpc_url": mask_secret_url(self.ledger_rpc_url),
            "scoring_engine_api_url": self.scoring_engine_api_url,
            "scoring_engine_api_key_set": bool(self.scoring_engine_api_key),
            "scoring_engine_model": self.scoring_engine_model,
            "collector_timeout_sec": self.collector_timeout_sec,
            "inference_timeout_sec": self.inference_timeout_sec,
        }


def get_settings() -> Settings:
    """
    Return the current application settings, read from the environment.

    Cheap to call; tests change env with monkeypatch and call again.
    """
    load_trustlend_env()
    origins = tuple(
        o.strip() for o in env_str("CORS_ORIGINS").split(",") if o.strip()
    ) or DEFAULT_CORS_ORIGINS
    return Settings(
        github_api_url=env_str("GITHUB_API_URL", DEFAULT_GITHUB_API_URL).rstrip("/"),
        github_token=env_str("GITHUB_TOKEN"),
        stackexchange_api_url=env_str("STACKEXCHANGE_API_URL", DEFAULT_STACKEXCHANGE_API_URL).rstrip("/"),
        stackexchange_key=env_str("STACKEXCHANGE_KEY"),
        ledger_rpc_url=get_ledger_rpc_url(),
        scoring_engine_api_url=env_str("SCORING_ENGINE_API_URL", DEFAULT_SCORING_ENGINE_API_URL),
        scoring_engine_api_key=env_str("SCORING_ENGINE_API_KEY"),
        scoring_engine_model=env_str("SCORING_ENGINE_MODEL", DEFAULT_SCORING_ENGINE_MODEL),
        scoring_engine_temperature=env_float("SCORING_ENGINE_TEMPERATURE", 1.0),
        scoring_engine_top_p=env_float("SCORING_ENGINE_TOP_P", 0.95),
        collector_timeout_sec=env_float("COLLECTOR_TIMEOUT_SEC", DEFAULT_COLLECTOR_TIMEOUT_SEC),
        inference_timeout_sec=env_float("INFERENCE_TIMEOUT_SEC", DEFAULT_INFERENCE_TIMEOUT_SEC),
        cors_origins=origins,
    )
