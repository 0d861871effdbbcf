"""Configuration loading from YAML and environment.

The GitHub token is taken from the environment or from a file named by
GITHUB_TOKEN_FILE (Docker secrets). Never put real tokens in config files
committed to the repo.
"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_PROMPT = "Your task is to review this pull request. Do you see any problems there?"
DEFAULT_LINKED_ISSUES_LIMIT = 5

# Injected by load_config so token resolution can read env/file
_current_env: dict[str, str] = {}


def _read_secret(env_key: str, file_env_key: str) -> str | None:
    """Read secret from env var or from file path in env (e.g. Docker
    secrets)."""
    env = _current_env or dict(os.environ)
    value = env.get(env_key)
    if value:
        return value.strip()
    file_path = env.get(file_env_key)
    if file_path:
        return Path(file_path).read_text().strip()
    return None


class GitHubConfig(BaseSettings):
    """GitHub API settings."""

    model_config = SettingsConfigDict(env_prefix="GITHUB_", extra="ignore")

    token: str | None = Field(default=None, description="PAT or app token; use env or secret file")
    api_url: str = Field(default="https://api.github.com", description="API base URL")
    timeout: int = Field(default=30, ge=1, description="HTTP timeout in seconds")


class ReviewConfig(BaseSettings):
    """What goes into the generated prompt."""

    model_config = SettingsConfigDict(env_prefix="REVIEW_", extra="ignore")

    prompt: str = Field(default=DEFAULT_PROMPT, description="Task text placed before and after the context")
    include_content: bool = Field(default=False, description="Include full contents of changed files")
    linked_issues_limit: int = Field(
        default=DEFAULT_LINKED_ISSUES_LIMIT,
        ge=0,
        description="Maximum number of linked issues to resolve",
    )
    skip_content_extensions: list[str] = Field(
        default_factory=lambda: [".svg"],
        description="File extensions whose content is never included",
    )


class LoggingConfig(BaseSettings):
    """Logging settings."""

    model_config = SettingsConfigDict(env_prefix="LOGGING_", extra="ignore")

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format",
    )


class AppConfig(BaseSettings):
    """Root application config from YAML + env."""

    model_config = SettingsConfigDict(extra="ignore")

    github: GitHubConfig = Field(default_factory=GitHubConfig)
    review: ReviewConfig = Field(default_factory=ReviewConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @property
    def github_token_resolved(self) -> str | None:
        """Resolve GitHub token from config, env or Docker secret file."""
        t = self.github.token
        if t and not t.startswith("${"):
            return t.strip()
        return _read_secret("GITHUB_TOKEN", "GITHUB_TOKEN_FILE")


def _substitute_env(value: Any) -> Any:
    """Replace ${VAR} and $VAR in strings with os.environ."""
    if isinstance(value, str):
        if value.startswith("${") and value.endswith("}"):
            key = value[2:-1].strip()
            return _current_env.get(key, value)
        if value.startswith("$") and not value.startswith("${"):
            key = value[1:].strip()
            return _current_env.get(key, value)
        return value
    if isinstance(value, dict):
        return {k: _substitute_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_substitute_env(v) for v in value]
    return value


def load_config(config_path: Path | None = None) -> AppConfig:
    """Load config from YAML file and environment.

    A missing file yields defaults (still overridable from env).
    Secrets: GITHUB_TOKEN or GITHUB_TOKEN_FILE.
    """
    global _current_env

    _current_env = dict(os.environ)

    path = config_path or Path("prreview.yaml")
    if not path.is_file():
        return AppConfig()

    raw = yaml.safe_load(path.read_text()) or {}
    raw = _substitute_env(raw)

    return AppConfig(
        github=GitHubConfig(**(raw.get("github") or {})),
        review=ReviewConfig(**(raw.get("review") or {})),
        logging=LoggingConfig(**(raw.get("logging") or {})),
    )
