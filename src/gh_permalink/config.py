"""Immutable configuration shared by every permalink fetch.

`token` (`str`)
: GitHub API token sent as a bearer credential. Required.

`api_url` (`str`)
: Root of the REST API, ``https://api.github.com`` unless a GitHub Enterprise
  Server is targeted. Trailing slashes are dropped.

`timeout` (`float`)
: Seconds before a contents request is abandoned. No retries are attempted.

`user_agent` (`str`)
: Value of the ``User-Agent`` header.

`pygments_style` (`str`)
: Pygments style whose colours are inlined into the snippet markup.
"""

from __future__ import annotations

from collections.abc import Mapping
import os
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .exceptions import ConfigurationError


DEFAULT_API_URL = "https://api.github.com"
DEFAULT_TIMEOUT = 10.0
DEFAULT_USER_AGENT = "gh-permalink"
DEFAULT_PYGMENTS_STYLE = "default"

TOKEN_ENV = "GITHUB_TOKEN"
API_URL_ENV = "GH_PERMALINK_API_URL"
TIMEOUT_ENV = "GH_PERMALINK_TIMEOUT"


class PermalinkConfig(BaseModel):
    """Credential and transport settings established once per extension."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    token: str = Field(repr=False, description="GitHub API token")
    api_url: str = Field(default=DEFAULT_API_URL, description="REST API root")
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0, description="Request timeout")
    user_agent: str = DEFAULT_USER_AGENT
    pygments_style: str = DEFAULT_PYGMENTS_STYLE

    @field_validator("api_url")
    @classmethod
    def _normalise_api_url(cls, value: str) -> str:
        cleaned = value.strip().rstrip("/")
        if not cleaned:
            raise ValueError("The GitHub API URL cannot be empty.")
        return cleaned

    @property
    def headers(self) -> dict[str, str]:
        """Request headers sent with every contents lookup."""
        return {
            "Authorization": f"Bearer {self.token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
            # Prefer whatever an intermediate cache holds; commits never change.
            "Cache-Control": "max-stale",
            "User-Agent": self.user_agent,
        }

    @classmethod
    def build(cls, **settings: Any) -> PermalinkConfig:
        """Validate ``settings``, reporting problems as :class:`ConfigurationError`."""
        try:
            return cls.model_validate(settings)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid permalink settings: {exc}") from exc

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        **overrides: Any,
    ) -> PermalinkConfig:
        """Build a configuration from ``GITHUB_TOKEN`` and related variables."""
        env = os.environ if environ is None else environ
        values: dict[str, Any] = {}
        token = env.get(TOKEN_ENV)
        if token is not None:
            values["token"] = token
        if env.get(API_URL_ENV):
            values["api_url"] = env[API_URL_ENV]
        if env.get(TIMEOUT_ENV):
            values["timeout"] = env[TIMEOUT_ENV]
        values.update({key: value for key, value in overrides.items() if value is not None})
        if "token" not in values:
            raise ConfigurationError(
                f"No GitHub token supplied; pass one explicitly or set {TOKEN_ENV}."
            )
        return cls.build(**values)


__all__ = [
    "API_URL_ENV",
    "DEFAULT_API_URL",
    "DEFAULT_PYGMENTS_STYLE",
    "DEFAULT_TIMEOUT",
    "DEFAULT_USER_AGENT",
    "TIMEOUT_ENV",
    "TOKEN_ENV",
    "PermalinkConfig",
]
