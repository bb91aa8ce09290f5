from __future__ import annotations

from pydantic import ValidationError
import pytest

from gh_permalink.config import (
    API_URL_ENV,
    DEFAULT_API_URL,
    TIMEOUT_ENV,
    TOKEN_ENV,
    PermalinkConfig,
)
from gh_permalink.exceptions import ConfigurationError


def test_defaults() -> None:
    config = PermalinkConfig(token="secret")

    assert config.api_url == DEFAULT_API_URL
    assert config.timeout == 10.0
    assert config.pygments_style == "default"


def test_token_never_appears_in_repr() -> None:
    assert "secret" not in repr(PermalinkConfig(token="secret"))


def test_headers_carry_bearer_token() -> None:
    headers = PermalinkConfig(token="secret", user_agent="docs-bot").headers

    assert headers["Authorization"] == "Bearer secret"
    assert headers["Accept"] == "application/vnd.github+json"
    assert headers["X-GitHub-Api-Version"] == "2022-11-28"
    assert headers["Cache-Control"] == "max-stale"
    assert headers["User-Agent"] == "docs-bot"


def test_api_url_loses_trailing_slash() -> None:
    config = PermalinkConfig(token="t", api_url="https://ghe.example.com/api/v3/")

    assert config.api_url == "https://ghe.example.com/api/v3"


@pytest.mark.parametrize(
    "kwargs",
    [
        {"token": None},
        {"token": 123},
        {"token": "t", "api_url": ""},
        {"token": "t", "timeout": 0},
        {"token": "t", "timeout": -1},
        {"token": "t", "timeout": "soon"},
    ],
)
def test_invalid_settings_are_rejected(kwargs: dict) -> None:
    with pytest.raises(ConfigurationError):
        PermalinkConfig.build(**kwargs)
    with pytest.raises(ValidationError):
        PermalinkConfig(**kwargs)


def test_unknown_settings_are_rejected() -> None:
    with pytest.raises(ConfigurationError, match="retries"):
        PermalinkConfig.build(token="t", retries=3)


def test_configuration_error_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        PermalinkConfig.build(token="t", timeout=0)


def test_numeric_strings_are_accepted_for_timeout() -> None:
    assert PermalinkConfig.build(token="t", timeout="3").timeout == 3.0


def test_config_is_frozen() -> None:
    config = PermalinkConfig(token="t")

    with pytest.raises(ValidationError):
        config.token = "other"  # type: ignore[misc]


def test_from_env_reads_variables() -> None:
    config = PermalinkConfig.from_env(
        {TOKEN_ENV: "from-env", API_URL_ENV: "https://ghe.local/api/v3", TIMEOUT_ENV: "2.5"}
    )

    assert config.token == "from-env"
    assert config.api_url == "https://ghe.local/api/v3"
    assert config.timeout == 2.5


def test_from_env_overrides_win() -> None:
    config = PermalinkConfig.from_env({TOKEN_ENV: "from-env"}, token="explicit", api_url=None)

    assert config.token == "explicit"
    assert config.api_url == DEFAULT_API_URL


def test_from_env_requires_a_token(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(TOKEN_ENV, raising=False)

    with pytest.raises(ConfigurationError, match=TOKEN_ENV):
        PermalinkConfig.from_env()
