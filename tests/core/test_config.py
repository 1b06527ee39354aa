"""Tests for application configuration."""
import pytest
from pydantic import ValidationError

from core.config import Settings
from services.resolver import DEFAULT_SEARCH_URL, default_search_url


class TestCorsOriginsParsing:
    """Tests for CORS origins parsing from environment variables."""

    def test_parse_single_origin_string(self) -> None:
        """Single origin string is parsed correctly."""
        settings = Settings(
            _env_file=None,
            database_url="postgresql://test",
            CORS_ORIGINS="http://localhost:5173",
        )
        assert settings.cors_origins == ["http://localhost:5173"]

    def test_parse_origins_with_whitespace(self) -> None:
        """Whitespace around origins is stripped."""
        settings = Settings(
            _env_file=None,
            database_url="postgresql://test",
            CORS_ORIGINS="  http://localhost:5173 , https://example.com  ",
        )
        assert settings.cors_origins == [
            "http://localhost:5173",
            "https://example.com",
        ]

    def test_parse_empty_string(self) -> None:
        """Empty string results in empty list."""
        settings = Settings(
            _env_file=None,
            database_url="postgresql://test",
            CORS_ORIGINS="",
        )
        assert settings.cors_origins == []

    def test_parse_trailing_comma(self) -> None:
        """Trailing comma is handled (empty entries filtered)."""
        settings = Settings(
            _env_file=None,
            database_url="postgresql://test",
            CORS_ORIGINS="http://localhost:5173,",
        )
        assert settings.cors_origins == ["http://localhost:5173"]


class TestResolutionSettings:
    """Tests for command resolution settings."""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Cache TTL is one minute and the fallback is a Google search."""
        for var in ("COMMAND_CACHE_TTL", "DEFAULT_SEARCH_URL", "REQUEST_TIMEOUT_SECONDS"):
            monkeypatch.delenv(var, raising=False)
        settings = Settings(_env_file=None, database_url="postgresql://test")

        assert settings.command_cache_ttl == 60
        assert settings.default_search_url == DEFAULT_SEARCH_URL
        assert settings.request_timeout_seconds == 5.0

    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Values come from their environment variable names."""
        monkeypatch.setenv("COMMAND_CACHE_TTL", "120")
        monkeypatch.setenv("DEFAULT_SEARCH_URL", "https://duckduckgo.com/?q={query}")
        monkeypatch.setenv("REDIS_ENABLED", "false")
        settings = Settings(_env_file=None, database_url="postgresql://test")

        assert settings.command_cache_ttl == 120
        assert settings.default_search_url == "https://duckduckgo.com/?q={query}"
        assert settings.redis_enabled is False

    def test_search_url_without_placeholder_rejected(self) -> None:
        """A search URL with nowhere to put the command is a configuration error."""
        with pytest.raises(ValidationError, match="query"):
            Settings(
                _env_file=None,
                database_url="postgresql://test",
                DEFAULT_SEARCH_URL="https://example.com/search",
            )

    @pytest.mark.parametrize(
        "template",
        [
            "https://s.example/?q={query}&x={lang}",
            "https://s.example/?q={query}&page={}",
            "https://s.example/?q={query.missing}",
            "https://s.example/?q={query}&x={",
            "https://s.example/?q={{query}}",
        ],
    )
    def test_search_url_that_cannot_format_rejected(self, template: str) -> None:
        """Every accepted template must build a fallback URL for any command."""
        with pytest.raises(ValidationError, match="DEFAULT_SEARCH_URL"):
            Settings(
                _env_file=None,
                database_url="postgresql://test",
                DEFAULT_SEARCH_URL=template,
            )

    def test_search_url_with_escaped_braces_accepted(self) -> None:
        """Doubled braces are literal and leave {query} as the only field."""
        settings = Settings(
            _env_file=None,
            database_url="postgresql://test",
            DEFAULT_SEARCH_URL="https://s.example/?q={query}&f={{raw}}",
        )

        url = default_search_url("a b", settings.default_search_url)
        assert url == "https://s.example/?q=a+b&f={raw}"

    @pytest.mark.parametrize("ttl", [0, -5])
    def test_non_positive_ttl_rejected(self, ttl: int) -> None:
        """Redis cannot store an entry with a non-positive expiry."""
        with pytest.raises(ValidationError, match="COMMAND_CACHE_TTL"):
            Settings(
                _env_file=None,
                database_url="postgresql://test",
                COMMAND_CACHE_TTL=ttl,
            )
