import pytest

from servers.searchfox.config import ServerConfig

ENV_VARS = [
    "SEARCHFOX_BASE_URL",
    "RAW_CONTENT_BASE_URL",
    "SEARCHFOX_HTTP_TIMEOUT",
    "MCP_TRANSPORT",
    "MCP_SSE_PORT",
    "MCP_STREAMABLE_HTTP_PORT",
    "LANGFUSE_ENABLED",
    "LANGFUSE_PUBLIC_KEY",
    "LANGFUSE_SECRET_KEY",
    "LANGFUSE_HOST",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)


class TestServerConfig:
    """Unit tests for ServerConfig."""

    def test_defaults(self):
        """Test configuration with no environment overrides."""
        config = ServerConfig()
        assert config.searchfox_url == "https://searchfox.org"
        assert config.raw_content_url == "https://raw.githubusercontent.com"
        assert config.http_timeout is None
        assert config.transport == "stdio"
        assert config.sse_port == 8000
        assert config.streamable_http_port == 8080
        assert config.langfuse_enabled is False

    def test_overrides(self, monkeypatch):
        """Test that environment variables override defaults."""
        monkeypatch.setenv("SEARCHFOX_BASE_URL", "http://localhost:8001")
        monkeypatch.setenv("SEARCHFOX_HTTP_TIMEOUT", "2.5")
        monkeypatch.setenv("MCP_TRANSPORT", "HTTP")
        monkeypatch.setenv("MCP_SSE_PORT", "9000")

        config = ServerConfig()

        assert config.searchfox_url == "http://localhost:8001"
        assert config.http_timeout == 2.5
        assert config.transport == "http"
        assert config.sse_port == 9000

    def test_invalid_transport(self, monkeypatch):
        monkeypatch.setenv("MCP_TRANSPORT", "websocket")
        with pytest.raises(ValueError, match="MCP_TRANSPORT"):
            ServerConfig()

    def test_invalid_port(self, monkeypatch):
        monkeypatch.setenv("MCP_STREAMABLE_HTTP_PORT", "eighty")
        with pytest.raises(ValueError, match="MCP_STREAMABLE_HTTP_PORT"):
            ServerConfig()

    def test_invalid_timeout(self, monkeypatch):
        monkeypatch.setenv("SEARCHFOX_HTTP_TIMEOUT", "soon")
        with pytest.raises(ValueError, match="SEARCHFOX_HTTP_TIMEOUT"):
            ServerConfig()

    def test_langfuse_requires_keys(self, monkeypatch):
        """Test that enabling Langfuse without credentials fails at startup."""
        monkeypatch.setenv("LANGFUSE_ENABLED", "true")
        with pytest.raises(ValueError, match="LANGFUSE_PUBLIC_KEY"):
            ServerConfig()

    def test_langfuse_enabled(self, monkeypatch):
        monkeypatch.setenv("LANGFUSE_ENABLED", "True")
        monkeypatch.setenv("LANGFUSE_PUBLIC_KEY", "pk")
        monkeypatch.setenv("LANGFUSE_SECRET_KEY", "sk")
        monkeypatch.setenv("LANGFUSE_HOST", "https://langfuse.example.com")

        config = ServerConfig()

        assert config.langfuse_enabled is True
        assert config.langfuse_host == "https://langfuse.example.com"
