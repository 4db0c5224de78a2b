"""Configuration for the Searchfox MCP server."""

import os
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

VALID_TRANSPORTS = ("stdio", "http")


class ServerConfig:
    """Server configuration."""

    def __init__(self) -> None:
        """Initialize server configuration from environment variables."""
        self.searchfox_url = os.getenv("SEARCHFOX_BASE_URL", "https://searchfox.org")
        self.raw_content_url = os.getenv(
            "RAW_CONTENT_BASE_URL", "https://raw.githubusercontent.com"
        )
        # No timeout unless one is configured explicitly
        self.http_timeout = self._get_optional_float("SEARCHFOX_HTTP_TIMEOUT")

        self.transport = os.getenv("MCP_TRANSPORT", "stdio").lower()
        if self.transport not in VALID_TRANSPORTS:
            raise ValueError(
                "Invalid option for MCP_TRANSPORT. Valid options are [stdio|http]"
            )
        self.sse_port = self._get_int("MCP_SSE_PORT", "8000")
        self.streamable_http_port = self._get_int("MCP_STREAMABLE_HTTP_PORT", "8080")

        # Langfuse configuration (optional)
        self.langfuse_enabled = os.getenv("LANGFUSE_ENABLED", "false").lower() == "true"
        if self.langfuse_enabled:
            self.langfuse_public_key = self._get_required_env("LANGFUSE_PUBLIC_KEY")
            self.langfuse_secret_key = self._get_required_env("LANGFUSE_SECRET_KEY")
            self.langfuse_host = self._get_required_env("LANGFUSE_HOST")
        else:
            self.langfuse_public_key = ""
            self.langfuse_secret_key = ""
            self.langfuse_host = ""

    @staticmethod
    def _get_required_env(key: str) -> str:
        """Get required environment variable or raise descriptive error."""
        value = os.getenv(key)
        if not value:
            raise ValueError(f"Required environment variable {key} is not set")
        return value

    @staticmethod
    def _get_int(key: str, default: str) -> int:
        value = os.getenv(key, default)
        try:
            return int(value)
        except ValueError:
            raise ValueError(f"Environment variable {key} must be an integer, got {value!r}")

    @staticmethod
    def _get_optional_float(key: str) -> Optional[float]:
        value = os.getenv(key)
        if not value:
            return None
        try:
            return float(value)
        except ValueError:
            raise ValueError(f"Environment variable {key} must be a number, got {value!r}")
