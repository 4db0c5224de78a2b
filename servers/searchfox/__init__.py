"""Searchfox MCP server."""

from .adapter import QueryAdapter
from .config import ServerConfig

__all__ = ["QueryAdapter", "ServerConfig"]
