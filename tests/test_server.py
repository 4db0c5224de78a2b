import asyncio
import json
import re
import signal
from unittest.mock import Mock, patch

import pytest
from fastmcp import Client
from fastmcp.exceptions import ToolError

import servers.searchfox.server as server_module


def _response(payload=None, status_code=200, reason="OK", text=""):
    response = Mock()
    response.ok = 200 <= status_code < 400
    response.status_code = status_code
    response.reason = reason
    response.text = text
    response.json.return_value = payload if payload is not None else {}
    return response


def _call(tool, arguments):
    async def run():
        async with Client(server_module.server) as client:
            return await client.call_tool(tool, arguments)

    return asyncio.run(run())


def _call_json(tool, arguments):
    return json.loads(_call(tool, arguments).content[0].text)


def _list_tools():
    async def run():
        async with Client(server_module.server) as client:
            return await client.list_tools()

    return asyncio.run(run())


class TestSearchfoxServer:
    """Tests of the MCP tools through an in-memory FastMCP client."""

    @pytest.fixture
    def many_hits_payload(self):
        return {
            "*timedout*": False,
            "test": [{"path": "a.cpp", "lines": [{"lno": n, "line": "x"} for n in range(1, 61)]}],
        }

    # ==================== Test tool registration ====================

    def test_tools_advertise_typed_schema(self):
        """Test that loosely typed parameters still advertise their JSON types."""
        tools = {tool.name: tool for tool in _list_tools()}

        assert set(tools) == {"search_code", "get_file"}
        schema = tools["search_code"].inputSchema
        assert schema["required"] == ["query"]
        assert schema["properties"]["query"]["type"] == "string"
        assert schema["properties"]["case"]["type"] == "boolean"
        assert schema["properties"]["limit"]["type"] == "number"
        assert tools["get_file"].inputSchema["required"] == ["path"]

    # ==================== Test search_code ====================

    @patch("backends.search.requests.get")
    def test_upstream_failure_is_tool_error(self, mock_get):
        """Test that an upstream error status reaches the host as a tool error."""
        mock_get.return_value = _response(status_code=502, reason="Bad Gateway")

        with pytest.raises(ToolError, match=re.escape("Search failed: HTTP 502: Bad Gateway")):
            _call("search_code", {"query": "nsIFoo"})

    @patch("backends.search.requests.get")
    def test_empty_query_is_tool_error(self, mock_get):
        """Test that an empty query is rejected without contacting Searchfox."""
        with pytest.raises(
            ToolError, match=re.escape("Query parameter is required and must be a string")
        ):
            _call("search_code", {"query": ""})

        mock_get.assert_not_called()

    @patch("backends.search.requests.get")
    def test_wrong_typed_optionals_use_defaults(self, mock_get, many_hits_payload):
        """Test that wrong-typed optional arguments fall back instead of failing."""
        mock_get.return_value = _response(many_hits_payload)

        data = _call_json(
            "search_code",
            {"query": "x", "repo": 5, "case": "yes", "regexp": 1, "limit": "abc"},
        )

        assert data["repo"] == "mozilla-central"
        assert data["count"] == 50
        args, kwargs = mock_get.call_args
        assert args[0] == "https://searchfox.org/mozilla-central/search"
        assert kwargs["params"] == {"q": "x", "case": "false", "regexp": "false"}

    @pytest.mark.parametrize("query", ["[]", "{}", "123", "null", "true"])
    @patch("backends.search.requests.get")
    def test_literal_queries_stay_strings(self, mock_get, query):
        """Test that JSON-looking queries are searched as literal strings."""
        mock_get.return_value = _response({})

        data = _call_json("search_code", {"query": query})

        assert data["query"] == query
        assert mock_get.call_args.kwargs["params"]["q"] == query

    # ==================== Test get_file ====================

    @patch("backends.content_fetcher.requests.get")
    def test_missing_file_is_not_an_error(self, mock_get):
        """Test that a 404 from the mirror returns a degraded result."""
        mock_get.return_value = _response(status_code=404, reason="Not Found")

        data = _call_json("get_file", {"path": "gone.cpp", "repo": "autoland"})

        assert data["content"] == ""
        assert data["note"]

    def test_missing_path_is_tool_error(self):
        with pytest.raises(ToolError, match="Path parameter is required"):
            _call("get_file", {"path": ""})

    # ==================== Test shutdown ====================

    @pytest.mark.parametrize(
        "tool, arguments",
        [("search_code", {"query": "x"}), ("get_file", {"path": "a.cpp"})],
    )
    @patch("backends.content_fetcher.requests.get")
    @patch("backends.search.requests.get")
    def test_calls_refused_during_shutdown(self, search_get, fetch_get, tool, arguments):
        """Test that no upstream request starts once shutdown was requested."""
        with patch.object(server_module, "_shutdown_requested", True):
            with pytest.raises(ToolError, match="Server is shutting down"):
                _call(tool, arguments)

        search_get.assert_not_called()
        fetch_get.assert_not_called()

    def test_first_signal_only_requests_shutdown(self, monkeypatch):
        """Test that one signal sets the flag and a second stops the server."""
        monkeypatch.setattr(server_module, "_shutdown_requested", False)

        server_module.signal_handler(signal.SIGTERM, None)
        assert server_module._shutdown_requested is True

        with pytest.raises(KeyboardInterrupt):
            server_module.signal_handler(signal.SIGTERM, None)
