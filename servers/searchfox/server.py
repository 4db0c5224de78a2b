"""Searchfox MCP server."""

import asyncio
import base64
import json
import logging
import os
import pathlib
import signal
import uuid
from typing import Annotated, Any, Dict

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from fastmcp.server.dependencies import get_http_request
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from pydantic import Field

from backends.content_fetcher import RawContentFetcher
from backends.errors import SearchfoxError
from backends.models import DEFAULT_LIMIT, DEFAULT_REPO
from backends.repositories import RepositoryResolver
from backends.search import SearchfoxSearchClient
from core import PromptManager
from servers.searchfox.adapter import GET_FILE, SEARCH_CODE, QueryAdapter
from servers.searchfox.config import ServerConfig

# Default handler writes to stderr, keeping stdout free for the stdio transport.
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


class TelemetryManager:
    """Telemetry manager for Langfuse integration."""

    def __init__(self, cfg: ServerConfig) -> None:
        """Initialize telemetry manager."""
        self.cfg = cfg
        self.enabled = cfg.langfuse_enabled
        if self.enabled:
            self._setup()

    def _setup(self) -> None:
        """Setup telemetry."""
        langfuse_auth = base64.b64encode(
            f"{self.cfg.langfuse_public_key}:{self.cfg.langfuse_secret_key}".encode()
        ).decode()

        os.environ["OTEL_EXPORTER_OTLP_HEADERS"] = f"Authorization=Basic {langfuse_auth}"
        os.environ["OTEL_EXPORTER_OTLP_ENDPOINT"] = (
            f"{self.cfg.langfuse_host}/api/public/otel"
        )

        provider = TracerProvider()
        provider.add_span_processor(SimpleSpanProcessor(OTLPSpanExporter()))
        trace.set_tracer_provider(provider)

    def get_tracer(self, name: str) -> trace.Tracer:
        """Get tracer instance."""
        if self.enabled:
            return trace.get_tracer(name)
        # Spans from an unexported provider are dropped
        return trace.get_tracer(name, tracer_provider=TracerProvider())


config = ServerConfig()
telemetry = TelemetryManager(config)
tracer = telemetry.get_tracer("searchfox-mcp")

resolver = RepositoryResolver(config.searchfox_url, config.raw_content_url)
adapter = QueryAdapter(
    search_client=SearchfoxSearchClient(config.searchfox_url, timeout=config.http_timeout),
    content_fetcher=RawContentFetcher(resolver, timeout=config.http_timeout),
)
logger.info(f"Using Searchfox at {config.searchfox_url}")

prompt_manager = PromptManager(
    file_path=pathlib.Path(__file__).parent.parent.parent / "prompts" / "prompts.yaml",
    default_repo=DEFAULT_REPO,
    default_limit=DEFAULT_LIMIT,
)

server = FastMCP(name="searchfox-mcp-server")

_shutdown_requested = False


def signal_handler(sig: int, frame: Any) -> None:
    """Handle termination signals for graceful shutdown.

    The first signal stops accepting tool calls; a second one stops the server.
    """
    global _shutdown_requested
    if _shutdown_requested:
        logger.info(f"Received signal {sig} during shutdown, stopping server")
        raise KeyboardInterrupt
    logger.info(f"Received signal {sig}, initiating graceful shutdown...")
    _shutdown_requested = True


def _parameter(tool: str, name: str, json_type: str) -> Any:
    # Arguments are typed loosely so wrong-typed optionals reach the adapter
    # and fall back to their defaults; the advertised schema keeps the type.
    return Field(
        description=prompt_manager.parameter_description(tool, name),
        json_schema_extra={"type": json_type},
    )


def _session_id() -> str:
    try:
        request = get_http_request()
    except RuntimeError:
        # stdio transport has no HTTP request
        return str(uuid.uuid4())
    return str(request.headers.get("X-TRACE-ID", uuid.uuid4()))


def _set_span_attributes(
    span: trace.Span,
    input_data: Dict[str, Any],
    output_data: Dict[str, Any],
    session_id: str,
) -> None:
    """Attach common Langfuse attributes to the current span."""
    if not telemetry.enabled:
        return
    try:
        span.set_attribute("langfuse.session.id", session_id)
        span.set_attribute("langfuse.tags", ["searchfox-mcp"])
        span.set_attribute("input", json.dumps(input_data, default=str))
        span.set_attribute("output", json.dumps(output_data))
    except Exception as exc:
        logger.error(f"Error setting span attributes: {exc}")


def _call_tool(name: str, arguments: Dict[str, Any]) -> str:
    if _shutdown_requested:
        logger.info("Shutdown in progress, declining new requests")
        raise ToolError("Server is shutting down")

    session_id = _session_id()
    with tracer.start_as_current_span(f"SearchfoxMcp:{name}") as span:
        try:
            result = adapter.dispatch(name, arguments)
        except SearchfoxError as exc:
            logger.error(f"{name} failed: {exc.message}")
            raise ToolError(exc.message) from exc

        _set_span_attributes(span, arguments, {"output": result}, session_id)
        return result


@server.tool(name=SEARCH_CODE, description=prompt_manager.tool_description(SEARCH_CODE))
def search_code(
    query: Annotated[Any, _parameter(SEARCH_CODE, "query", "string")],
    repo: Annotated[Any, _parameter(SEARCH_CODE, "repo", "string")] = DEFAULT_REPO,
    path: Annotated[Any, _parameter(SEARCH_CODE, "path", "string")] = None,
    case: Annotated[Any, _parameter(SEARCH_CODE, "case", "boolean")] = False,
    regexp: Annotated[Any, _parameter(SEARCH_CODE, "regexp", "boolean")] = False,
    limit: Annotated[Any, _parameter(SEARCH_CODE, "limit", "number")] = DEFAULT_LIMIT,
) -> str:
    """Search code in a Searchfox repository."""
    return _call_tool(
        SEARCH_CODE,
        {
            "query": query,
            "repo": repo,
            "path": path,
            "case": case,
            "regexp": regexp,
            "limit": limit,
        },
    )


@server.tool(name=GET_FILE, description=prompt_manager.tool_description(GET_FILE))
def get_file(
    path: Annotated[Any, _parameter(GET_FILE, "path", "string")],
    repo: Annotated[Any, _parameter(GET_FILE, "repo", "string")] = DEFAULT_REPO,
) -> str:
    """Get a file from a Searchfox repository's mirror."""
    return _call_tool(GET_FILE, {"repo": repo, "path": path})


async def _run_server() -> None:
    """Run the FastMCP server on the configured transport."""
    if config.transport == "stdio":
        await server.run_async(transport="stdio")
        return

    tasks = [
        server.run_http_async(
            transport="streamable-http",
            host="0.0.0.0",
            path="/searchfox/mcp",
            port=config.streamable_http_port,
        ),
        server.run_http_async(
            transport="sse", host="0.0.0.0", path="/searchfox/sse", port=config.sse_port
        ),
    ]
    await asyncio.gather(*tasks)


def main() -> None:
    """Main entry point."""
    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    logger.info(f"Tools registered: {', '.join(adapter.tool_names)}")

    try:
        logger.info(f"Starting Searchfox MCP server ({config.transport})...")
        asyncio.run(_run_server())
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt (CTRL+C)")
    except Exception as exc:
        logger.error(f"Server error: {exc}")
        raise
    finally:
        logger.info("Server has shut down.")


if __name__ == "__main__":
    main()
