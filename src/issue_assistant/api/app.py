"""
FastAPI Application Factory.

Creates and configures the FastAPI application with all routers.
Uses lifespan context manager for startup/shutdown of the GitHub MCP server.
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from issue_assistant.api.request_shapes import get_request_shape
from issue_assistant.api.routers import assistant, health
from issue_assistant.config import AssistantConfig
from issue_assistant.service.assistant_service import GithubAssistantService, start_tool_registry
from issue_assistant.service.invoker import ModelInvoker
from issue_assistant.tools.provider import GitHubToolProvider

logger = logging.getLogger(__name__)


def create_app(
    config: Optional[AssistantConfig] = None,
    tool_provider: Optional[GitHubToolProvider] = None,
    model_invoker: Optional[ModelInvoker] = None,
) -> FastAPI:
    """
    Create and configure FastAPI application.

    Raises:
        ValueError: If the configured request shape is unknown
    """
    config = config or AssistantConfig()
    request_shape = get_request_shape(config.request_shape)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # --- Startup ---
        logger.info("Initializing GitHub issue assistant...")
        provider = tool_provider or GitHubToolProvider(config)
        registry = await start_tool_registry(provider)

        app.state.registry = registry
        app.state.request_shape = request_shape
        app.state.assistant_service = GithubAssistantService(config, registry, invoker=model_invoker)
        logger.info(f"GitHub issue assistant ready (request shape: {request_shape.name}, tools: {len(registry)})")

        try:
            yield
        finally:
            # --- Shutdown ---
            logger.info("Shutting down GitHub issue assistant...")
            await provider.shutdown()

    app = FastAPI(title="github-issue-assistant", lifespan=lifespan)

    # Register routers
    app.include_router(health.router)
    app.include_router(assistant.router)

    return app


def run_http_server(host: str = "0.0.0.0", port: int = 8000, config: Optional[AssistantConfig] = None):
    """Run the FastAPI application."""
    app = create_app(config)
    import uvicorn
    uvicorn.run(app, host=host, port=port, log_level="info", timeout_keep_alive=300)
