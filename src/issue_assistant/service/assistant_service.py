import logging
from typing import Any, Callable, Dict, Optional

from issue_assistant.config import AssistantConfig
from issue_assistant.llm.llm_factory import LLMFactory
from issue_assistant.model.errors import ProviderUnavailable
from issue_assistant.model.pipeline import PipelineRequest, PipelineResult
from issue_assistant.service.invoker import ModelInvoker
from issue_assistant.service.pipeline.orchestrator import IssueResearchOrchestrator
from issue_assistant.tools.provider import GitHubToolProvider
from issue_assistant.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)


async def start_tool_registry(provider: GitHubToolProvider) -> ToolRegistry:
    """
    Launch the GitHub MCP server and register its catalog.

    A server that fails to start leaves the registry empty; the assistant
    then answers without tools.
    """
    try:
        tools = await provider.initialize()
    except ProviderUnavailable as e:
        logger.error(f"GitHub tools unavailable, continuing without tools: {e}")
        tools = ()

    registry = ToolRegistry(provider)
    registry.register(tools)
    return registry


class GithubAssistantService:
    """Service for answering GitHub issues with the research pipeline."""

    def __init__(
        self,
        config: AssistantConfig,
        registry: ToolRegistry,
        invoker: Optional[ModelInvoker] = None,
    ):
        self.config = config
        self.registry = registry
        if not config.has_api_key:
            logger.warning("AI API key is not configured; every model invocation will fail until it is set")
        self.invoker = invoker or ModelInvoker(
            LLMFactory(config),
            model_timeout=config.model_timeout,
            max_tool_rounds=config.max_tool_rounds,
        )
        self.orchestrator = IssueResearchOrchestrator(
            invoker=self.invoker,
            registry=registry,
            profiles=config.settings_profiles(),
        )

    async def respond(
        self,
        request: PipelineRequest,
        event_callback: Optional[Callable[[Dict[str, Any]], None]] = None,
    ) -> PipelineResult:
        """
        Run the pipeline for an already validated request.

        Exceptions from the pipeline propagate to the caller unchanged.
        """
        target = request.repo_name or "webhook payload"
        logger.info(f"Responding to issue for {target} with {len(self.registry)} tools available")
        result = await self.orchestrator.run(request, event_callback=event_callback)
        logger.info(f"Response ready for {target} ({len(result.response)} chars)")
        return result
