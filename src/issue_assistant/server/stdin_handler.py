import json
import sys
import asyncio
import logging
from typing import Optional, Dict, Any

from issue_assistant.api.request_shapes import get_request_shape
from issue_assistant.config import AssistantConfig
from issue_assistant.model.errors import BadRequest
from issue_assistant.model.pipeline import PipelineRequest
from issue_assistant.service.assistant_service import GithubAssistantService, start_tool_registry
from issue_assistant.tools.provider import GitHubToolProvider

logger = logging.getLogger(__name__)


class StdinHandler:
    """Handler for processing a single request from stdin."""

    def __init__(self, config: Optional[AssistantConfig] = None, tool_provider: Optional[GitHubToolProvider] = None,
                 model_invoker=None):
        self.config = config or AssistantConfig()
        self.request_shape = get_request_shape(self.config.request_shape)
        self.tool_provider = tool_provider
        self.model_invoker = model_invoker

    def read_request_from_stdin(self) -> Optional[Dict[str, Any]]:
        """
        Read a JSON object from stdin. The fields are those of the configured
        request shape ({"issue": ...}, {"payload": ...} or
        {"issue_context": ..., "repo_name": ...}).

        Returns:
            Dictionary containing the request data, or None if reading fails
        """
        try:
            raw = sys.stdin.read()
            if not raw or raw.strip() == "":
                return None
            return json.loads(raw)
        except Exception as e:
            print(json.dumps({
                "error": "Failed reading JSON from stdin",
                "exception": str(e)
            }))
            return None

    async def _run(self, request: PipelineRequest) -> str:
        provider = self.tool_provider or GitHubToolProvider(self.config)
        try:
            registry = await start_tool_registry(provider)
            service = GithubAssistantService(self.config, registry, invoker=self.model_invoker)
            result = await service.respond(request)
            return result.response
        finally:
            await provider.shutdown()

    def process_stdin_request(self):
        """
        Entry point for synchronous execution: reads a single request from stdin,
        runs the pipeline and writes the JSON result to stdout.
        """
        request_data = self.read_request_from_stdin()
        if request_data is None:
            print(json.dumps({
                "error": "No input request provided (expecting JSON on stdin)"
            }))
            return
        if not isinstance(request_data, dict):
            print(json.dumps({"error": "Expecting a JSON object on stdin"}))
            return

        try:
            request = self.request_shape.parse(request_data)
        except BadRequest as e:
            print(json.dumps({"error": str(e)}))
            return

        try:
            response = asyncio.run(self._run(request))
            print(json.dumps({"response": response}, ensure_ascii=False))
        except Exception as e:
            logger.error(f"Failed to process stdin request: {e}", exc_info=True)
            print(json.dumps({
                "error": "Failed to process request",
                "exception": str(e)
            }))
