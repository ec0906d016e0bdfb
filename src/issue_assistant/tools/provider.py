"""
GitHub MCP server bridge.

Owns the single long-running MCP server process shared by every request:
- launched once at startup over stdio through mcp_use
- tool catalog read once during the handshake and cached
- tool calls serialized on one lock, since the stdio transport carries one
  request/response exchange at a time
"""
import asyncio
import logging
from typing import Any, Callable, Dict, Optional, Tuple

from mcp_use import MCPClient

from issue_assistant.config import AssistantConfig
from issue_assistant.model.errors import ProviderUnavailable, ToolCallError
from issue_assistant.model.pipeline import ToolDescriptor
from issue_assistant.tools.launch import SERVER_NAME, build_client_config, build_launch_plan

logger = logging.getLogger(__name__)

# Prevent duplicate logs from mcp_use
mcp_logger = logging.getLogger("mcp_use")
mcp_logger.propagate = False
if not mcp_logger.handlers:
    handler = logging.StreamHandler()
    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    handler.setFormatter(formatter)
    mcp_logger.addHandler(handler)


def extract_tool_result_text(result: Any) -> str:
    """Join the text blocks of an MCP CallToolResult."""
    content = getattr(result, "content", None)
    if content:
        return "\n".join(block.text for block in content if hasattr(block, "text"))
    return str(result)


class GitHubToolProvider:

    def __init__(
        self,
        config: AssistantConfig,
        client_factory: Callable[[Dict[str, Any]], Any] = MCPClient.from_dict,
    ):
        self.config = config
        self.client_factory = client_factory
        self.startup_timeout = config.mcp_startup_timeout
        self.tool_timeout = config.mcp_tool_timeout

        self._client = None
        self._session = None
        self._tools: Tuple[ToolDescriptor, ...] = ()
        self._initialized = False
        self._call_lock = asyncio.Lock()

    @property
    def is_available(self) -> bool:
        return self._session is not None

    async def initialize(self) -> Tuple[ToolDescriptor, ...]:
        """
        Launch the MCP server and retrieve its tool catalog.

        Raises:
            ProviderUnavailable: launch, handshake or catalog retrieval failed.
                The provider stays usable in zero-tools mode.
        """
        if self._initialized:
            return self._tools
        self._initialized = True

        token = self.config.github_pat.strip() if self.config.has_github_pat else None
        plan = build_launch_plan(self.config.mcp_command, self.config.mcp_args, token)
        logger.info(f"Creating MCP client for the GitHub server: {plan.describe()}")

        try:
            self._client = self.client_factory(build_client_config(plan))
            self._session = await asyncio.wait_for(
                self._client.create_session(SERVER_NAME),
                timeout=self.startup_timeout,
            )
            raw_tools = self._session.connector.tools or []
            self._tools = tuple(ToolDescriptor.from_mcp_tool(tool) for tool in raw_tools)
        except asyncio.TimeoutError as e:
            await self._close_client()
            raise ProviderUnavailable(
                f"GitHub MCP server did not complete its handshake within {self.startup_timeout}s"
            ) from e
        except Exception as e:
            await self._close_client()
            raise ProviderUnavailable(f"Failed to start GitHub MCP server ({plan.describe()}): {e}") from e

        logger.info(f"Retrieved {len(self._tools)} tools from the GitHub MCP server")
        for tool in self._tools:
            logger.info(f"Tool: {tool.name} - {tool.description}")
        return self._tools

    def list_tools(self) -> Tuple[ToolDescriptor, ...]:
        return self._tools

    async def call_tool(self, name: str, arguments: Dict[str, Any]) -> str:
        """Invoke a tool on the MCP server and return its text output."""
        if self._session is None:
            raise ProviderUnavailable("GitHub MCP server is not available")

        async with self._call_lock:
            result = await asyncio.wait_for(
                self._session.connector.call_tool(name, arguments),
                timeout=self.tool_timeout,
            )

        text = extract_tool_result_text(result)
        if getattr(result, "isError", False):
            raise ToolCallError(text or f"Tool '{name}' reported an error")
        return text

    async def shutdown(self) -> None:
        """Stop the MCP server process. Safe to call repeatedly."""
        if self._client is None:
            return
        logger.info("Shutting down GitHub MCP server")
        await self._close_client()
        logger.info("GitHub MCP server shut down")

    async def _close_client(self) -> None:
        client, self._client, self._session = self._client, None, None
        if client is None:
            return
        try:
            await client.close_all_sessions()
        except Exception as e:
            logger.warning(f"Error closing GitHub MCP client: {e}")
