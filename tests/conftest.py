"""
Shared fixtures: a scripted chat model standing in for the LLM and a fake
GitHub tool provider standing in for the MCP server process.
"""
import asyncio
from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
from langchain_core.messages import AIMessage

from issue_assistant.config import AssistantConfig
from issue_assistant.model.errors import ProviderUnavailable
from issue_assistant.model.pipeline import ToolDescriptor


def make_tool(name: str, properties: Optional[Dict[str, Any]] = None) -> ToolDescriptor:
    schema = {"type": "object", "properties": properties or {}}
    return ToolDescriptor(name=name, description=f"{name} tool", input_schema=schema)


GITHUB_TOOLS = [
    make_tool("search_issues", {"q": {"type": "string"}, "perPage": {"type": "number"}}),
    make_tool("list_issues", {"owner": {"type": "string"}, "repo": {"type": "string"}, "state": {"type": "string"}}),
    make_tool("get_issue", {"owner": {"type": "string"}, "repo": {"type": "string"}, "issue_number": {"type": "number"}}),
    make_tool("search_code", {"q": {"type": "string"}, "perPage": {"type": "number"}}),
    make_tool("get_file_contents", {"owner": {"type": "string"}, "repo": {"type": "string"}, "path": {"type": "string"}}),
    make_tool("create_issue", {"owner": {"type": "string"}, "repo": {"type": "string"}, "title": {"type": "string"}}),
    make_tool("add_issue_comment", {"owner": {"type": "string"}, "repo": {"type": "string"},
                                    "issue_number": {"type": "number"}, "body": {"type": "string"}}),
]


def tool_call_message(name: str, args: Dict[str, Any], call_id: str = "call_1") -> AIMessage:
    return AIMessage(content="", tool_calls=[{"name": name, "args": args, "id": call_id}])


class ScriptedChatModel:
    """
    Chat model that replays a script of responses.

    Each script entry is an AIMessage, a string (wrapped in an AIMessage), or
    an exception to raise.
    """

    def __init__(self, script: List[Any], delay: float = 0.0):
        self.script = list(script)
        self.delay = delay
        self.calls: List[List[Any]] = []
        self.tools_enabled: List[bool] = []
        self.bound_tools: Optional[List[Dict[str, Any]]] = None
        self.bind_kwargs: Dict[str, Any] = {}

    def bind_tools(self, tools, **kwargs):
        self.bound_tools = list(tools)
        self.bind_kwargs = kwargs
        return _ToolBoundModel(self)

    async def ainvoke(self, messages):
        return await self._respond(messages, tools_enabled=False)

    async def _respond(self, messages, tools_enabled: bool):
        self.calls.append(list(messages))
        self.tools_enabled.append(tools_enabled)
        if self.delay:
            await asyncio.sleep(self.delay)
        if not self.script:
            raise AssertionError("ScriptedChatModel ran out of responses")
        item = self.script.pop(0)
        if isinstance(item, Exception):
            raise item
        if isinstance(item, str):
            return AIMessage(content=item)
        return item


class _ToolBoundModel:
    """What `bind_tools` returns: the same script, with calls marked as tool-enabled."""

    def __init__(self, model: ScriptedChatModel):
        self.model = model

    async def ainvoke(self, messages):
        return await self.model._respond(messages, tools_enabled=True)


class FakeToolProvider:
    """In-memory replacement for GitHubToolProvider."""

    def __init__(self, tools=None, fail_initialize: bool = False, results: Optional[Dict[str, Any]] = None):
        self.tools = tuple(GITHUB_TOOLS if tools is None else tools)
        self.fail_initialize = fail_initialize
        self.results = results or {}
        self.calls: List[tuple] = []
        self.initialize_count = 0
        self.shutdown_count = 0

    async def initialize(self):
        self.initialize_count += 1
        if self.fail_initialize:
            raise ProviderUnavailable("npx not found")
        return self.tools

    def list_tools(self):
        return self.tools

    async def call_tool(self, name: str, arguments: Dict[str, Any]) -> str:
        self.calls.append((name, arguments))
        result = self.results.get(name, f"{name} ok")
        if isinstance(result, Exception):
            raise result
        return result

    async def shutdown(self):
        self.shutdown_count += 1


def make_invoker(results: List[Any]) -> MagicMock:
    """Invoker double whose `invoke` returns (or raises) the given results in order."""
    invoker = MagicMock()
    invoker.invoke = AsyncMock(side_effect=list(results))
    return invoker


@pytest.fixture
def config():
    return AssistantConfig(
        ai_provider="openai",
        ai_model="gpt-4o",
        ai_api_key="sk-test",
        github_pat="ghp_test",
        mcp_command="npx",
        mcp_args=["-y", "@modelcontextprotocol/server-github"],
        request_shape="form",
    )


@pytest.fixture
def fake_provider():
    return FakeToolProvider()
