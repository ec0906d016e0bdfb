"""
Exposes the GitHub MCP tools to the model's function-calling mechanism.

Every tool is registered under the `GitHubTools` group and presented to the
model as an OpenAI-compatible function definition. Each pipeline step only
sees a `ToolScope`, the subset of tools it is meant to use.
"""
import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Protocol, Tuple

from issue_assistant.model.pipeline import ToolDescriptor
from issue_assistant.tools.arguments import coerce_arguments

logger = logging.getLogger(__name__)

DEFAULT_GROUP = "GitHubTools"
GROUP_SEPARATOR = "-"


class ToolBackend(Protocol):
    async def call_tool(self, name: str, arguments: Dict[str, Any]) -> str: ...


@dataclass(frozen=True)
class RegisteredTool:
    qualified_name: str
    descriptor: ToolDescriptor

    @property
    def name(self) -> str:
        return self.descriptor.name

    def definition(self) -> Dict[str, Any]:
        schema = dict(self.descriptor.input_schema or {})
        if not schema:
            schema = {"type": "object", "properties": {}}
        return {
            "type": "function",
            "function": {
                "name": self.qualified_name,
                "description": self.descriptor.description,
                "parameters": schema,
            },
        }


@dataclass
class RegistrationResult:
    group: str
    registered: Tuple[str, ...] = ()
    skipped: Tuple[str, ...] = ()

    @property
    def count(self) -> int:
        return len(self.registered)


@dataclass
class ToolScope:
    """The tools one pipeline step may call."""
    backend: Optional[ToolBackend]
    tools: Dict[str, RegisteredTool] = field(default_factory=dict)
    label: str = "all"

    @property
    def is_empty(self) -> bool:
        return not self.tools

    @property
    def names(self) -> List[str]:
        return list(self.tools)

    def definitions(self) -> List[Dict[str, Any]]:
        return [tool.definition() for tool in self.tools.values()]

    async def call(self, qualified_name: str, arguments: Optional[Mapping[str, Any]]) -> str:
        """
        Route a model tool call to the MCP server.

        Never raises: failures come back as text so the model can report them
        in its own output.
        """
        tool = self.tools.get(qualified_name)
        if tool is None:
            msg = f"Tool '{qualified_name}' is not available for {self.label}. Available: {self.names}"
            logger.warning(msg)
            return msg

        marshaled = coerce_arguments(arguments, tool.descriptor.input_schema)
        logger.info(f"[{self.label}] Calling {tool.name}: {marshaled}")
        try:
            return await self.backend.call_tool(tool.name, marshaled)
        except asyncio.TimeoutError:
            logger.error(f"[{self.label}] Tool call {tool.name} timed out")
            return f"Tool call failed: {tool.name} timed out"
        except Exception as e:
            logger.error(f"[{self.label}] Tool call {tool.name} failed: {e}")
            return f"Tool call failed: {e}"


class ToolRegistry:

    def __init__(self, backend: Optional[ToolBackend], group: str = DEFAULT_GROUP):
        self.backend = backend
        self.group = group
        self._tools: Dict[str, RegisteredTool] = {}

    def qualify(self, tool_name: str) -> str:
        return f"{self.group}{GROUP_SEPARATOR}{tool_name}"

    def register(self, tools: Iterable[ToolDescriptor]) -> RegistrationResult:
        """Register the tool catalog. Logs and returns an empty result instead of raising."""
        tools = list(tools or [])
        if not tools:
            logger.warning(f"No GitHub tools available; nothing registered under '{self.group}'")
            return RegistrationResult(group=self.group)

        registered, skipped = [], []
        for descriptor in tools:
            try:
                if not descriptor.name:
                    raise ValueError("tool has no name")
                qualified = self.qualify(descriptor.name)
                self._tools[qualified] = RegisteredTool(qualified_name=qualified, descriptor=descriptor)
                registered.append(qualified)
            except Exception as e:
                logger.error(f"Failed to register tool {getattr(descriptor, 'name', descriptor)!r}: {e}")
                skipped.append(str(getattr(descriptor, "name", "")))

        logger.info(f"Registered {len(registered)} tools under '{self.group}'")
        return RegistrationResult(group=self.group, registered=tuple(registered), skipped=tuple(skipped))

    def __len__(self) -> int:
        return len(self._tools)

    @property
    def names(self) -> List[str]:
        return list(self._tools)

    def scope(self, tool_names: Optional[Iterable[str]] = None, label: str = "all") -> ToolScope:
        """Tools whose bare name is in `tool_names`; every tool when None."""
        if tool_names is None:
            selected = dict(self._tools)
        else:
            wanted = set(tool_names)
            selected = {
                qualified: tool for qualified, tool in self._tools.items()
                if tool.name in wanted
            }
        return ToolScope(backend=self.backend, tools=selected, label=label)
