"""
Internal data model for the research pipeline.
"""
from collections import OrderedDict
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple


class RequestMode(str, Enum):
    """How the pipeline learns which repository and issue it works on."""
    REPOSITORY = "REPOSITORY"  # repo_name parsed and validated server-side
    OPAQUE_PAYLOAD = "OPAQUE_PAYLOAD"  # model infers repo/issue from the raw webhook payload


@dataclass(frozen=True)
class ToolDescriptor:
    """A tool advertised by the MCP server."""
    name: str
    description: str
    input_schema: Mapping[str, Any] = field(default_factory=dict, hash=False)

    @classmethod
    def from_mcp_tool(cls, tool: Any) -> "ToolDescriptor":
        schema = getattr(tool, "inputSchema", None) or {}
        return cls(
            name=tool.name,
            description=getattr(tool, "description", None) or "",
            input_schema=MappingProxyType(dict(schema)),
        )


def is_repo_identifier(value: Optional[str]) -> bool:
    """True for 'owner/repo': exactly one '/', both halves non-blank."""
    if not value:
        return False
    parts = value.split("/")
    return len(parts) == 2 and all(part.strip() for part in parts)


@dataclass(frozen=True)
class PipelineRequest:
    mode: RequestMode
    issue_context: str
    repo_name: Optional[str] = None
    payload: Optional[str] = None

    @classmethod
    def for_repository(cls, issue_context: str, repo_name: str) -> "PipelineRequest":
        if not issue_context or not issue_context.strip():
            raise ValueError("issue_context must not be blank")
        if not is_repo_identifier(repo_name):
            raise ValueError(f"repo_name must be in 'owner/repo' format, got {repo_name!r}")
        return cls(mode=RequestMode.REPOSITORY, issue_context=issue_context, repo_name=repo_name.strip())

    @classmethod
    def for_payload(cls, payload: str) -> "PipelineRequest":
        if not payload or not payload.strip():
            raise ValueError("payload must not be blank")
        return cls(mode=RequestMode.OPAQUE_PAYLOAD, issue_context=payload, payload=payload)

    @property
    def is_opaque(self) -> bool:
        return self.mode == RequestMode.OPAQUE_PAYLOAD


@dataclass(frozen=True)
class InvocationSettings:
    temperature: float
    max_output_tokens: int
    auto_invoke_tools: bool

    def __post_init__(self):
        if not 0.0 <= self.temperature <= 1.0:
            raise ValueError(f"temperature must be within 0.0-1.0, got {self.temperature}")
        if self.max_output_tokens <= 0:
            raise ValueError(f"max_output_tokens must be positive, got {self.max_output_tokens}")


@dataclass(frozen=True)
class SettingsProfiles:
    """Invocation settings per step kind."""
    research: InvocationSettings
    action: InvocationSettings
    synthesis: InvocationSettings

    @classmethod
    def defaults(cls) -> "SettingsProfiles":
        return cls(
            research=InvocationSettings(temperature=0.2, max_output_tokens=1500, auto_invoke_tools=True),
            action=InvocationSettings(temperature=0.2, max_output_tokens=1500, auto_invoke_tools=True),
            synthesis=InvocationSettings(temperature=0.5, max_output_tokens=1000, auto_invoke_tools=False),
        )

    def for_kind(self, kind: str) -> InvocationSettings:
        return getattr(self, kind)


class ResearchContext:
    """
    Step results accumulated in execution order.

    Entries are write-once: a step that tries to record its result twice is a
    programming error.
    """

    def __init__(self):
        self._entries: "OrderedDict[str, str]" = OrderedDict()

    def set(self, step: str, value: str) -> None:
        if step in self._entries:
            raise ValueError(f"Result for step '{step}' is already recorded")
        self._entries[step] = value

    def get(self, step: str, default: Optional[str] = None) -> Optional[str]:
        return self._entries.get(step, default)

    def __getitem__(self, step: str) -> str:
        return self._entries[step]

    def __contains__(self, step: object) -> bool:
        return step in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def items(self) -> Tuple[Tuple[str, str], ...]:
        return tuple(self._entries.items())

    def as_dict(self) -> Dict[str, str]:
        return dict(self._entries)


@dataclass
class PipelineResult:
    response: str
    context: ResearchContext
