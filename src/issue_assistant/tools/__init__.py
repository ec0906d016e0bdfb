"""
Tools Package.

GitHub MCP server lifecycle and the registry that exposes its tools to the model:
- provider: GitHubToolProvider (process lifecycle, catalog, serialized calls)
- launch: launch plan and access token injection
- registry: ToolRegistry / ToolScope (function definitions and call routing)
- arguments: numeric argument coercion
"""
from issue_assistant.tools.provider import GitHubToolProvider
from issue_assistant.tools.registry import ToolRegistry, ToolScope, RegistrationResult
from issue_assistant.tools.launch import build_launch_plan, insert_container_env_argument
from issue_assistant.tools.arguments import coerce_arguments

__all__ = [
    "GitHubToolProvider",
    "ToolRegistry",
    "ToolScope",
    "RegistrationResult",
    "build_launch_plan",
    "insert_container_env_argument",
    "coerce_arguments",
]
