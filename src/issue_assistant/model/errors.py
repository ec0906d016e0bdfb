"""
Error taxonomy for the issue assistant.

Only BadRequest carries a message meant for the caller; everything else is
logged and surfaced as a generic failure.
"""


class BadRequest(Exception):
    """Raised when the incoming request is missing or has malformed fields."""
    pass


class ProviderUnavailable(Exception):
    """Raised when the GitHub MCP server could not be launched or initialized."""
    pass


class ModelInvocationFailure(Exception):
    """Raised when a model call fails or times out. Aborts the whole request."""
    pass


class ToolCallError(Exception):
    """Raised by the tool provider when the MCP server reports a failed tool call."""
    pass
