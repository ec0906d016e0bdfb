"""
GitHub issue assistant.

Researches a GitHub issue with an LLM that can call the tools of the GitHub
MCP server, then answers it.
"""

__version__ = "1.0.0"
