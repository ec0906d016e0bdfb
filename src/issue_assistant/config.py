import os
import json
import shlex
import logging
from typing import List
from pydantic import BaseModel, ConfigDict, Field, field_validator
from dotenv import load_dotenv

from issue_assistant.model.pipeline import InvocationSettings, SettingsProfiles

logger = logging.getLogger(__name__)

# Values shipped in sample configuration files; treated as "not configured"
API_KEY_PLACEHOLDER = "sk-YOUR_OPENAI_API_KEY_PLEASE_REPLACE"
GITHUB_PAT_PLACEHOLDER = "YOUR_GITHUB_PAT_HERE_OR_SET_ENV_VAR"

DEFAULT_MCP_ARGS = ["-y", "@modelcontextprotocol/server-github"]

REQUEST_SHAPES = ("form", "webhook", "json")


def parse_args_list(raw: str) -> List[str]:
    """
    Parse the MCP server argument list from the environment.

    Accepts either a JSON array ('["run", "-i", "--rm", "image"]') or
    shell-style words ('run -i --rm image').
    """
    raw = (raw or "").strip()
    if not raw:
        return list(DEFAULT_MCP_ARGS)
    if raw.startswith("["):
        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ValueError(f"MCP_GITHUB_ARGS is not a valid JSON array: {e}")
        if not isinstance(parsed, list):
            raise ValueError("MCP_GITHUB_ARGS JSON must be an array of strings")
        return [str(item) for item in parsed]
    return shlex.split(raw)


class AssistantConfig(BaseModel):
    """Configuration for the GitHub issue assistant"""
    load_dotenv()

    # Defaults are raw environment strings, parsed and checked by the validators below
    model_config = ConfigDict(validate_default=True)

    # LLM
    ai_provider: str = Field(default_factory=lambda: os.getenv("AI_PROVIDER", "openai"))
    ai_model: str = Field(default_factory=lambda: os.getenv("AI_MODEL", "gpt-4o"))
    ai_api_key: str = Field(default_factory=lambda: os.getenv("AI_API_KEY") or os.getenv("OPENAI_API_KEY", ""))

    # GitHub MCP server launch
    mcp_command: str = Field(default_factory=lambda: os.getenv("MCP_GITHUB_COMMAND", "npx"))
    mcp_args: List[str] = Field(default_factory=lambda: os.getenv("MCP_GITHUB_ARGS", ""))
    github_pat: str = Field(default_factory=lambda: os.getenv("GITHUB_PAT", ""))

    # Timeouts (seconds) and tool loop bound
    mcp_startup_timeout: float = Field(default_factory=lambda: os.getenv("MCP_STARTUP_TIMEOUT", "60"))
    mcp_tool_timeout: float = Field(default_factory=lambda: os.getenv("MCP_TOOL_TIMEOUT", "60"))
    model_timeout: float = Field(default_factory=lambda: os.getenv("MODEL_TIMEOUT", "120"))
    max_tool_rounds: int = Field(default_factory=lambda: os.getenv("MAX_TOOL_ROUNDS", "10"))

    # Per-step invocation budgets
    research_temperature: float = Field(default_factory=lambda: os.getenv("RESEARCH_TEMPERATURE", "0.2"))
    research_max_tokens: int = Field(default_factory=lambda: os.getenv("RESEARCH_MAX_TOKENS", "1500"))
    action_temperature: float = Field(default_factory=lambda: os.getenv("ACTION_TEMPERATURE", "0.2"))
    action_max_tokens: int = Field(default_factory=lambda: os.getenv("ACTION_MAX_TOKENS", "1500"))
    synthesis_temperature: float = Field(default_factory=lambda: os.getenv("SYNTHESIS_TEMPERATURE", "0.5"))
    synthesis_max_tokens: int = Field(default_factory=lambda: os.getenv("SYNTHESIS_MAX_TOKENS", "1000"))

    # HTTP
    request_shape: str = Field(default_factory=lambda: os.getenv("ASSISTANT_REQUEST_SHAPE", "form"))
    host: str = Field(default_factory=lambda: os.getenv("AI_CLIENT_HOST", "0.0.0.0"))
    port: int = Field(default_factory=lambda: os.getenv("AI_CLIENT_PORT", "8000"))

    @field_validator("mcp_args", mode="before")
    @classmethod
    def parse_mcp_args(cls, v):
        if isinstance(v, str):
            return parse_args_list(v)
        return v

    @field_validator("research_temperature", "action_temperature", "synthesis_temperature")
    @classmethod
    def validate_temperature(cls, v: float) -> float:
        if not 0.0 <= v <= 1.0:
            raise ValueError(f"temperature must be within 0.0-1.0, got {v}")
        return v

    @field_validator("research_max_tokens", "action_max_tokens", "synthesis_max_tokens", "max_tool_rounds")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError(f"value must be positive, got {v}")
        return v

    @field_validator("mcp_startup_timeout", "mcp_tool_timeout", "model_timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"timeout must be positive, got {v}")
        return v

    @field_validator("request_shape")
    @classmethod
    def validate_request_shape(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in REQUEST_SHAPES:
            raise ValueError(f"ASSISTANT_REQUEST_SHAPE must be one of {REQUEST_SHAPES}, got '{v}'")
        return v

    @property
    def has_api_key(self) -> bool:
        key = self.ai_api_key.strip()
        return bool(key) and key != API_KEY_PLACEHOLDER

    @property
    def has_github_pat(self) -> bool:
        pat = self.github_pat.strip()
        return bool(pat) and pat != GITHUB_PAT_PLACEHOLDER

    def settings_profiles(self) -> SettingsProfiles:
        return SettingsProfiles(
            research=InvocationSettings(
                temperature=self.research_temperature,
                max_output_tokens=self.research_max_tokens,
                auto_invoke_tools=True,
            ),
            action=InvocationSettings(
                temperature=self.action_temperature,
                max_output_tokens=self.action_max_tokens,
                auto_invoke_tools=True,
            ),
            synthesis=InvocationSettings(
                temperature=self.synthesis_temperature,
                max_output_tokens=self.synthesis_max_tokens,
                auto_invoke_tools=False,
            ),
        )
