"""
Model Package.

Pipeline data types, request/response DTOs and the error taxonomy.
"""
from issue_assistant.model.errors import (
    BadRequest,
    ProviderUnavailable,
    ModelInvocationFailure,
    ToolCallError,
)
from issue_assistant.model.pipeline import (
    RequestMode,
    ToolDescriptor,
    PipelineRequest,
    InvocationSettings,
    SettingsProfiles,
    ResearchContext,
    PipelineResult,
    is_repo_identifier,
)
from issue_assistant.model.dtos import IssueRequestDto, RespondToIssueResponseDto, HealthResponseDto

__all__ = [
    "BadRequest",
    "ProviderUnavailable",
    "ModelInvocationFailure",
    "ToolCallError",
    "RequestMode",
    "ToolDescriptor",
    "PipelineRequest",
    "InvocationSettings",
    "SettingsProfiles",
    "ResearchContext",
    "PipelineResult",
    "is_repo_identifier",
    "IssueRequestDto",
    "RespondToIssueResponseDto",
    "HealthResponseDto",
]
