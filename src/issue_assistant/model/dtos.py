from typing import Optional
from pydantic import BaseModel, Field


class IssueRequestDto(BaseModel):
    """JSON body accepted by the structured request shape."""
    issue_context: Optional[str] = Field(default=None, description="Free-form description of the issue")
    repo_name: Optional[str] = Field(default=None, description="Target repository in 'owner/repo' format")


class RespondToIssueResponseDto(BaseModel):
    response: str


class HealthResponseDto(BaseModel):
    status: str = "ok"
    tools: int = Field(default=0, description="Number of GitHub tools registered for the model")
