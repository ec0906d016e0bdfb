"""
Service Package.

- assistant_service: GithubAssistantService facade used by the API and stdin mode
- invoker: ModelInvoker (single model call with a bounded tool loop)
- pipeline: IssueResearchOrchestrator and its step definitions
"""
from issue_assistant.service.assistant_service import GithubAssistantService, start_tool_registry
from issue_assistant.service.invoker import ModelInvoker
from issue_assistant.service.pipeline import IssueResearchOrchestrator

__all__ = ["GithubAssistantService", "start_tool_registry", "ModelInvoker", "IssueResearchOrchestrator"]
