"""
Pipeline Package.

- orchestrator: IssueResearchOrchestrator
- steps: step definitions, tool scopes and placeholders
"""
from issue_assistant.service.pipeline.orchestrator import IssueResearchOrchestrator
from issue_assistant.service.pipeline.steps import (
    PipelineStep,
    REPOSITORY_STEPS,
    PAYLOAD_STEPS,
    steps_for,
    resolve_text,
)

__all__ = [
    "IssueResearchOrchestrator",
    "PipelineStep",
    "REPOSITORY_STEPS",
    "PAYLOAD_STEPS",
    "steps_for",
    "resolve_text",
]
