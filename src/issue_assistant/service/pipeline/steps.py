"""
Step definitions for the issue research pipeline.

Repository mode:     answered_issues -> open_issues -> code_search -> created_issue -> final_response
Webhook payload mode: answered_issues -> open_issues -> code_search -> final_response -> comment_confirmation
"""
from dataclasses import dataclass
from typing import Callable, FrozenSet, Optional, Tuple

from issue_assistant.model.pipeline import PipelineRequest, RequestMode, ResearchContext
from issue_assistant.utils.prompts.prompt_builder import PromptBuilder

ANSWERED_ISSUES = "answered_issues"
OPEN_ISSUES = "open_issues"
CODE_SEARCH = "code_search"
CREATED_ISSUE = "created_issue"
FINAL_RESPONSE = "final_response"
COMMENT_CONFIRMATION = "comment_confirmation"

# Bare tool names of the GitHub MCP server
ISSUE_SEARCH_TOOLS = frozenset({"search_issues", "list_issues", "get_issue"})
CODE_SEARCH_TOOLS = frozenset({"search_code", "get_file_contents"})
CREATE_ISSUE_TOOLS = frozenset({"create_issue"})
COMMENT_TOOLS = frozenset({"add_issue_comment", "get_issue"})
NO_TOOLS: FrozenSet[str] = frozenset()

PromptFn = Callable[[PipelineRequest, ResearchContext], str]


@dataclass(frozen=True)
class PipelineStep:
    key: str
    description: str
    settings_kind: str  # research | action | synthesis
    tools: FrozenSet[str]
    placeholder: str
    build_prompt: PromptFn

    @property
    def uses_tools(self) -> bool:
        return bool(self.tools)


ANSWERED_ISSUES_STEP = PipelineStep(
    key=ANSWERED_ISSUES,
    description="Searching similar answered issues",
    settings_kind="research",
    tools=ISSUE_SEARCH_TOOLS,
    placeholder="No information on answered issues found by the LLM.",
    build_prompt=PromptBuilder.build_answered_issues_prompt,
)

OPEN_ISSUES_STEP = PipelineStep(
    key=OPEN_ISSUES,
    description="Searching other outstanding issues",
    settings_kind="research",
    tools=ISSUE_SEARCH_TOOLS,
    placeholder="No information on outstanding issues found by the LLM.",
    build_prompt=PromptBuilder.build_open_issues_prompt,
)

CODE_SEARCH_STEP = PipelineStep(
    key=CODE_SEARCH,
    description="Searching the code base",
    settings_kind="research",
    tools=CODE_SEARCH_TOOLS,
    placeholder="No relevant code snippets found by the LLM.",
    build_prompt=PromptBuilder.build_code_search_prompt,
)

CREATED_ISSUE_STEP = PipelineStep(
    key=CREATED_ISSUE,
    description="Creating a tracking issue with the research context",
    settings_kind="action",
    tools=CREATE_ISSUE_TOOLS,
    placeholder="Could not create a new issue or no confirmation received.",
    build_prompt=PromptBuilder.build_create_issue_prompt,
)

FINAL_RESPONSE_STEP = PipelineStep(
    key=FINAL_RESPONSE,
    description="Synthesizing a response",
    settings_kind="synthesis",
    tools=NO_TOOLS,
    placeholder="Could not generate a final response at this time.",
    build_prompt=PromptBuilder.build_final_response_prompt,
)

COMMENT_CONFIRMATION_STEP = PipelineStep(
    key=COMMENT_CONFIRMATION,
    description="Posting the response as an issue comment",
    settings_kind="action",
    tools=COMMENT_TOOLS,
    placeholder="Comment posting failed: no confirmation received.",
    build_prompt=PromptBuilder.build_post_comment_prompt,
)

REPOSITORY_STEPS: Tuple[PipelineStep, ...] = (
    ANSWERED_ISSUES_STEP,
    OPEN_ISSUES_STEP,
    CODE_SEARCH_STEP,
    CREATED_ISSUE_STEP,
    FINAL_RESPONSE_STEP,
)

PAYLOAD_STEPS: Tuple[PipelineStep, ...] = (
    ANSWERED_ISSUES_STEP,
    OPEN_ISSUES_STEP,
    CODE_SEARCH_STEP,
    FINAL_RESPONSE_STEP,
    COMMENT_CONFIRMATION_STEP,
)

# The step whose text is returned to the caller
RESPONSE_STEP = {
    RequestMode.REPOSITORY: FINAL_RESPONSE,
    RequestMode.OPAQUE_PAYLOAD: COMMENT_CONFIRMATION,
}


def steps_for(mode: RequestMode) -> Tuple[PipelineStep, ...]:
    if mode == RequestMode.OPAQUE_PAYLOAD:
        return PAYLOAD_STEPS
    return REPOSITORY_STEPS


def resolve_text(result: Optional[str], placeholder: str) -> str:
    """Step text, or the placeholder when the model produced nothing usable."""
    if result is None or not result.strip():
        return placeholder
    return result
