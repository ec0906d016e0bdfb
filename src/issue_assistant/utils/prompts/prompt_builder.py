from issue_assistant.model.pipeline import PipelineRequest, ResearchContext
from issue_assistant.utils.prompts.constants import (
    RESEARCH_BACKGROUND,
    NUMERIC_PARAMETER_INSTRUCTIONS,
    RESEARCH_HANDOFF,
    NO_INVENTION_INSTRUCTIONS,
    PAYLOAD_INFERENCE_INSTRUCTIONS,
    ANSWERED_ISSUES_TEMPLATE,
    OPEN_ISSUES_TEMPLATE,
    CODE_SEARCH_TEMPLATE,
    CREATE_ISSUE_TEMPLATE,
    FINAL_RESPONSE_TEMPLATE,
    PAYLOAD_ANSWERED_ISSUES_TEMPLATE,
    PAYLOAD_OPEN_ISSUES_TEMPLATE,
    PAYLOAD_CODE_SEARCH_TEMPLATE,
    PAYLOAD_FINAL_RESPONSE_TEMPLATE,
    PAYLOAD_POST_COMMENT_TEMPLATE,
)


class PromptBuilder:
    """Builds the prompt of each pipeline step from the request and prior results."""

    @staticmethod
    def _research(template: str, request: PipelineRequest) -> str:
        return template.format(
            background=RESEARCH_BACKGROUND,
            repo=request.repo_name,
            issue=request.issue_context,
            numeric_instructions=NUMERIC_PARAMETER_INSTRUCTIONS,
            handoff=RESEARCH_HANDOFF,
        )

    @staticmethod
    def _payload_research(template: str, request: PipelineRequest) -> str:
        return template.format(
            background=RESEARCH_BACKGROUND,
            payload_instructions=PAYLOAD_INFERENCE_INSTRUCTIONS,
            payload=request.payload,
            numeric_instructions=NUMERIC_PARAMETER_INSTRUCTIONS,
            handoff=RESEARCH_HANDOFF,
        )

    @staticmethod
    def build_answered_issues_prompt(request: PipelineRequest, context: ResearchContext) -> str:
        if request.is_opaque:
            return PromptBuilder._payload_research(PAYLOAD_ANSWERED_ISSUES_TEMPLATE, request)
        return PromptBuilder._research(ANSWERED_ISSUES_TEMPLATE, request)

    @staticmethod
    def build_open_issues_prompt(request: PipelineRequest, context: ResearchContext) -> str:
        if request.is_opaque:
            return PromptBuilder._payload_research(PAYLOAD_OPEN_ISSUES_TEMPLATE, request)
        return PromptBuilder._research(OPEN_ISSUES_TEMPLATE, request)

    @staticmethod
    def build_code_search_prompt(request: PipelineRequest, context: ResearchContext) -> str:
        if request.is_opaque:
            return PromptBuilder._payload_research(PAYLOAD_CODE_SEARCH_TEMPLATE, request)
        return PromptBuilder._research(CODE_SEARCH_TEMPLATE, request)

    @staticmethod
    def build_create_issue_prompt(request: PipelineRequest, context: ResearchContext) -> str:
        return CREATE_ISSUE_TEMPLATE.format(
            repo=request.repo_name,
            issue=request.issue_context,
            answered_issues=context["answered_issues"],
            open_issues=context["open_issues"],
            code_search=context["code_search"],
            numeric_instructions=NUMERIC_PARAMETER_INSTRUCTIONS,
        )

    @staticmethod
    def build_final_response_prompt(request: PipelineRequest, context: ResearchContext) -> str:
        if request.is_opaque:
            return PAYLOAD_FINAL_RESPONSE_TEMPLATE.format(
                payload=request.payload,
                answered_issues=context["answered_issues"],
                open_issues=context["open_issues"],
                code_search=context["code_search"],
                no_invention=NO_INVENTION_INSTRUCTIONS,
            )
        return FINAL_RESPONSE_TEMPLATE.format(
            issue=request.issue_context,
            repo=request.repo_name,
            answered_issues=context["answered_issues"],
            open_issues=context["open_issues"],
            code_search=context["code_search"],
            created_issue=context["created_issue"],
            no_invention=NO_INVENTION_INSTRUCTIONS,
        )

    @staticmethod
    def build_post_comment_prompt(request: PipelineRequest, context: ResearchContext) -> str:
        return PAYLOAD_POST_COMMENT_TEMPLATE.format(
            payload_instructions=PAYLOAD_INFERENCE_INSTRUCTIONS,
            payload=request.payload,
            final_response=context["final_response"],
            numeric_instructions=NUMERIC_PARAMETER_INSTRUCTIONS,
        )
