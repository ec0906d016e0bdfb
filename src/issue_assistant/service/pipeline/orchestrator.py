"""
Issue Research Orchestrator.

Runs the fixed research-and-respond pipeline for one request:
- Step 1: Similar answered (closed) issues
- Step 2: Related open issues
- Step 3: Code search
- Step 4: Create a tracking issue (repository mode) / synthesize the comment (payload mode)
- Step 5: Synthesize the response (repository mode) / post the comment (payload mode)

Steps run strictly in order because each prompt embeds the text of the
previous steps.
"""
import logging
from typing import Any, Callable, Dict, Optional

from issue_assistant.model.pipeline import (
    PipelineRequest,
    PipelineResult,
    ResearchContext,
    SettingsProfiles,
)
from issue_assistant.service.pipeline.steps import (
    PipelineStep,
    RESPONSE_STEP,
    resolve_text,
    steps_for,
)
from issue_assistant.tools.registry import ToolRegistry
from issue_assistant.utils.prompt_logger import PromptLogger

logger = logging.getLogger(__name__)


def _emit(callback: Optional[Callable[[Dict], None]], event: Dict[str, Any]) -> None:
    """Safely emit an event via the callback."""
    if callback:
        try:
            callback(event)
        except Exception as e:
            logger.warning(f"Event callback failed: {e}")


class IssueResearchOrchestrator:

    def __init__(
        self,
        invoker,
        registry: ToolRegistry,
        profiles: Optional[SettingsProfiles] = None,
    ):
        self.invoker = invoker
        self.registry = registry
        self.profiles = profiles or SettingsProfiles.defaults()

    async def run(
        self,
        request: PipelineRequest,
        event_callback: Optional[Callable[[Dict], None]] = None,
    ) -> PipelineResult:
        """
        Execute every step for the request mode.

        A model that finds nothing is not an error: its step gets the
        placeholder text. Any exception from a model invocation aborts the
        run; no later step executes.
        """
        steps = steps_for(request.mode)
        context = ResearchContext()
        metadata = {"repo": request.repo_name or "webhook-payload", "mode": request.mode.value}

        logger.info(f"Starting issue research pipeline ({request.mode.value}) for '{metadata['repo']}'")

        try:
            for index, step in enumerate(steps, 1):
                text = await self._run_step(index, len(steps), step, request, context, metadata, event_callback)
                context.set(step.key, text)
        except Exception as e:
            logger.error(f"Issue research pipeline failed: {e}", exc_info=True)
            _emit(event_callback, {"type": "error", "message": "pipeline failed"})
            raise

        response = context[RESPONSE_STEP[request.mode]]
        _emit(event_callback, {"type": "status", "state": "completed", "message": "Pipeline completed"})
        return PipelineResult(response=response, context=context)

    async def _run_step(
        self,
        index: int,
        total: int,
        step: PipelineStep,
        request: PipelineRequest,
        context: ResearchContext,
        metadata: Dict[str, Any],
        event_callback: Optional[Callable[[Dict], None]],
    ) -> str:
        _emit(event_callback, {
            "type": "status",
            "state": f"{step.key}_started",
            "message": f"Step {index}/{total}: {step.description}",
        })
        logger.info(f"Step {index}: {step.description}")

        prompt = step.build_prompt(request, context)
        PromptLogger.log_prompt(prompt, metadata, stage=step.key)

        settings = self.profiles.for_kind(step.settings_kind)
        scope = self.registry.scope(step.tools, label=step.key) if step.uses_tools else None
        if step.uses_tools and scope.is_empty:
            logger.warning(f"Step {index} ({step.key}): no GitHub tools available, the model runs without tools")

        result = await self.invoker.invoke(prompt, settings, scope)
        PromptLogger.log_step_result(result, metadata, stage=step.key)

        text = resolve_text(result, step.placeholder)
        if text is step.placeholder:
            logger.info(f"Step {index} - {step.key}: no usable output, using placeholder")
        else:
            logger.info(f"Step {index} - {step.key} result: {text}")

        _emit(event_callback, {
            "type": "progress",
            "step": index,
            "max_steps": total,
            "message": f"Step {index}/{total} complete",
        })
        return text
