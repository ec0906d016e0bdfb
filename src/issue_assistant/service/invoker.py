"""
Single model invocation with optional autonomous tool calling.
"""
import asyncio
import logging
from typing import Any, Callable, List, Optional

from langchain_core.messages import BaseMessage, HumanMessage, ToolMessage

from issue_assistant.model.errors import ModelInvocationFailure
from issue_assistant.model.pipeline import InvocationSettings
from issue_assistant.tools.registry import ToolScope

logger = logging.getLogger(__name__)

DEFAULT_MODEL_TIMEOUT = 120.0
DEFAULT_MAX_TOOL_ROUNDS = 10

TOOL_BUDGET_EXHAUSTED = (
    "Tool budget exhausted. No more tools can be called. Answer now using only "
    "the tool results gathered so far, listed below."
)


def extract_llm_response_text(response: Any) -> str:
    """
    Extract text content from LLM response, handling different response formats.
    Some LLM providers return content as a list of objects instead of a string.
    """
    if hasattr(response, 'content'):
        content = response.content
        if isinstance(content, list):
            text_parts = []
            for item in content:
                if isinstance(item, str):
                    text_parts.append(item)
                elif isinstance(item, dict):
                    if item.get('type', 'text') == 'text' and 'text' in item:
                        text_parts.append(item['text'])
                elif hasattr(item, 'text'):
                    text_parts.append(item.text)
            return "".join(text_parts)
        return str(content) if content is not None else ""
    return str(response) if response is not None else ""


class ModelInvoker:
    """
    Runs one prompt against the chat model.

    When the settings allow tool auto-invocation and the scope has tools, the
    model may request tool calls; they are executed through the scope and fed
    back until the model produces a plain answer.
    """

    def __init__(
        self,
        llm_factory: Callable[[InvocationSettings], Any],
        model_timeout: float = DEFAULT_MODEL_TIMEOUT,
        max_tool_rounds: int = DEFAULT_MAX_TOOL_ROUNDS,
    ):
        self.llm_factory = llm_factory
        self.model_timeout = model_timeout
        self.max_tool_rounds = max_tool_rounds

    async def invoke(
        self,
        prompt: str,
        settings: InvocationSettings,
        scope: Optional[ToolScope] = None,
    ) -> Optional[str]:
        """
        Returns:
            The model's text answer, or None when it produced no text.

        Raises:
            ModelInvocationFailure: model creation, a model call, or its timeout failed.
        """
        try:
            llm = self.llm_factory(settings)
        except Exception as e:
            raise ModelInvocationFailure(f"Failed to create LLM instance: {e}") from e

        messages: List[BaseMessage] = [HumanMessage(content=prompt)]
        use_tools = settings.auto_invoke_tools and scope is not None and not scope.is_empty

        if not use_tools:
            response = await self._call_model(llm, messages)
            return self._text_or_none(response)

        model = llm.bind_tools(scope.definitions(), parallel_tool_calls=False)
        gathered: List[str] = []
        for round_number in range(1, self.max_tool_rounds + 1):
            response = await self._call_model(model, messages)
            tool_calls = getattr(response, "tool_calls", None) or []
            if not tool_calls:
                return self._text_or_none(response)

            messages.append(response)
            for call in tool_calls:
                output = await scope.call(call.get("name", ""), call.get("args") or {})
                messages.append(ToolMessage(content=output, tool_call_id=call.get("id") or ""))
                gathered.append(f"{call.get('name', '')} {call.get('args') or {}}:\n{output}")
            logger.debug(f"Tool round {round_number}: executed {len(tool_calls)} call(s)")

        logger.warning(
            f"Model still requesting tools after {self.max_tool_rounds} rounds; asking for a final answer without tools"
        )
        # The final call carries no tool definitions, so the history goes in as plain text
        response = await self._call_model(llm, [
            HumanMessage(content=prompt),
            HumanMessage(content=TOOL_BUDGET_EXHAUSTED + "\n\n" + "\n\n".join(gathered)),
        ])
        return self._text_or_none(response)

    async def _call_model(self, model: Any, messages: List[BaseMessage]) -> Any:
        try:
            return await asyncio.wait_for(model.ainvoke(messages), timeout=self.model_timeout)
        except asyncio.TimeoutError as e:
            raise ModelInvocationFailure(f"Model call timed out after {self.model_timeout}s") from e
        except Exception as e:
            raise ModelInvocationFailure(f"Model call failed: {e}") from e

    @staticmethod
    def _text_or_none(response: Any) -> Optional[str]:
        text = extract_llm_response_text(response).strip()
        return text or None
