"""
Prompt templates for the issue research pipeline.

- constants: shared instruction blocks and step templates (repository and webhook-payload variants)
- prompt_builder: PromptBuilder, one builder per pipeline step
"""
from .constants import (
    NUMERIC_PARAMETER_INSTRUCTIONS,
    NO_INVENTION_INSTRUCTIONS,
    PAYLOAD_INFERENCE_INSTRUCTIONS,
)
from .prompt_builder import PromptBuilder

__all__ = [
    'NUMERIC_PARAMETER_INSTRUCTIONS',
    'NO_INVENTION_INSTRUCTIONS',
    'PAYLOAD_INFERENCE_INSTRUCTIONS',
    'PromptBuilder',
]
