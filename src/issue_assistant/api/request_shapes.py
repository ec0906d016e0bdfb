"""
Request shapes accepted by the respondToIssue endpoint.

A deployment serves exactly one shape (ASSISTANT_REQUEST_SHAPE):
- form:    form field `issue`, repository taken from a "Repo: owner/repo" line
- webhook: form field `payload`, the raw webhook body; the model infers repo and issue
- json:    JSON body {"issue_context": ..., "repo_name": ...}

Every shape turns the incoming fields into a PipelineRequest or raises
BadRequest before any pipeline work starts.
"""
import json
import logging
from typing import Any, Dict, Mapping, Optional, Type

from fastapi import Request
from pydantic import ValidationError

from issue_assistant.model.dtos import IssueRequestDto
from issue_assistant.model.errors import BadRequest
from issue_assistant.model.pipeline import PipelineRequest, is_repo_identifier

logger = logging.getLogger(__name__)

REPO_MARKER = "Repo: "

MISSING_ISSUE_MESSAGE = "Issue context must be provided in the form data."
MISSING_REPO_MESSAGE = (
    "repoName could not be extracted from issueContext or is not in 'owner/repo' format. "
    "Ensure the issue context contains a line like 'Repo: owner/repo'."
)
MISSING_PAYLOAD_MESSAGE = "Webhook payload must be provided in the form data."
INVALID_JSON_MESSAGE = "Request body must be a JSON object with issue_context and repo_name."
MISSING_CONTEXT_MESSAGE = "issue_context must be provided."
INVALID_REPO_MESSAGE = "repo_name must be provided in 'owner/repo' format."


def _text_field(fields: Mapping[str, Any], name: str) -> Optional[str]:
    value = fields.get(name)
    if isinstance(value, str) and value.strip():
        return value
    return None


def extract_repo_marker(issue: str) -> Optional[str]:
    """Value of the first line starting with 'Repo: ' (case-insensitive), trimmed."""
    marker = REPO_MARKER.lower()
    for line in issue.splitlines():
        if line.lower().startswith(marker):
            return line[len(REPO_MARKER):].strip()
    return None


class RequestShape:
    """Base class for request shapes."""

    name = ""

    def parse(self, fields: Mapping[str, Any]) -> PipelineRequest:
        raise NotImplementedError

    async def read_fields(self, request: Request) -> Mapping[str, Any]:
        form = await request.form()
        return dict(form)

    async def extract(self, request: Request) -> PipelineRequest:
        fields = await self.read_fields(request)
        return self.parse(fields)


class FormWithMarker(RequestShape):
    name = "form"

    def parse(self, fields: Mapping[str, Any]) -> PipelineRequest:
        issue = _text_field(fields, "issue")
        if issue is None:
            raise BadRequest(MISSING_ISSUE_MESSAGE)

        repo_name = extract_repo_marker(issue)
        if not is_repo_identifier(repo_name):
            raise BadRequest(MISSING_REPO_MESSAGE)

        logger.info(f"Received request to respond to issue in repo: '{repo_name}'")
        return PipelineRequest.for_repository(issue_context=issue, repo_name=repo_name)


class RawPayload(RequestShape):
    name = "webhook"

    def parse(self, fields: Mapping[str, Any]) -> PipelineRequest:
        payload = _text_field(fields, "payload")
        if payload is None:
            raise BadRequest(MISSING_PAYLOAD_MESSAGE)

        logger.info(f"Received webhook payload ({len(payload)} chars)")
        return PipelineRequest.for_payload(payload)


class StructuredBody(RequestShape):
    name = "json"

    async def read_fields(self, request: Request) -> Mapping[str, Any]:
        try:
            body = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise BadRequest(INVALID_JSON_MESSAGE) from e
        if not isinstance(body, dict):
            raise BadRequest(INVALID_JSON_MESSAGE)
        return body

    def parse(self, fields: Mapping[str, Any]) -> PipelineRequest:
        try:
            dto = IssueRequestDto(**fields)
        except ValidationError as e:
            raise BadRequest(INVALID_JSON_MESSAGE) from e

        if not dto.issue_context or not dto.issue_context.strip():
            raise BadRequest(MISSING_CONTEXT_MESSAGE)
        if not is_repo_identifier(dto.repo_name):
            raise BadRequest(INVALID_REPO_MESSAGE)

        logger.info(f"Received request to respond to issue in repo: '{dto.repo_name}'")
        return PipelineRequest.for_repository(issue_context=dto.issue_context, repo_name=dto.repo_name)


REQUEST_SHAPES: Dict[str, Type[RequestShape]] = {
    FormWithMarker.name: FormWithMarker,
    RawPayload.name: RawPayload,
    StructuredBody.name: StructuredBody,
}


def get_request_shape(name: str) -> RequestShape:
    """
    Raises:
        ValueError: If no shape is registered under `name`
    """
    shape_cls = REQUEST_SHAPES.get((name or "").strip().lower())
    if shape_cls is None:
        supported = ", ".join(REQUEST_SHAPES)
        raise ValueError(f"Unsupported request shape: '{name}'. Supported shapes: {supported}")
    return shape_cls()
