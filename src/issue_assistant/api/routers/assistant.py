"""
GitHub assistant endpoint.
"""
import json
import asyncio
import logging
from typing import Dict, Any
from fastapi import APIRouter, Request
from starlette.responses import PlainTextResponse, StreamingResponse

from issue_assistant.model.dtos import RespondToIssueResponseDto
from issue_assistant.model.errors import BadRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/githubAssistant", tags=["githubAssistant"])

GENERIC_ERROR_MESSAGE = "An error occurred while processing your request. Check service logs for details."


@router.post(
    "/respondToIssue",
    response_model=RespondToIssueResponseDto,
    responses={400: {"description": "Missing or malformed request fields"},
               500: {"description": "Pipeline failure"}},
)
async def respond_to_issue(request: Request):
    """
    Research the issue and respond to it.

    The accepted body depends on the deployment's request shape. With
    `Accept: application/x-ndjson` progress events are streamed, ending with
    a `final` or `error` event.
    """
    shape = request.app.state.request_shape
    assistant_service = request.app.state.assistant_service

    try:
        pipeline_request = await shape.extract(request)
    except BadRequest as e:
        logger.warning(f"Rejected respondToIssue request: {e}")
        return PlainTextResponse(str(e), status_code=400)

    if not _wants_streaming(request):
        try:
            result = await assistant_service.respond(pipeline_request)
        except Exception as e:
            logger.error(
                f"Error processing issue for {pipeline_request.repo_name or 'webhook payload'}: {e}",
                exc_info=True,
            )
            return PlainTextResponse(GENERIC_ERROR_MESSAGE, status_code=500)
        return RespondToIssueResponseDto(response=result.response)

    return StreamingResponse(
        _event_stream(assistant_service, pipeline_request),
        media_type="application/x-ndjson",
    )


async def _event_stream(assistant_service, pipeline_request):
    """
    Run the pipeline in a task and yield its events as NDJSON lines.

    Closing the stream (client disconnect) cancels the pipeline, so no
    issue is created or comment posted for a caller that has gone.
    """
    queue = asyncio.Queue()

    yield _json_event({"type": "status", "state": "queued", "message": "respondToIssue request received"})

    def event_callback(event: Dict[str, Any]):
        try:
            queue.put_nowait(event)
        except asyncio.QueueFull:
            pass

    async def runner():
        try:
            result = await assistant_service.respond(pipeline_request, event_callback=event_callback)
            await queue.put({"type": "final", "response": result.response})
        except Exception as e:
            logger.error(f"Error processing issue: {e}", exc_info=True)
            await queue.put({"type": "error", "message": GENERIC_ERROR_MESSAGE})

    task = asyncio.create_task(runner())

    try:
        async for event in _drain_queue_until_final(queue, task):
            yield _json_event(event)
    finally:
        if not task.done():
            logger.warning("Response stream closed before the pipeline finished; cancelling it")
            task.cancel()


def _wants_streaming(request: Request) -> bool:
    """Check if client wants streaming response."""
    accept_header = request.headers.get("accept", "")
    return "application/x-ndjson" in accept_header.lower()


def _json_event(event: Dict[str, Any]) -> str:
    """Serialize event to NDJSON line."""
    return json.dumps(event) + "\n"


async def _drain_queue_until_final(queue: asyncio.Queue, task: asyncio.Task):
    """
    Drain events from queue until the runner has put its final/error event
    and finished. Yields each event as it arrives.

    The pipeline may emit its own `error` event before the runner's terminal
    one, so a terminal type only ends the stream once the task is done and
    nothing is left queued.
    """
    while True:
        try:
            event = await asyncio.wait_for(queue.get(), timeout=1.0)
        except asyncio.TimeoutError:
            if task.done() and queue.empty():
                break
            continue

        yield event
        if event.get("type") in ("final", "error") and task.done() and queue.empty():
            break
