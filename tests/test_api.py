"""
HTTP contract tests for the FastAPI application.
"""
import asyncio
import json

import pytest
from fastapi.testclient import TestClient

from issue_assistant.api.app import create_app
from issue_assistant.api.request_shapes import MISSING_ISSUE_MESSAGE, MISSING_REPO_MESSAGE
from issue_assistant.api.routers.assistant import GENERIC_ERROR_MESSAGE, _event_stream
from issue_assistant.model.errors import ModelInvocationFailure
from issue_assistant.service.invoker import ModelInvoker

from conftest import FakeToolProvider, GITHUB_TOOLS, ScriptedChatModel, make_invoker

URL = "/githubAssistant/respondToIssue"
ISSUE = "The export button does nothing\nRepo: acme/widgets\nBrowser: Firefox"


def ndjson(response):
    return [json.loads(line) for line in response.text.splitlines() if line.strip()]


class HangingService:
    """Emits one progress event, then waits until cancelled."""

    def __init__(self):
        self.cancelled = False

    async def respond(self, request, event_callback=None):
        event_callback({"type": "progress", "step": 1, "max": 5, "message": "Researching"})
        try:
            await asyncio.Event().wait()
        except asyncio.CancelledError:
            self.cancelled = True
            raise


class TestFormShape:

    def test_success(self, config):
        invoker = make_invoker(["a", "b", "c", "Created #4", "We are looking into it."])
        provider = FakeToolProvider()

        with TestClient(create_app(config, tool_provider=provider, model_invoker=invoker)) as client:
            response = client.post(URL, data={"issue": ISSUE})

        assert response.status_code == 200
        assert response.json() == {"response": "We are looking into it."}
        assert provider.shutdown_count == 1

    def test_missing_repo_line_is_400_without_model_call(self, config):
        invoker = make_invoker([])

        with TestClient(create_app(config, tool_provider=FakeToolProvider(), model_invoker=invoker)) as client:
            response = client.post(URL, data={"issue": "The export button does nothing"})

        assert response.status_code == 400
        assert response.text == MISSING_REPO_MESSAGE
        invoker.invoke.assert_not_called()

    def test_missing_field_is_400(self, config):
        invoker = make_invoker([])

        with TestClient(create_app(config, tool_provider=FakeToolProvider(), model_invoker=invoker)) as client:
            response = client.post(URL, data={})

        assert response.status_code == 400
        assert response.text == MISSING_ISSUE_MESSAGE

    def test_model_failure_is_generic_500(self, config):
        invoker = make_invoker([ModelInvocationFailure("invalid api key sk-live-123")])

        with TestClient(create_app(config, tool_provider=FakeToolProvider(), model_invoker=invoker)) as client:
            response = client.post(URL, data={"issue": ISSUE})

        assert response.status_code == 500
        assert response.text == GENERIC_ERROR_MESSAGE
        assert "sk-live" not in response.text

    def test_full_stack_with_scripted_model(self, config):
        model = ScriptedChatModel([
            "No similar closed issues.",
            "No open issues.",
            "export.js handles the click.",
            "Created issue #11.",
            "Thanks! Tracked in #11.",
        ])
        invoker = ModelInvoker(lambda settings: model)

        with TestClient(create_app(config, tool_provider=FakeToolProvider(), model_invoker=invoker)) as client:
            response = client.post(URL, data={"issue": ISSUE})

        assert response.status_code == 200
        assert response.json()["response"] == "Thanks! Tracked in #11."


class TestJsonShape:

    @pytest.fixture
    def json_config(self, config):
        return config.model_copy(update={"request_shape": "json"})

    def test_repo_without_slash_is_400(self, json_config):
        invoker = make_invoker([])

        with TestClient(create_app(json_config, tool_provider=FakeToolProvider(), model_invoker=invoker)) as client:
            response = client.post(URL, json={"issue_context": "Crash", "repo_name": "widgets"})

        assert response.status_code == 400
        invoker.invoke.assert_not_called()

    def test_invalid_json_is_400(self, json_config):
        with TestClient(create_app(json_config, tool_provider=FakeToolProvider(),
                                   model_invoker=make_invoker([]))) as client:
            response = client.post(URL, content="{not json", headers={"Content-Type": "application/json"})

        assert response.status_code == 400

    def test_success(self, json_config):
        invoker = make_invoker(["a", "b", "c", "d", "Reply"])

        with TestClient(create_app(json_config, tool_provider=FakeToolProvider(), model_invoker=invoker)) as client:
            response = client.post(URL, json={"issue_context": "Crash", "repo_name": "acme/widgets"})

        assert response.status_code == 200
        assert response.json() == {"response": "Reply"}


class TestWebhookShape:

    def test_comment_confirmation_returned(self, config):
        webhook_config = config.model_copy(update={"request_shape": "webhook"})
        invoker = make_invoker(["a", "b", "c", "Draft", "Comment posting succeeded: #7"])

        with TestClient(create_app(webhook_config, tool_provider=FakeToolProvider(), model_invoker=invoker)) as client:
            response = client.post(URL, data={"payload": '{"action": "opened"}'})

        assert response.status_code == 200
        assert response.json() == {"response": "Comment posting succeeded: #7"}


class TestStreaming:

    def test_final_event(self, config):
        invoker = make_invoker(["a", "b", "c", "d", "Streamed reply"])

        with TestClient(create_app(config, tool_provider=FakeToolProvider(), model_invoker=invoker)) as client:
            response = client.post(URL, data={"issue": ISSUE}, headers={"Accept": "application/x-ndjson"})

        events = ndjson(response)
        assert response.status_code == 200
        assert events[0]["state"] == "queued"
        assert events[-1] == {"type": "final", "response": "Streamed reply"}
        assert any(event["type"] == "progress" for event in events)

    def test_error_event_is_generic(self, config):
        invoker = make_invoker([ModelInvocationFailure("secret detail")])

        with TestClient(create_app(config, tool_provider=FakeToolProvider(), model_invoker=invoker)) as client:
            response = client.post(URL, data={"issue": ISSUE}, headers={"Accept": "application/x-ndjson"})

        events = ndjson(response)
        assert events[-1] == {"type": "error", "message": GENERIC_ERROR_MESSAGE}
        assert "secret detail" not in response.text

    @pytest.mark.asyncio
    async def test_closed_stream_cancels_pipeline(self):
        service = HangingService()
        stream = _event_stream(service, None)

        first = json.loads(await stream.__anext__())
        second = json.loads(await stream.__anext__())
        await stream.aclose()
        for _ in range(3):
            await asyncio.sleep(0)

        assert first["state"] == "queued"
        assert second["type"] == "progress"
        assert service.cancelled


class TestHealthAndDegradedMode:

    def test_health_reports_tool_count(self, config):
        with TestClient(create_app(config, tool_provider=FakeToolProvider(), model_invoker=make_invoker([]))) as client:
            response = client.get("/health")

        assert response.json() == {"status": "ok", "tools": len(GITHUB_TOOLS)}

    def test_provider_failure_serves_without_tools(self, config):
        provider = FakeToolProvider(fail_initialize=True)
        invoker = make_invoker([None, None, None, None, "Answered without tools"])

        with TestClient(create_app(config, tool_provider=provider, model_invoker=invoker)) as client:
            health = client.get("/health")
            response = client.post(URL, data={"issue": ISSUE})

        assert health.json()["tools"] == 0
        assert response.status_code == 200
        assert response.json() == {"response": "Answered without tools"}


def test_unknown_request_shape_fails_at_startup(config):
    with pytest.raises(ValueError):
        create_app(config.model_copy(update={"request_shape": "xml"}))
