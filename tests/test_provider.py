"""
Unit tests for GitHubToolProvider using a fake mcp_use client.
"""
import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from issue_assistant.model.errors import ProviderUnavailable, ToolCallError
from issue_assistant.tools.provider import GitHubToolProvider, extract_tool_result_text


def mcp_tool(name, schema=None):
    return SimpleNamespace(name=name, description=f"{name} tool", inputSchema=schema or {"type": "object"})


def call_result(text, is_error=False):
    return SimpleNamespace(content=[SimpleNamespace(type="text", text=text)], isError=is_error)


def make_client(tools=None, call_result_value=None):
    session = MagicMock()
    session.connector.tools = tools if tools is not None else [mcp_tool("search_issues"), mcp_tool("get_issue")]
    session.connector.call_tool = AsyncMock(return_value=call_result_value or call_result("[]"))

    client = MagicMock()
    client.create_session = AsyncMock(return_value=session)
    client.close_all_sessions = AsyncMock()
    return client, session


class TestInitialize:

    @pytest.mark.asyncio
    async def test_catalog_retrieved_and_launch_config_built(self, config):
        client, _ = make_client()
        factory = MagicMock(return_value=client)
        provider = GitHubToolProvider(config, client_factory=factory)

        tools = await provider.initialize()

        assert [tool.name for tool in tools] == ["search_issues", "get_issue"]
        server = factory.call_args[0][0]["mcpServers"]["github"]
        assert server["command"] == "npx"
        assert server["env"] == {"GITHUB_TOKEN": "ghp_test"}
        client.create_session.assert_awaited_once_with("github")

    @pytest.mark.asyncio
    async def test_second_initialize_returns_cached_catalog(self, config):
        client, _ = make_client()
        factory = MagicMock(return_value=client)
        provider = GitHubToolProvider(config, client_factory=factory)

        first = await provider.initialize()
        second = await provider.initialize()

        assert first == second
        assert factory.call_count == 1

    @pytest.mark.asyncio
    async def test_launch_failure_raises_provider_unavailable(self, config):
        factory = MagicMock(side_effect=FileNotFoundError("npx"))
        provider = GitHubToolProvider(config, client_factory=factory)

        with pytest.raises(ProviderUnavailable):
            await provider.initialize()
        assert not provider.is_available
        assert provider.list_tools() == ()

    @pytest.mark.asyncio
    async def test_handshake_timeout(self, config):
        client, _ = make_client()

        async def hang(_name):
            await asyncio.sleep(5)

        client.create_session = hang
        provider = GitHubToolProvider(
            config.model_copy(update={"mcp_startup_timeout": 0.01}),
            client_factory=MagicMock(return_value=client),
        )

        with pytest.raises(ProviderUnavailable):
            await provider.initialize()
        client.close_all_sessions.assert_awaited_once()


class TestCallTool:

    @pytest.mark.asyncio
    async def test_returns_text(self, config):
        client, session = make_client(call_result_value=call_result('[{"number": 1}]'))
        provider = GitHubToolProvider(config, client_factory=MagicMock(return_value=client))
        await provider.initialize()

        text = await provider.call_tool("get_issue", {"issue_number": 1})

        assert text == '[{"number": 1}]'
        session.connector.call_tool.assert_awaited_once_with("get_issue", {"issue_number": 1})

    @pytest.mark.asyncio
    async def test_error_result_raises(self, config):
        client, _ = make_client(call_result_value=call_result("Not Found", is_error=True))
        provider = GitHubToolProvider(config, client_factory=MagicMock(return_value=client))
        await provider.initialize()

        with pytest.raises(ToolCallError, match="Not Found"):
            await provider.call_tool("get_issue", {"issue_number": 404})

    @pytest.mark.asyncio
    async def test_unavailable_without_session(self, config):
        provider = GitHubToolProvider(config, client_factory=MagicMock())
        with pytest.raises(ProviderUnavailable):
            await provider.call_tool("get_issue", {})

    @pytest.mark.asyncio
    async def test_calls_are_serialized(self, config):
        client, session = make_client()
        active = 0
        peak = 0

        async def slow_call(name, arguments):
            nonlocal active, peak
            active += 1
            peak = max(peak, active)
            await asyncio.sleep(0.01)
            active -= 1
            return call_result("ok")

        session.connector.call_tool = slow_call
        provider = GitHubToolProvider(config, client_factory=MagicMock(return_value=client))
        await provider.initialize()

        await asyncio.gather(*(provider.call_tool("search_issues", {}) for _ in range(3)))

        assert peak == 1


class TestShutdown:

    @pytest.mark.asyncio
    async def test_shutdown_is_idempotent(self, config):
        client, _ = make_client()
        provider = GitHubToolProvider(config, client_factory=MagicMock(return_value=client))
        await provider.initialize()

        await provider.shutdown()
        await provider.shutdown()

        client.close_all_sessions.assert_awaited_once()
        assert not provider.is_available

    @pytest.mark.asyncio
    async def test_shutdown_without_initialize(self, config):
        factory = MagicMock()
        provider = GitHubToolProvider(config, client_factory=factory)

        await provider.shutdown()
        await provider.shutdown()

        factory.assert_not_called()

    @pytest.mark.asyncio
    async def test_shutdown_after_launch_failure(self, config):
        provider = GitHubToolProvider(config, client_factory=MagicMock(side_effect=FileNotFoundError("docker")))
        with pytest.raises(ProviderUnavailable):
            await provider.initialize()

        await provider.shutdown()

        assert not provider.is_available

    @pytest.mark.asyncio
    async def test_shutdown_after_handshake_timeout(self, config):
        client, _ = make_client()

        async def hang(_name):
            await asyncio.sleep(5)

        client.create_session = hang
        provider = GitHubToolProvider(
            config.model_copy(update={"mcp_startup_timeout": 0.01}),
            client_factory=MagicMock(return_value=client),
        )
        with pytest.raises(ProviderUnavailable):
            await provider.initialize()

        await provider.shutdown()
        await provider.shutdown()

        # Closed once during the failed startup, not again on shutdown
        client.close_all_sessions.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_shutdown_tolerates_close_error(self, config):
        client, _ = make_client()
        client.close_all_sessions = AsyncMock(side_effect=RuntimeError("process already gone"))
        provider = GitHubToolProvider(config, client_factory=MagicMock(return_value=client))
        await provider.initialize()

        await provider.shutdown()
        await provider.shutdown()

        client.close_all_sessions.assert_awaited_once()


def test_extract_tool_result_text_joins_blocks():
    result = SimpleNamespace(content=[SimpleNamespace(text="a"), SimpleNamespace(text="b")])
    assert extract_tool_result_text(result) == "a\nb"
