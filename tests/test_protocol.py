"""Tests for the per-session protocol server and the session router."""

import asyncio
from unittest.mock import AsyncMock

import pytest
from mcp import types
from pydantic import BaseModel

from protocol import LATEST_PROTOCOL_VERSION, ProtocolServer, SessionRouter
from tools import ToolContext, ToolRegistry, ToolResult


class EchoInput(BaseModel):
    text: str


def make_registry() -> ToolRegistry:
    registry = ToolRegistry()

    async def echo(arguments: EchoInput, context: ToolContext) -> ToolResult:
        return ToolResult(text=f"{context.session_id}:{arguments.text}")

    async def failing(arguments, context: ToolContext) -> ToolResult:
        return ToolResult(text="upstream unavailable", is_error=True)

    async def broken(arguments, context: ToolContext) -> ToolResult:
        raise RuntimeError("handler bug")

    registry.register("echo", "Echo", "Echoes text", echo, input_model=EchoInput)
    registry.register("failing", "Failing", "Reports a failure", failing)
    registry.register("broken", "Broken", "Always raises", broken)
    return registry


def make_server() -> ProtocolServer:
    return ProtocolServer(make_registry(), "test-server", "0.1", "hello")


def request(method: str, params=None, request_id=1) -> dict:
    message = {"jsonrpc": "2.0", "id": request_id, "method": method}
    if params is not None:
        message["params"] = params
    return message


def initialize_params(version: str) -> dict:
    return {"protocolVersion": version, "capabilities": {}, "clientInfo": {"name": "pytest", "version": "1.0"}}


class TestProtocolServer:
    @pytest.mark.asyncio
    async def test_initialize_echoes_supported_version(self) -> None:
        server = make_server()

        response = await server.handle(request("initialize", initialize_params("2024-11-05")), "s1")

        result = response["result"]
        assert result["protocolVersion"] == "2024-11-05"
        assert result["serverInfo"] == {"name": "test-server", "version": "0.1"}
        assert result["capabilities"]["tools"] == {"listChanged": False}
        assert result["instructions"] == "hello"
        assert server.client_info == {"name": "pytest", "version": "1.0"}

    @pytest.mark.asyncio
    async def test_initialize_falls_back_to_latest_version(self) -> None:
        response = await make_server().handle(request("initialize", initialize_params("1999-01-01")), "s1")

        assert response["result"]["protocolVersion"] == LATEST_PROTOCOL_VERSION

    @pytest.mark.asyncio
    async def test_initialize_without_client_info_is_invalid(self) -> None:
        response = await make_server().handle(request("initialize", {"protocolVersion": "2025-03-26"}), "s1")

        assert response["error"]["code"] == types.INVALID_PARAMS

    @pytest.mark.asyncio
    async def test_initialized_notification_has_no_response(self) -> None:
        server = make_server()

        response = await server.handle({"jsonrpc": "2.0", "method": "notifications/initialized"}, "s1")

        assert response is None
        assert server.initialized is True

    @pytest.mark.asyncio
    async def test_unknown_notification_is_ignored(self) -> None:
        assert await make_server().handle({"jsonrpc": "2.0", "method": "notifications/whatever"}, "s1") is None

    @pytest.mark.asyncio
    async def test_ping(self) -> None:
        response = await make_server().handle(request("ping", request_id="abc"), "s1")

        assert response == {"jsonrpc": "2.0", "id": "abc", "result": {}}

    @pytest.mark.asyncio
    async def test_tools_list_includes_input_schema(self) -> None:
        response = await make_server().handle(request("tools/list"), "s1")

        tools = {tool["name"]: tool for tool in response["result"]["tools"]}
        assert set(tools) == {"echo", "failing", "broken"}
        assert tools["echo"]["title"] == "Echo"
        assert tools["echo"]["inputSchema"]["properties"]["text"]["type"] == "string"
        assert tools["echo"]["inputSchema"]["required"] == ["text"]

    @pytest.mark.asyncio
    async def test_tools_call_passes_session_and_request_id(self) -> None:
        seen = []
        registry = ToolRegistry()

        async def record(arguments, context: ToolContext) -> ToolResult:
            seen.append(context)
            return ToolResult(text="ok")

        registry.register("record", "Record", "Records its context", record)

        await ProtocolServer(registry, "t", "1").handle(request("tools/call", {"name": "record"}, request_id=11), "s1")

        assert seen == [ToolContext(session_id="s1", request_id=11)]

    @pytest.mark.asyncio
    async def test_tools_call_returns_text_content(self) -> None:
        response = await make_server().handle(request("tools/call", {"name": "echo", "arguments": {"text": "hi"}}), "s1")

        assert response["result"] == {"content": [{"type": "text", "text": "s1:hi"}], "isError": False}

    @pytest.mark.asyncio
    async def test_error_result_is_flagged(self) -> None:
        response = await make_server().handle(request("tools/call", {"name": "failing"}), "s1")

        assert response["result"]["isError"] is True
        assert response["result"]["content"][0]["text"] == "upstream unavailable"

    @pytest.mark.asyncio
    async def test_handler_exception_becomes_error_result(self) -> None:
        response = await make_server().handle(request("tools/call", {"name": "broken"}, request_id=9), "s1")

        assert response["id"] == 9
        assert response["result"]["isError"] is True

    @pytest.mark.asyncio
    async def test_invalid_arguments_are_an_error_result(self) -> None:
        response = await make_server().handle(request("tools/call", {"name": "echo", "arguments": {}}), "s1")

        assert response["result"]["isError"] is True
        assert "text" in response["result"]["content"][0]["text"]

    @pytest.mark.asyncio
    async def test_unknown_tool(self) -> None:
        response = await make_server().handle(request("tools/call", {"name": "nope"}), "s1")

        assert response["result"]["isError"] is True
        assert "nope" in response["result"]["content"][0]["text"]

    @pytest.mark.asyncio
    async def test_tools_call_without_session_is_internal_error(self) -> None:
        response = await make_server().handle(request("tools/call", {"name": "echo", "arguments": {"text": "x"}}, request_id=4), None)

        assert response["id"] == 4
        assert response["error"]["code"] == types.INTERNAL_ERROR

    @pytest.mark.asyncio
    async def test_tools_call_without_params_is_invalid(self) -> None:
        response = await make_server().handle(request("tools/call"), "s1")

        assert response["error"]["code"] == types.INVALID_PARAMS

    @pytest.mark.asyncio
    async def test_unsupported_method(self) -> None:
        response = await make_server().handle(request("resources/list"), "s1")

        assert response["error"]["code"] == types.METHOD_NOT_FOUND

    @pytest.mark.asyncio
    async def test_malformed_request(self) -> None:
        response = await make_server().handle({"id": 3, "method": "ping"}, "s1")

        assert response == {"jsonrpc": "2.0", "id": 3, "error": {"code": types.INVALID_REQUEST, "message": "Invalid Request"}}


class TestSessionRouter:
    def test_initialize_without_id_creates_one_session(self) -> None:
        router = SessionRouter(make_server)

        session = router.resolve(None, request("initialize"))

        assert session is not None
        assert len(router) == 1
        assert router.get(session.session_id) is session

    def test_each_initialize_mints_a_distinct_id(self) -> None:
        router = SessionRouter(make_server)

        first = router.resolve(None, request("initialize"))
        second = router.resolve(None, request("initialize"))

        assert first.session_id != second.session_id
        assert first.server is not second.server
        assert len(router) == 2

    @pytest.mark.parametrize(
        "message",
        [
            request("tools/list"),
            {"jsonrpc": "2.0", "method": "initialize"},
            {"method": "initialize", "jsonrpc": "2.0", "params": {}},
            [request("initialize")],
            "initialize",
            None,
            {},
        ],
    )
    def test_unattributed_non_initialize_messages_are_rejected(self, message) -> None:
        router = SessionRouter(make_server)

        assert router.resolve(None, message) is None
        assert len(router) == 0

    def test_unknown_session_id_is_rejected_even_for_initialize(self) -> None:
        router = SessionRouter(make_server)

        assert router.resolve("made-up", request("initialize")) is None
        assert len(router) == 0

    def test_known_session_id_routes_to_existing_session(self) -> None:
        router = SessionRouter(make_server)
        session = router.resolve(None, request("initialize"))

        assert router.resolve(session.session_id, request("tools/list")) is session
        assert len(router) == 1

    @pytest.mark.asyncio
    async def test_close_runs_hooks_and_forgets_session(self) -> None:
        router = SessionRouter(make_server)
        hook = AsyncMock()
        router.on_close(hook)
        session = router.create_session()

        assert await router.close(session.session_id) is True

        hook.assert_awaited_once_with(session.session_id)
        assert router.get(session.session_id) is None
        assert await router.close(session.session_id) is False

    @pytest.mark.asyncio
    async def test_sweep_idle_closes_stale_sessions(self) -> None:
        router = SessionRouter(make_server, idle_timeout=30.0)
        stale = router.create_session()
        fresh = router.create_session()
        stale.last_seen -= 60

        closed = await router.sweep_idle()

        assert closed == [stale.session_id]
        assert fresh.session_id in router

    @pytest.mark.asyncio
    async def test_messages_within_a_session_are_serialized(self) -> None:
        order = []
        registry = ToolRegistry()

        async def slow(arguments: EchoInput, context: ToolContext) -> ToolResult:
            order.append(f"start-{arguments.text}")
            await asyncio.sleep(0.01)
            order.append(f"end-{arguments.text}")
            return ToolResult(text=arguments.text)

        registry.register("slow", "Slow", "Sleeps", slow, input_model=EchoInput)
        router = SessionRouter(lambda: ProtocolServer(registry, "t", "1"))
        session = router.create_session()

        await asyncio.gather(
            session.dispatch(request("tools/call", {"name": "slow", "arguments": {"text": "a"}}, request_id=1)),
            session.dispatch(request("tools/call", {"name": "slow", "arguments": {"text": "b"}}, request_id=2)),
        )

        assert order == ["start-a", "end-a", "start-b", "end-b"]
