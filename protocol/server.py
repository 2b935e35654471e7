"""Per-session MCP server backed by the SDK's low-level ``Server``

The SDK session/transport classes own their own session ids, so the gateway
keeps its router and feeds each decoded message to the low-level server's
request handlers directly. ``initialize`` is answered here from the server's
initialization options, as the SDK's ``ServerSession`` does.
"""

import contextvars
import logging
from typing import Any, Dict, List, Optional

from mcp import types
from mcp.server.lowlevel import Server
from mcp.shared.version import SUPPORTED_PROTOCOL_VERSIONS
from pydantic import ValidationError

from tools.registry import ToolContext, ToolRegistry
from .jsonrpc import dump, error_envelope, result_envelope

logger = logging.getLogger(__name__)

LATEST_PROTOCOL_VERSION = types.LATEST_PROTOCOL_VERSION

# Context of the tools/call being dispatched, read by the call_tool handler
_invocation: contextvars.ContextVar[ToolContext] = contextvars.ContextVar("tool_invocation")


class ToolCallFailed(Exception):
    """Raised to report a tool-level failure; the SDK turns it into an ``isError`` result"""


class ProtocolServer:
    """Handles the JSON-RPC messages of exactly one session

    A new instance is created for every initialized session and bound to the
    shared tool registry.
    """

    def __init__(self, registry: ToolRegistry, name: str, version: str, instructions: str = ""):
        self.registry = registry
        self.initialized = False
        self.client_info: Dict[str, Any] = {}
        self.protocol_version: Optional[str] = None
        self.server = Server(name, version=version, instructions=instructions or None)
        self._register_handlers()

    def _register_handlers(self) -> None:
        registry = self.registry

        @self.server.list_tools()
        async def list_tools() -> List[types.Tool]:
            return registry.descriptors()

        @self.server.call_tool()
        async def call_tool(name: str, arguments: Dict[str, Any]) -> List[types.TextContent]:
            tool = registry.get(name)
            if tool is None:
                raise ToolCallFailed(f"Unknown tool: {name}")
            try:
                parsed = tool.input_model.model_validate(arguments)
            except ValidationError as e:
                problems = "; ".join(f"{'.'.join(map(str, err['loc'])) or 'arguments'}: {err['msg']}" for err in e.errors())
                raise ToolCallFailed(f"Invalid arguments for tool {name}: {problems}") from e

            context = _invocation.get()
            logger.debug(f"Session {context.session_id} calling tool {name}")
            result = await tool.handler(parsed, context)
            if result.is_error:
                raise ToolCallFailed(result.text)
            return result.content()

    async def handle(self, message: Dict[str, Any], session_id: Optional[str]) -> Optional[Dict[str, Any]]:
        """Process one message

        Args:
            message: Decoded JSON-RPC message
            session_id: Session the message was routed to

        Returns:
            Response envelope, or None for notifications
        """
        if "id" not in message:
            await self._notify(message)
            return None

        try:
            rpc = types.JSONRPCRequest.model_validate(message)
        except ValidationError:
            return error_envelope(message.get("id"), types.INVALID_REQUEST, "Invalid Request")

        payload: Dict[str, Any] = {"method": rpc.method}
        if rpc.params is not None:
            payload["params"] = rpc.params
        try:
            request = types.ClientRequest.model_validate(payload).root
        except ValidationError as e:
            logger.debug(f"Rejected {rpc.method} (request {rpc.id}): {e}")
            return error_envelope(rpc.id, types.INVALID_PARAMS, "Invalid request parameters", str(e))

        if isinstance(request, types.InitializeRequest):
            return result_envelope(rpc.id, self._initialize(request.params, session_id))

        if isinstance(request, types.CallToolRequest) and not session_id:
            logger.error(f"Tool call without a session id (request {rpc.id})")
            return error_envelope(rpc.id, types.INTERNAL_ERROR, "Session id missing from the tool invocation context.")

        handler = self.server.request_handlers.get(type(request))
        if handler is None:
            return error_envelope(rpc.id, types.METHOD_NOT_FOUND, f"Method not found: {rpc.method}")

        token = _invocation.set(ToolContext(session_id=session_id, request_id=rpc.id))
        try:
            result = await handler(request)
        finally:
            _invocation.reset(token)
        return result_envelope(rpc.id, result)

    async def _notify(self, message: Dict[str, Any]) -> None:
        try:
            notification = types.ClientNotification.model_validate(
                {key: message[key] for key in ("method", "params") if key in message}
            ).root
        except ValidationError:
            logger.debug(f"Ignoring unrecognized notification {message.get('method')!r}")
            return

        if isinstance(notification, types.InitializedNotification):
            self.initialized = True
            logger.debug(f"Client {self.client_info.get('name', 'unknown')} finished initialization")
            return
        handler = self.server.notification_handlers.get(type(notification))
        if handler is not None:
            await handler(notification)

    def _initialize(self, params: types.InitializeRequestParams, session_id: Optional[str]) -> types.InitializeResult:
        requested = str(params.protocolVersion)
        self.protocol_version = requested if requested in SUPPORTED_PROTOCOL_VERSIONS else LATEST_PROTOCOL_VERSION
        self.client_info = dump(params.clientInfo)
        logger.info(
            f"Session {session_id} initialized by {self.client_info.get('name', 'unknown client')} "
            f"(protocol {self.protocol_version})"
        )
        options = self.server.create_initialization_options()
        return types.InitializeResult(
            protocolVersion=self.protocol_version,
            capabilities=options.capabilities,
            serverInfo=types.Implementation(name=options.server_name, version=options.server_version),
            instructions=options.instructions,
        )
