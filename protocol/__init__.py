"""MCP (JSON-RPC 2.0) session protocol: per-session server and session router"""

from .jsonrpc import bad_request_envelope, error_envelope, is_initialize_request, result_envelope
from .server import LATEST_PROTOCOL_VERSION, ProtocolServer, ToolCallFailed
from .router import Session, SessionRouter

__all__ = [
    "LATEST_PROTOCOL_VERSION",
    "ProtocolServer",
    "Session",
    "SessionRouter",
    "ToolCallFailed",
    "bad_request_envelope",
    "error_envelope",
    "is_initialize_request",
    "result_envelope",
]
