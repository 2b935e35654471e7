"""JSON-RPC envelopes for the /mcp transport, built from ``mcp.types`` models"""

from typing import Any, Dict, Optional

from mcp import types
from pydantic import ValidationError

# Implementation-defined server error used for transport-level rejections
SERVER_ERROR = -32000

BAD_REQUEST_MESSAGE = "Bad Request: No valid session ID provided or invalid initialization request"


def dump(model: Any) -> Dict[str, Any]:
    """Wire form of an ``mcp.types`` model"""
    return model.model_dump(by_alias=True, mode="json", exclude_none=True)


def result_envelope(request_id: types.RequestId, result: Any) -> Dict[str, Any]:
    """Response envelope around a ``ServerResult`` (or any result model)"""
    return dump(types.JSONRPCResponse(jsonrpc="2.0", id=request_id, result=dump(result)))


def error_envelope(request_id: Optional[types.RequestId], code: int, message: str, data: Any = None) -> Dict[str, Any]:
    """Error envelope; ``request_id`` is None when the request could not be identified"""
    error = types.ErrorData(code=code, message=message, data=data)
    if not isinstance(request_id, (str, int)):
        # JSONRPCError requires a valid id, the null-id form is written out directly
        return {"jsonrpc": "2.0", "error": dump(error), "id": None}
    return dump(types.JSONRPCError(jsonrpc="2.0", id=request_id, error=error))


def bad_request_envelope() -> Dict[str, Any]:
    """Body returned when a message cannot be attributed to a session"""
    return error_envelope(None, SERVER_ERROR, BAD_REQUEST_MESSAGE)


def is_initialize_request(message: Any) -> bool:
    """True for a JSON-RPC request (not a notification) whose method is ``initialize``"""
    if not isinstance(message, dict):
        return False
    try:
        request = types.JSONRPCRequest.model_validate(message)
    except ValidationError:
        return False
    return request.method == "initialize"


def request_id_of(message: Any) -> Optional[Any]:
    """Correlation id of ``message`` when it has one"""
    if isinstance(message, dict):
        return message.get("id")
    return None
