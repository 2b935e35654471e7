"""
MCP endpoint: routes JSON-RPC messages to sessions keyed by the mcp-session-id header.
"""
import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from credentials import CredentialStore
from protocol import SessionRouter, bad_request_envelope, error_envelope
from protocol.jsonrpc import SERVER_ERROR, request_id_of
from ..dependencies import get_session_router, get_store

logger = logging.getLogger(__name__)
router = APIRouter()

SESSION_HEADER = "mcp-session-id"
# Accepted on requests for clients that send the bare header name
SESSION_HEADER_ALIAS = "session-id"


def session_id_from(request: Request) -> Optional[str]:
    return request.headers.get(SESSION_HEADER) or request.headers.get(SESSION_HEADER_ALIAS) or None


def _bad_request() -> JSONResponse:
    return JSONResponse(status_code=400, content=bad_request_envelope())


def _invalid_session() -> PlainTextResponse:
    return PlainTextResponse("Invalid or missing session ID", status_code=400)


@router.post("/mcp")
async def handle_mcp_message(request: Request, session_router: SessionRouter = Depends(get_session_router)):
    """Route one JSON-RPC message

    Without a session header only an ``initialize`` request is accepted; it
    creates a session whose id is returned in the mcp-session-id header.
    """
    session_id = session_id_from(request)
    body: Any = None
    try:
        try:
            body = await request.json()
        except ValueError:
            logger.warning("Rejected MCP message with an unreadable JSON body")
            return _bad_request()

        if not isinstance(body, dict):
            return _bad_request()

        session = session_router.resolve(session_id, body)
        if session is None:
            logger.warning(
                f"Rejected unattributed MCP message (method={body.get('method')!r}, "
                f"session={'unknown' if session_id else 'absent'})"
            )
            return _bad_request()

        response = await session.dispatch(body)
        headers = {SESSION_HEADER: session.session_id}
        if response is None:
            return Response(status_code=202, headers=headers)
        return JSONResponse(content=response, headers=headers)
    except Exception as e:
        logger.exception("Unexpected error on the MCP route")
        return JSONResponse(
            status_code=500,
            content=error_envelope(request_id_of(body), SERVER_ERROR, "Internal Server Error", str(e)),
        )


@router.get("/mcp")
async def describe_session(
    request: Request,
    session_router: SessionRouter = Depends(get_session_router),
    store: CredentialStore = Depends(get_store),
):
    """Session introspection"""
    session = session_router.get(session_id_from(request))
    if session is None:
        return _invalid_session()
    bundle = await store.get_session(session.session_id)
    return {**session.describe(), **bundle.describe()}


@router.delete("/mcp")
async def terminate_session(request: Request, session_router: SessionRouter = Depends(get_session_router)):
    """Explicit session termination"""
    session_id = session_id_from(request)
    if not session_id or not await session_router.close(session_id):
        return _invalid_session()
    return Response(status_code=204)
