"""
Access log for the MCP, claim and OAuth routes.
"""
import logging
import time

from fastapi import Request

logger = logging.getLogger(__name__)

LOGGED_PREFIXES = ("/mcp", "/api/", "/github/", "/clickup/")


async def log_requests_middleware(request: Request, call_next):
    """Log method, path, session, status and duration of gateway calls

    Query strings are left out, they carry authorization codes.
    """
    started = time.perf_counter()
    response = await call_next(request)
    elapsed = time.perf_counter() - started

    path = request.url.path
    if path.startswith(LOGGED_PREFIXES):
        session_id = request.headers.get("mcp-session-id")
        session_note = f" [session {session_id}]" if session_id else ""
        logger.info(f"{request.method} {path}{session_note} - {response.status_code} - {elapsed:.3f}s")
    return response
