"""
Claim endpoint: attaches pending OAuth results to an MCP session.
"""
import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, ValidationError

from credentials import CredentialStore, claim_session
from ..dependencies import get_store

logger = logging.getLogger(__name__)
router = APIRouter()


class ClaimSessionRequest(BaseModel):
    """Body of POST /api/claim-session"""
    authCode: Optional[str] = None
    sessionId: Optional[str] = None


async def _read_claim(request: Request) -> ClaimSessionRequest:
    """Parse the body leniently; anything unusable counts as missing fields"""
    try:
        body: Any = await request.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}
    try:
        return ClaimSessionRequest.model_validate(body)
    except ValidationError:
        return ClaimSessionRequest()


@router.post("/api/claim-session")
async def claim(request: Request, store: CredentialStore = Depends(get_store)):
    """Move ``pending[authCode]`` into ``session[sessionId]``

    Errors propagate as GatewayError and are rendered by the exception
    handler: 400 for missing fields, 404 for unknown or used codes.
    """
    payload = await _read_claim(request)
    logger.info(f"Claim requested for session {payload.sessionId}")
    await claim_session(store, payload.authCode or "", payload.sessionId or "")
    return {"success": True}
