"""
Health check and status endpoints.
"""
import time
from fastapi import APIRouter, Depends

from credentials import CredentialStore
from protocol import SessionRouter
from ..dependencies import get_session_router, get_store

router = APIRouter()


@router.get("/health")
async def health_check(
    store: CredentialStore = Depends(get_store),
    session_router: SessionRouter = Depends(get_session_router),
):
    """Health check endpoint"""
    tables = store.snapshot()
    return {
        "status": "healthy",
        "timestamp": time.time(),
        "sessions": len(session_router),
        "pending": tables["pending"],
    }
