"""
Endpoint handlers for the gateway.
"""
from .health import router as health_router
from .mcp import router as mcp_router
from .oauth_callbacks import router as oauth_router
from .claim import router as claim_router

__all__ = [
    'health_router',
    'mcp_router',
    'oauth_router',
    'claim_router',
]
