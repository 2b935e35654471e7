"""
GitHub/ClickUp MCP gateway - HTTP surface.

Serves the MCP endpoint, the GitHub and ClickUp OAuth redirect routes and
the session claim API.
"""
from .app import app, create_app
from .server import GatewayServer

__version__ = "2.0.0"

__all__ = [
    'GatewayServer',
    'app',
    'create_app',
]
