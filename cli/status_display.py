"""Startup status display for the CLI"""

from typing import List

from rich.table import Table

import settings
from config import get_config_loader

REQUIRED_SETTINGS = ("GITHUB_CLIENT_ID", "GITHUB_CLIENT_SECRET", "CLICKUP_CLIENT_ID", "CLICKUP_CLIENT_SECRET")


def missing_settings() -> List[str]:
    """OAuth client settings that are not configured"""
    missing = get_config_loader().missing(*REQUIRED_SETTINGS)
    if settings.GITHUB_AUTH_FLOW == "device" and "GITHUB_CLIENT_SECRET" in missing:
        # The device flow only needs the client id
        missing.remove("GITHUB_CLIENT_SECRET")
    return missing


def show_startup_status(console, bind_address: str, port: int):
    """
    Display endpoints and configuration before the server starts

    Args:
        console: Rich console for output
        bind_address: Address the server binds to
        port: Port the server listens on
    """
    table = Table(title="GitHub/ClickUp MCP Gateway")
    table.add_column("Endpoint", style="cyan")
    table.add_column("Purpose")

    table.add_row("POST/GET/DELETE /mcp", "MCP sessions (mcp-session-id header)")
    if settings.GITHUB_AUTH_FLOW == "device":
        table.add_row("tool github_login", "GitHub device login")
    else:
        table.add_row("GET /github/login", "GitHub OAuth")
    table.add_row("GET /clickup/login", "ClickUp OAuth")
    table.add_row("POST /api/claim-session", "Attach an OAuth code to a session")
    table.add_row("GET /health", "Health check")

    console.print(table)
    console.print(f"Listening on [bold]http://{bind_address}:{port}[/bold]")
    console.print(f"Public URL: {settings.PUBLIC_BASE_URL}  Front end: {settings.FRONTEND_URL}")

    for name in missing_settings():
        console.print(f"[yellow]WARNING:[/yellow] {name} is not set, the related login will fail")
