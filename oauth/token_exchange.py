"""OAuth authorization-code exchange for GitHub and ClickUp"""

import logging
from typing import Any, Dict, Optional

import httpx

import settings
from credentials.models import ClickUpCredential, Workspace
from errors import UpstreamError
from providers import ClickUpProvider, send_request
from .authorization import OAuthClientConfig

logger = logging.getLogger(__name__)


def read_json_object(response: httpx.Response, action: str, failure: str) -> Dict[str, Any]:
    """Decode an OAuth endpoint response that must be a JSON object

    Args:
        response: Response from the provider
        action: What was requested, used in the log line
        failure: Message of the raised error

    Raises:
        UpstreamError: Non-2xx status, undecodable body, or a non-object body
    """
    if response.status_code >= 400:
        logger.error(f"{action} failed: {response.status_code} - {response.text}")
        raise UpstreamError(failure, upstream_status=response.status_code, body=response.text)
    try:
        payload = response.json()
    except ValueError as e:
        logger.error(f"{action} returned invalid JSON: {response.text}")
        raise UpstreamError(failure, upstream_status=response.status_code, body=response.text) from e
    if not isinstance(payload, dict):
        logger.error(f"{action} returned a non-object body: {response.text}")
        raise UpstreamError(failure, upstream_status=response.status_code, body=response.text)
    return payload


def _decode_token_response(response: httpx.Response, provider: str) -> Dict[str, Any]:
    """Return the JSON body of a successful token response

    Raises:
        UpstreamError: Non-2xx status, undecodable body, or an OAuth error field
    """
    payload = read_json_object(response, f"{provider} token exchange", f"{provider} token exchange failed.")

    # GitHub reports bad codes with 200 + {"error": ...}
    if payload.get("error"):
        logger.error(f"{provider} token exchange rejected: {payload}")
        raise UpstreamError(f"{provider} token exchange failed.", upstream_status=response.status_code, body=response.text)
    if not payload.get("access_token"):
        logger.error(f"{provider} token exchange response missing access_token: {response.text}")
        raise UpstreamError(f"{provider} token exchange failed.", body=response.text)
    return payload


async def exchange_github_code(
    code: str,
    config: OAuthClientConfig,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> str:
    """Exchange a GitHub authorization code for an access token

    Args:
        code: Authorization code from the GitHub redirect
        config: OAuth client registration
        transport: Optional httpx transport

    Returns:
        GitHub access token

    Raises:
        UpstreamError: If the exchange fails
    """
    response = await send_request(
        "POST",
        settings.GITHUB_TOKEN_URL,
        "GitHub",
        transport=transport,
        json={
            "client_id": config.github_client_id,
            "client_secret": config.github_client_secret,
            "code": code,
            "redirect_uri": config.github_callback_url,
        },
        headers={"Accept": "application/json"},
    )
    payload = _decode_token_response(response, "GitHub")
    logger.info("GitHub access token obtained")
    return payload["access_token"]


async def exchange_clickup_code(
    code: str,
    config: OAuthClientConfig,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> ClickUpCredential:
    """Exchange a ClickUp authorization code and discover the user's workspaces

    Args:
        code: Authorization code from the ClickUp redirect
        config: OAuth client registration
        transport: Optional httpx transport

    Returns:
        ClickUp credential with no workspace selected

    Raises:
        UpstreamError: If the exchange or the workspace listing fails
    """
    response = await send_request(
        "POST",
        settings.CLICKUP_TOKEN_URL,
        "ClickUp",
        transport=transport,
        json={
            "client_id": config.clickup_client_id,
            "client_secret": config.clickup_client_secret,
            "code": code,
        },
    )
    access_token = _decode_token_response(response, "ClickUp")["access_token"]

    teams = await ClickUpProvider(access_token, transport=transport).list_teams()
    workspaces = tuple(Workspace.from_team(team) for team in teams)
    logger.info(f"ClickUp access token obtained, {len(workspaces)} workspace(s) available")

    return ClickUpCredential(access_token=access_token, selected_workspace_id=None, workspaces=workspaces)
