"""
GitHub and ClickUp OAuth redirect routes.

Each callback exchanges the provider code, parks the result in the pending
table under that code, and sends the browser to the front end with the code
so it can call /api/claim-session.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse, RedirectResponse

from errors import UpstreamError
from oauth import OAuthManager
from ..dependencies import get_oauth

logger = logging.getLogger(__name__)
router = APIRouter()

MISSING_CODE_PAGE = "<h1>Error</h1><p>Authorization code not found in the request.</p>"
FAILURE_PAGE = (
    "<h1>Authentication Error</h1>"
    "<p>There was a problem obtaining the {provider} token. Check the server logs for details.</p>"
)


def _failure(provider: str) -> HTMLResponse:
    return HTMLResponse(FAILURE_PAGE.format(provider=provider), status_code=500)


def _device_mode_response() -> HTMLResponse:
    return HTMLResponse(
        "<h1>Not available</h1><p>GitHub login uses the device flow. Run the github_login tool.</p>",
        status_code=404,
    )


@router.get("/github/login")
async def github_login(oauth: OAuthManager = Depends(get_oauth)):
    if oauth.config.github_uses_device_flow:
        return _device_mode_response()
    return RedirectResponse(oauth.github_authorize_url(), status_code=302)


@router.get("/github/callback")
async def github_callback(code: Optional[str] = None, oauth: OAuthManager = Depends(get_oauth)):
    if oauth.config.github_uses_device_flow:
        return _device_mode_response()
    if not code:
        return HTMLResponse(MISSING_CODE_PAGE, status_code=400)

    logger.info("Received GitHub authorization code, exchanging for a token")
    try:
        frontend_url = await oauth.complete_github_callback(code)
    except UpstreamError as e:
        logger.error(f"GitHub callback failed: {e} - upstream body: {e.body}")
        return _failure("GitHub")
    return RedirectResponse(frontend_url, status_code=302)


@router.get("/clickup/login")
async def clickup_login(oauth: OAuthManager = Depends(get_oauth)):
    return RedirectResponse(oauth.clickup_authorize_url(), status_code=302)


@router.get("/clickup/callback")
async def clickup_callback(code: Optional[str] = None, oauth: OAuthManager = Depends(get_oauth)):
    if not code:
        return HTMLResponse(MISSING_CODE_PAGE, status_code=400)

    logger.info("Received ClickUp authorization code, exchanging for a token")
    try:
        frontend_url = await oauth.complete_clickup_callback(code)
    except UpstreamError as e:
        logger.error(f"ClickUp callback failed: {e} - upstream body: {e.body}")
        return _failure("ClickUp")
    return RedirectResponse(frontend_url, status_code=302)
