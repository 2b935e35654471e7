"""Session claim: attach a pending credential bundle to a session"""

import logging

from errors import InvalidArgument, NotFound
from .models import CredentialBundle
from .store import CredentialStore

logger = logging.getLogger(__name__)


async def claim_session(store: CredentialStore, auth_code: str, session_id: str) -> CredentialBundle:
    """Transfer ``pending[auth_code]`` into ``session[session_id]``

    The pending bundle is merged over whatever the session already holds and
    the pending entry is deleted, so every code is single-use. A client that
    logged into GitHub and ClickUp separately claims each provider's code
    against the same session id.

    Args:
        store: Credential store owning both tables
        auth_code: Code received by the front end from a provider redirect
        session_id: MCP session that should receive the credentials

    Returns:
        The merged session bundle

    Raises:
        InvalidArgument: Either argument is empty
        NotFound: No live pending entry for ``auth_code``
    """
    if not auth_code or not session_id:
        raise InvalidArgument("authCode and sessionId are required.")

    merged = await store.claim(auth_code, session_id)
    if merged is None:
        logger.warning(f"Claim rejected for session {session_id}: unknown, expired or already claimed code")
        raise NotFound("Invalid or expired authorization code.")

    logger.info(f"Session {session_id} claimed credentials: {merged.describe()}")
    return merged
