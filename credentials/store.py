"""In-memory credential tables shared by the OAuth callbacks, claim and the tool gate"""

import asyncio
import logging
import time
from typing import Callable, Dict, List, Optional

from errors import NotFound
from .models import EMPTY_BUNDLE, CredentialBundle, PendingEntry

logger = logging.getLogger(__name__)


def _redact(key: str) -> str:
    """Shorten a code or session id for log output"""
    return f"{key[:6]}..." if len(key) > 6 else key


class CredentialStore:
    """Owns the ``pending`` (code-keyed) and ``session`` (session-keyed) tables

    Every read-merge-write on a table runs under that table's lock with no
    I/O inside the critical section. Callers perform their network calls
    before entering the store.
    """

    def __init__(self, pending_ttl: float = 600.0, clock: Callable[[], float] = time.monotonic):
        """Initialize empty tables

        Args:
            pending_ttl: Seconds a pending entry may wait for its claim
            clock: Monotonic time source, replaceable in tests
        """
        self.pending_ttl = pending_ttl
        self._clock = clock
        self._pending: Dict[str, PendingEntry] = {}
        self._sessions: Dict[str, CredentialBundle] = {}
        self._pending_lock = asyncio.Lock()
        self._session_lock = asyncio.Lock()

    def _is_expired(self, entry: PendingEntry, now: float) -> bool:
        return now - entry.created_at >= self.pending_ttl

    def _live_pending(self, code: str) -> Optional[PendingEntry]:
        """Return the pending entry for ``code``, dropping it if expired (lock held)"""
        entry = self._pending.get(code)
        if entry is None:
            return None
        if self._is_expired(entry, self._clock()):
            logger.info(f"Pending credentials for code {_redact(code)} expired before claim")
            del self._pending[code]
            return None
        return entry

    # Pending table

    async def get_pending(self, code: str) -> CredentialBundle:
        async with self._pending_lock:
            entry = self._live_pending(code)
            return entry.bundle if entry else EMPTY_BUNDLE

    async def store_pending(self, code: str, bundle: CredentialBundle) -> CredentialBundle:
        """Merge ``bundle`` into the pending slot for ``code``

        Credentials for the other provider already stored under the same
        code are preserved.

        Args:
            code: One-time authorization code used as the pending key
            bundle: Credentials obtained by a provider callback

        Returns:
            The bundle now stored under ``code``
        """
        async with self._pending_lock:
            entry = self._live_pending(code)
            if entry is None:
                entry = PendingEntry(bundle=bundle, created_at=self._clock())
            else:
                entry.bundle = bundle.merged_over(entry.bundle)
            self._pending[code] = entry
            logger.debug(f"Stored pending credentials for code {_redact(code)}: {entry.bundle.describe()}")
            return entry.bundle

    async def discard_pending(self, code: str) -> bool:
        async with self._pending_lock:
            return self._pending.pop(code, None) is not None

    # Session table

    async def get_session(self, session_id: str) -> CredentialBundle:
        """Return the session's bundle, or an empty bundle if none was claimed"""
        async with self._session_lock:
            return self._sessions.get(session_id, EMPTY_BUNDLE)

    async def discard_session(self, session_id: str) -> bool:
        async with self._session_lock:
            removed = self._sessions.pop(session_id, None) is not None
        if removed:
            logger.info(f"Discarded credentials for session {_redact(session_id)}")
        return removed

    async def claim(self, code: str, session_id: str) -> Optional[CredentialBundle]:
        """Move the pending bundle for ``code`` into ``session_id``

        Lock order is pending then session. The pending entry is deleted in
        the same critical section that writes the session, so a code can only
        be claimed once.

        Returns:
            The merged session bundle, or None if no live pending entry exists
        """
        async with self._pending_lock:
            entry = self._live_pending(code)
            if entry is None:
                return None
            async with self._session_lock:
                existing = self._sessions.get(session_id, EMPTY_BUNDLE)
                merged = entry.bundle.merged_over(existing)
                self._sessions[session_id] = merged
            del self._pending[code]
        return merged

    async def select_clickup_workspace(self, session_id: str, workspace_id: str) -> CredentialBundle:
        """Record the ClickUp workspace chosen for a session

        The only session-table write outside claim. It swaps the selection of
        an existing ClickUp credential and never creates an entry.

        Args:
            session_id: Session whose ClickUp credential is updated
            workspace_id: One of the workspaces discovered at token exchange

        Returns:
            The updated session bundle

        Raises:
            NotFound: No ClickUp credential for the session, or unknown workspace
        """
        async with self._session_lock:
            bundle = self._sessions.get(session_id)
            if bundle is None or bundle.clickup is None:
                raise NotFound("No ClickUp authentication for this session.")
            if bundle.clickup.find_workspace(workspace_id) is None:
                raise NotFound(f"Workspace {workspace_id} is not available for this ClickUp account.")
            updated = CredentialBundle(
                github=bundle.github,
                clickup=bundle.clickup.with_selected_workspace(workspace_id),
            )
            self._sessions[session_id] = updated
            return updated

    # Maintenance

    async def sweep_expired(self) -> List[str]:
        """Remove pending entries older than the TTL

        Returns:
            Codes that were removed
        """
        now = self._clock()
        async with self._pending_lock:
            expired = [code for code, entry in self._pending.items() if self._is_expired(entry, now)]
            for code in expired:
                del self._pending[code]
        if expired:
            logger.info(f"Swept {len(expired)} expired pending credential entr{'y' if len(expired) == 1 else 'ies'}")
        return expired

    def snapshot(self) -> Dict[str, int]:
        """Table sizes for health reporting"""
        return {"pending": len(self._pending), "sessions": len(self._sessions)}
