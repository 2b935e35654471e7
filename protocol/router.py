"""Session transport router: maps the mcp-session-id header to live sessions"""

import asyncio
import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional

from .jsonrpc import is_initialize_request
from .server import ProtocolServer

logger = logging.getLogger(__name__)

SessionCloseHook = Callable[[str], Awaitable[Any]]


@dataclass
class Session:
    """An active MCP session

    Attributes:
        session_id: Opaque, unguessable id sent back in the mcp-session-id header
        server: Protocol server bound 1:1 to this session
        created_at: Wall-clock creation time
        last_seen: Monotonic time of the last routed message
    """
    session_id: str
    server: ProtocolServer
    created_at: float
    last_seen: float
    lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)
    closed: bool = False

    async def dispatch(self, message: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Hand ``message`` to the session's server

        The session lock serializes messages so they are processed in arrival
        order.
        """
        async with self.lock:
            self.last_seen = time.monotonic()
            return await self.server.handle(message, self.session_id)

    def describe(self) -> Dict[str, Any]:
        return {
            "sessionId": self.session_id,
            "createdAt": self.created_at,
            # last_seen is monotonic, reported as wall-clock time
            "lastSeen": time.time() - (time.monotonic() - self.last_seen),
            "initialized": self.server.initialized,
            "protocolVersion": self.server.protocol_version,
            "client": self.server.client_info,
        }


class SessionRouter:
    """Owns the id -> Session map

    Sessions are only created for an ``initialize`` request that carries no
    session id. Every other unattributed message is rejected by the caller
    when ``resolve`` returns None.
    """

    def __init__(self, server_factory: Callable[[], ProtocolServer], idle_timeout: Optional[float] = None):
        """
        Args:
            server_factory: Builds a fresh ProtocolServer with the tool set registered
            idle_timeout: Seconds of inactivity after which ``sweep_idle`` closes a session
        """
        self._server_factory = server_factory
        self._sessions: Dict[str, Session] = {}
        self._close_hooks: List[SessionCloseHook] = []
        self.idle_timeout = idle_timeout

    def on_close(self, hook: SessionCloseHook) -> None:
        """Register a coroutine called with the session id after a session closes"""
        self._close_hooks.append(hook)

    def get(self, session_id: Optional[str]) -> Optional[Session]:
        if not session_id:
            return None
        return self._sessions.get(session_id)

    def create_session(self) -> Session:
        session_id = uuid.uuid4().hex
        now = time.monotonic()
        session = Session(
            session_id=session_id,
            server=self._server_factory(),
            created_at=time.time(),
            last_seen=now,
        )
        self._sessions[session_id] = session
        logger.info(f"New session started: {session_id}")
        return session

    def resolve(self, session_id: Optional[str], message: Any) -> Optional[Session]:
        """Find or create the session for an inbound message

        Args:
            session_id: Value of the mcp-session-id header, if any
            message: Decoded request body

        Returns:
            The target session, or None if the message must be rejected
        """
        if session_id:
            return self._sessions.get(session_id)
        if is_initialize_request(message):
            return self.create_session()
        return None

    async def close(self, session_id: str) -> bool:
        """Close a session and run the close hooks

        Returns:
            True if the session existed
        """
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        session.closed = True
        logger.info(f"Session closed: {session_id}")
        for hook in self._close_hooks:
            try:
                await hook(session_id)
            except Exception:
                logger.exception(f"Session close hook failed for {session_id}")
        return True

    async def sweep_idle(self) -> List[str]:
        """Close sessions idle for longer than ``idle_timeout``"""
        if not self.idle_timeout:
            return []
        now = time.monotonic()
        idle = [
            sid for sid, session in self._sessions.items()
            if now - session.last_seen >= self.idle_timeout and not session.lock.locked()
        ]
        for session_id in idle:
            await self.close(session_id)
        if idle:
            logger.info(f"Closed {len(idle)} idle session(s)")
        return idle

    async def close_all(self) -> None:
        for session_id in list(self._sessions):
            await self.close(session_id)

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions
