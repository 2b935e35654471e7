"""Tests for the background maintenance sweep"""

import pytest

from credentials import CredentialBundle, CredentialStore
from gateway.sweeper import sweep_once
from protocol import ProtocolServer, SessionRouter
from tools import ToolRegistry


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


@pytest.mark.asyncio
async def test_sweep_expires_pending_and_closes_idle_sessions() -> None:
    clock = FakeClock()
    store = CredentialStore(pending_ttl=10.0, clock=clock)
    router = SessionRouter(lambda: ProtocolServer(ToolRegistry(), "t", "1"), idle_timeout=5.0)
    router.on_close(store.discard_session)

    idle = router.create_session()
    await store.store_pending("claimed", CredentialBundle(github="gh"))
    await store.claim("claimed", idle.session_id)
    await store.store_pending("stale", CredentialBundle(github="gh2"))
    idle.last_seen -= 60
    clock.now += 11

    await sweep_once(store, router)

    assert idle.session_id not in router
    assert (await store.get_session(idle.session_id)).is_empty
    assert store.snapshot() == {"pending": 0, "sessions": 0}
