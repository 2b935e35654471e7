"""Tests for the credential tables and bundle merge rules."""

import pytest

from credentials import AuthState, ClickUpCredential, CredentialBundle, CredentialStore, Workspace
from errors import NotFound


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


class TestCredentialBundle:
    def test_empty_bundle_is_unauthenticated(self) -> None:
        bundle = CredentialBundle()

        assert bundle.github_state is AuthState.UNAUTHENTICATED
        assert bundle.clickup_state is AuthState.UNAUTHENTICATED
        assert bundle.is_empty

    def test_clickup_without_workspace_is_partial(self) -> None:
        bundle = CredentialBundle(clickup=ClickUpCredential(access_token="t"))

        assert bundle.clickup_state is AuthState.PARTIALLY_AUTHENTICATED

    def test_clickup_with_workspace_is_ready(self) -> None:
        bundle = CredentialBundle(clickup=ClickUpCredential(access_token="t", selected_workspace_id="w1"))

        assert bundle.clickup_state is AuthState.READY

    def test_merge_keeps_existing_fields_the_incoming_bundle_lacks(self) -> None:
        clickup = ClickUpCredential(access_token="cu")
        existing = CredentialBundle(github="gh-old")
        incoming = CredentialBundle(clickup=clickup)

        merged = incoming.merged_over(existing)

        assert merged.github == "gh-old"
        assert merged.clickup is clickup

    def test_merge_prefers_incoming_fields(self) -> None:
        merged = CredentialBundle(github="gh-new").merged_over(CredentialBundle(github="gh-old"))

        assert merged.github == "gh-new"

    def test_describe_does_not_expose_tokens(self) -> None:
        bundle = CredentialBundle(github="secret-gh", clickup=ClickUpCredential(access_token="secret-cu"))

        described = str(bundle.describe())

        assert "secret" not in described


class TestPendingTable:
    @pytest.mark.asyncio
    async def test_store_pending_preserves_other_provider(self) -> None:
        store = CredentialStore()
        clickup = ClickUpCredential(access_token="cu")

        await store.store_pending("abc", CredentialBundle(clickup=clickup))
        await store.store_pending("abc", CredentialBundle(github="gh"))

        bundle = await store.get_pending("abc")
        assert bundle.github == "gh"
        assert bundle.clickup is clickup

    @pytest.mark.asyncio
    async def test_missing_pending_returns_empty_bundle(self) -> None:
        store = CredentialStore()

        assert (await store.get_pending("nope")).is_empty

    @pytest.mark.asyncio
    async def test_pending_entries_expire(self) -> None:
        clock = FakeClock()
        store = CredentialStore(pending_ttl=60.0, clock=clock)
        await store.store_pending("abc", CredentialBundle(github="gh"))

        clock.now += 61

        assert (await store.get_pending("abc")).is_empty
        assert await store.claim("abc", "s1") is None

    @pytest.mark.asyncio
    async def test_sweep_removes_only_expired_entries(self) -> None:
        clock = FakeClock()
        store = CredentialStore(pending_ttl=60.0, clock=clock)
        await store.store_pending("old", CredentialBundle(github="gh1"))
        clock.now += 45
        await store.store_pending("new", CredentialBundle(github="gh2"))
        clock.now += 30

        removed = await store.sweep_expired()

        assert removed == ["old"]
        assert store.snapshot()["pending"] == 1
        assert (await store.get_pending("new")).github == "gh2"


class TestSessionTable:
    @pytest.mark.asyncio
    async def test_unknown_session_reads_as_empty(self) -> None:
        store = CredentialStore()

        assert (await store.get_session("s1")).is_empty

    @pytest.mark.asyncio
    async def test_discard_session(self) -> None:
        store = CredentialStore()
        await store.store_pending("abc", CredentialBundle(github="gh"))
        await store.claim("abc", "s1")

        assert await store.discard_session("s1") is True
        assert (await store.get_session("s1")).is_empty
        assert await store.discard_session("s1") is False

    @pytest.mark.asyncio
    async def test_select_workspace_updates_only_clickup_selection(self) -> None:
        store = CredentialStore()
        clickup = ClickUpCredential(access_token="cu", workspaces=(Workspace("w1", "Eng"),))
        await store.store_pending("abc", CredentialBundle(github="gh", clickup=clickup))
        await store.claim("abc", "s1")

        updated = await store.select_clickup_workspace("s1", "w1")

        assert updated.github == "gh"
        assert updated.clickup.selected_workspace_id == "w1"
        assert (await store.get_session("s1")).clickup_state is AuthState.READY

    @pytest.mark.asyncio
    async def test_select_unknown_workspace_is_rejected(self) -> None:
        store = CredentialStore()
        clickup = ClickUpCredential(access_token="cu", workspaces=(Workspace("w1", "Eng"),))
        await store.store_pending("abc", CredentialBundle(clickup=clickup))
        await store.claim("abc", "s1")

        with pytest.raises(NotFound):
            await store.select_clickup_workspace("s1", "w9")

    @pytest.mark.asyncio
    async def test_select_workspace_never_creates_a_session_entry(self) -> None:
        store = CredentialStore()

        with pytest.raises(NotFound):
            await store.select_clickup_workspace("s1", "w1")
        assert store.snapshot()["sessions"] == 0

    @pytest.mark.asyncio
    async def test_select_workspace_cannot_attach_clickup_to_a_github_only_session(self) -> None:
        store = CredentialStore()
        await store.store_pending("abc", CredentialBundle(github="gh"))
        await store.claim("abc", "s1")

        with pytest.raises(NotFound):
            await store.select_clickup_workspace("s1", "w1")
        assert await store.get_session("s1") == CredentialBundle(github="gh")

    @pytest.mark.asyncio
    async def test_select_workspace_keeps_the_clickup_token(self) -> None:
        store = CredentialStore()
        clickup = ClickUpCredential(access_token="cu", workspaces=(Workspace("w1", "Eng"), Workspace("w2", "Ops")))
        await store.store_pending("abc", CredentialBundle(clickup=clickup))
        await store.claim("abc", "s1")

        await store.select_clickup_workspace("s1", "w1")
        updated = await store.select_clickup_workspace("s1", "w2")

        assert updated.clickup.access_token == "cu"
        assert updated.clickup.workspaces == clickup.workspaces
        assert updated.clickup.selected_workspace_id == "w2"
