"""Tests for the pending -> session claim protocol."""

import asyncio

import pytest

from credentials import ClickUpCredential, CredentialBundle, CredentialStore, claim_session
from errors import InvalidArgument, NotFound


@pytest.mark.asyncio
async def test_claim_moves_bundle_and_consumes_code() -> None:
    store = CredentialStore()
    await store.store_pending("abc", CredentialBundle(github="gh"))

    merged = await claim_session(store, "abc", "s1")

    assert merged.github == "gh"
    assert (await store.get_session("s1")).github == "gh"
    assert (await store.get_pending("abc")).is_empty


@pytest.mark.asyncio
async def test_second_claim_with_same_code_is_not_found() -> None:
    store = CredentialStore()
    await store.store_pending("abc", CredentialBundle(github="gh"))
    await claim_session(store, "abc", "s1")

    with pytest.raises(NotFound):
        await claim_session(store, "abc", "s1")


@pytest.mark.asyncio
async def test_claim_merges_instead_of_clobbering() -> None:
    store = CredentialStore()
    t2 = ClickUpCredential(access_token="T2")
    await store.store_pending("github-code", CredentialBundle(github="T1"))
    await claim_session(store, "github-code", "sid")
    await store.store_pending("clickup-code", CredentialBundle(clickup=t2))

    await claim_session(store, "clickup-code", "sid")

    session = await store.get_session("sid")
    assert session.github == "T1"
    assert session.clickup is t2


@pytest.mark.asyncio
async def test_claim_replaces_a_provider_on_reauthentication() -> None:
    store = CredentialStore()
    await store.store_pending("c1", CredentialBundle(github="old"))
    await claim_session(store, "c1", "sid")
    await store.store_pending("c2", CredentialBundle(github="new"))

    await claim_session(store, "c2", "sid")

    assert (await store.get_session("sid")).github == "new"


@pytest.mark.asyncio
@pytest.mark.parametrize("auth_code, session_id", [("", "s1"), ("abc", ""), ("", "")])
async def test_claim_requires_both_arguments(auth_code: str, session_id: str) -> None:
    store = CredentialStore()
    await store.store_pending("abc", CredentialBundle(github="gh"))

    with pytest.raises(InvalidArgument):
        await claim_session(store, auth_code, session_id)

    assert (await store.get_pending("abc")).github == "gh"


@pytest.mark.asyncio
async def test_unknown_code_leaves_session_unchanged() -> None:
    store = CredentialStore()
    await store.store_pending("abc", CredentialBundle(github="gh"))
    await claim_session(store, "abc", "s1")

    with pytest.raises(NotFound):
        await claim_session(store, "doesnotexist", "s1")

    assert (await store.get_session("s1")).github == "gh"


@pytest.mark.asyncio
async def test_concurrent_claims_of_one_code_succeed_once() -> None:
    store = CredentialStore()
    await store.store_pending("abc", CredentialBundle(github="gh"))

    results = await asyncio.gather(
        claim_session(store, "abc", "s1"),
        claim_session(store, "abc", "s2"),
        return_exceptions=True,
    )

    assert sum(isinstance(result, CredentialBundle) for result in results) == 1
    assert sum(isinstance(result, NotFound) for result in results) == 1
