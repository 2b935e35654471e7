"""Credential storage and the pending -> session claim protocol"""

from .models import AuthState, ClickUpCredential, CredentialBundle, EMPTY_BUNDLE, PendingEntry, Workspace
from .store import CredentialStore
from .claim import claim_session

__all__ = [
    "AuthState",
    "ClickUpCredential",
    "CredentialBundle",
    "CredentialStore",
    "EMPTY_BUNDLE",
    "PendingEntry",
    "Workspace",
    "claim_session",
]
