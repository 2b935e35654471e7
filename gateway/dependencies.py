"""
FastAPI dependencies resolving the components owned by the application.
"""
from fastapi import Request

from credentials import CredentialStore
from oauth import OAuthManager
from protocol import SessionRouter


def get_store(request: Request) -> CredentialStore:
    return request.app.state.store


def get_session_router(request: Request) -> SessionRouter:
    return request.app.state.session_router


def get_oauth(request: Request) -> OAuthManager:
    return request.app.state.oauth
