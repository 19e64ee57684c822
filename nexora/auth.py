"""Login and signup against the backend's /api/auth endpoints."""

import logging

import streamlit as st

from nexora.api_client import ApiClient, ApiError
from nexora.models import AuthResult

log = logging.getLogger(__name__)

CONNECTION_ERROR = "Error connecting to server"
MIN_PASSWORD_LENGTH = 6


def login(client: ApiClient, username: str, password: str) -> AuthResult:
    username = (username or "").strip()
    if not username or not password:
        return AuthResult(ok=False, message="Username and password are required")
    try:
        status, body = client.login(username, password)
    except ApiError as e:
        log.warning("Login request failed: %s", e)
        return AuthResult(ok=False, message=CONNECTION_ERROR)

    if 200 <= status < 300:
        user = body.get("user") or {}
        name = user.get("username", username) if isinstance(user, dict) else username
        log.info("User %s logged in", name)
        return AuthResult(ok=True, message=body.get("message", "Login successful"), username=name)
    return AuthResult(ok=False, message=body.get("message") or "Login failed")


def signup(client: ApiClient, username: str, email: str, password: str) -> AuthResult:
    username = (username or "").strip()
    email = (email or "").strip()
    if not username or not email or not password:
        return AuthResult(ok=False, message="Username, email and password are required")
    if len(password) < MIN_PASSWORD_LENGTH:
        return AuthResult(ok=False, message="Password must be at least 6 characters")
    try:
        status, body = client.signup(username, email, password)
    except ApiError as e:
        log.warning("Signup request failed: %s", e)
        return AuthResult(ok=False, message=CONNECTION_ERROR)

    if 200 <= status < 300:
        return AuthResult(ok=True, message=body.get("message", "Account created"), username=username)
    return AuthResult(ok=False, message=body.get("message") or "Signup failed")


def init_session() -> None:
    if "authenticated" not in st.session_state:
        st.session_state.authenticated = False
    if "username" not in st.session_state:
        st.session_state.username = None


def start_session(result: AuthResult) -> None:
    st.session_state.authenticated = True
    st.session_state.username = result.username


def logout() -> None:
    st.session_state.authenticated = False
    st.session_state.username = None
