"""Tests for the login and signup wrappers."""

import httpx

from nexora.auth import CONNECTION_ERROR, login, signup


def test_login_success(make_client):
    def handler(request):
        assert request.url.path == "/api/auth/login"
        return httpx.Response(200, json={"message": "Login successful", "user": {"username": "ann"}})

    result = login(make_client(handler), "ann", "secret")
    assert result.ok
    assert result.username == "ann"


def test_login_failure_surfaces_backend_message(make_client):
    client = make_client(lambda r: httpx.Response(400, json={"message": "Invalid credentials"}))
    result = login(client, "ann", "wrong")
    assert not result.ok
    assert result.message == "Invalid credentials"


def test_login_connection_error(make_client):
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    assert login(make_client(handler), "ann", "secret").message == CONNECTION_ERROR


def test_login_requires_both_fields(make_client):
    def handler(request):
        raise AssertionError("no request expected")

    result = login(make_client(handler), " ", "secret")
    assert not result.ok
    assert result.message == "Username and password are required"


def test_signup_password_length(make_client):
    def handler(request):
        raise AssertionError("no request expected")

    result = signup(make_client(handler), "ann", "ann@acme.test", "12345")
    assert result.message == "Password must be at least 6 characters"


def test_signup_created(make_client):
    def handler(request):
        assert request.url.path == "/api/auth/signup"
        return httpx.Response(201, json={"message": "User registered"})

    result = signup(make_client(handler), "ann", "ann@acme.test", "123456")
    assert result.ok and result.message == "User registered"
