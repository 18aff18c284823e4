"""
Tests for registration, login, profile and branding
"""

import pytest

from conftest import TEST_ITERATIONS, auth_header, register
from groupbook_api.app.core.errors import EmailExists, InvalidCredentials, MissingFields
from groupbook_api.app.core.security import token_claims
from groupbook_api.app.services.account_service import AccountService


def _register(db, tokens, email="owner@goodfork.com", password="secret1", display_name="The Good Fork"):
    return AccountService.register(db, tokens, email, password, display_name, password_iterations=TEST_ITERATIONS)


def test_register_returns_token_and_account(client):
    body = register(client)
    assert body["return_code"] == "SUCCESS"
    assert body["account"] == {"id": 1, "email": "owner@goodfork.com", "display_name": "The Good Fork"}
    assert token_claims(body["token"])["account_id"] == 1
    assert "password" not in str(body)


def test_register_normalizes_email(client):
    body = register(client, email="  Owner@GoodFork.COM ")
    assert body["account"]["email"] == "owner@goodfork.com"


def test_register_accepts_restaurant_name_alias(client):
    response = client.post(
        "/api/auth/register",
        json={"email": "owner@goodfork.com", "password": "secret1", "restaurant_name": "The Good Fork"},
    )
    assert response.json()["account"]["display_name"] == "The Good Fork"


@pytest.mark.parametrize("email", ["owner@goodfork.com", "OWNER@goodfork.com", " owner@goodfork.com "])
def test_duplicate_email_rejected(client, email):
    register(client)
    body = register(client, email=email)
    assert body["return_code"] == "EMAIL_EXISTS"
    assert "token" not in body


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"email": "owner@goodfork.com", "password": "secret1"},
        {"email": "", "password": "secret1", "display_name": "The Good Fork"},
        {"email": "owner@goodfork.com", "password": "", "display_name": "The Good Fork"},
        {"email": "owner@goodfork.com", "password": "secret1", "display_name": "   "},
    ],
)
def test_register_missing_fields(client, payload):
    response = client.post("/api/auth/register", json=payload)
    assert response.status_code == 200
    assert response.json()["return_code"] == "MISSING_FIELDS"


@pytest.mark.parametrize("email", ["not-an-email", "a@b", "a b@c.com", "@goodfork.com"])
def test_register_invalid_email(client, email):
    assert register(client, email=email)["return_code"] == "INVALID_EMAIL"


def test_register_short_password(client):
    assert register(client, password="12345")["return_code"] == "INVALID_PASSWORD"


def test_password_stored_hashed(client, db):
    register(client)
    with db.connection() as conn:
        stored = conn.execute("SELECT password_hash FROM accounts").fetchone()[0]
    assert stored != "secret1"
    assert stored.startswith(f"{TEST_ITERATIONS}$")


def test_login_succeeds_after_register(client):
    registered = register(client)
    response = client.post("/api/auth/login", json={"email": "Owner@GoodFork.com", "password": "secret1"})
    body = response.json()
    assert body["return_code"] == "SUCCESS"
    assert body["account"] == registered["account"]
    assert body["token"] != registered["token"]
    assert token_claims(body["token"])["account_id"] == token_claims(registered["token"])["account_id"]


@pytest.mark.parametrize(
    "payload",
    [
        {"email": "owner@goodfork.com", "password": "wrong-password"},
        {"email": "nobody@goodfork.com", "password": "secret1"},
    ],
)
def test_login_invalid_credentials(client, payload):
    register(client)
    body = client.post("/api/auth/login", json=payload).json()
    assert body["return_code"] == "INVALID_CREDENTIALS"
    assert "token" not in body


def test_login_missing_fields(client):
    assert client.post("/api/auth/login", json={"email": "owner@goodfork.com"}).json()["return_code"] == "MISSING_FIELDS"
    body = client.post("/api/auth/login", json={"email": " ", "password": "secret1"}).json()
    assert body["return_code"] == "MISSING_FIELDS"


def test_me_returns_current_account(client, owner):
    body = client.get("/api/auth/me", headers=auth_header(owner["token"])).json()
    assert body["return_code"] == "SUCCESS"
    assert body["account"] == owner["account"]


def test_me_without_token(client):
    body = client.get("/api/auth/me").json()
    assert body["return_code"] == "UNAUTHORIZED"


def test_update_profile(client, owner):
    headers = auth_header(owner["token"])
    body = client.put("/api/user/profile", json={"display_name": "The Better Fork"}, headers=headers).json()
    assert body["account"]["display_name"] == "The Better Fork"
    assert client.get("/api/auth/me", headers=headers).json()["account"]["display_name"] == "The Better Fork"


def test_update_profile_blank_name(client, owner):
    body = client.put("/api/user/profile", json={"display_name": " "}, headers=auth_header(owner["token"])).json()
    assert body["return_code"] == "MISSING_FIELDS"


def test_branding_round_trip(client, owner):
    headers = auth_header(owner["token"])
    empty = client.get("/api/branding", headers=headers).json()
    assert empty["branding"] == {"logo_url": None, "hero_image_url": None, "terms_link": None}

    body = client.put(
        "/api/branding",
        json={"logo_url": "https://cdn.example.com/logo.png", "terms_link": "  "},
        headers=headers,
    ).json()
    assert body["branding"] == {
        "logo_url": "https://cdn.example.com/logo.png",
        "hero_image_url": None,
        "terms_link": None,
    }
    assert client.get("/api/branding", headers=headers).json()["branding"] == body["branding"]


def test_service_register_and_login(db, tokens):
    account, token = _register(db, tokens)
    assert tokens.verify(token) == account.id
    logged_in, _ = AccountService.login(db, tokens, "owner@goodfork.com", "secret1")
    assert logged_in == account


def test_service_register_duplicate(db, tokens):
    _register(db, tokens)
    with pytest.raises(EmailExists):
        _register(db, tokens, email="OWNER@goodfork.com")


def test_concurrent_registration_maps_unique_violation(db, tokens):
    # An account inserted directly stands in for a registration that
    # committed between the lookup and the insert.
    original_connection = db.connection
    calls = {"count": 0}

    def racing_connection():
        calls["count"] += 1
        if calls["count"] == 2:
            with original_connection() as conn:
                conn.execute(
                    "INSERT INTO accounts (email, password_hash, display_name) VALUES (?, ?, ?)",
                    ("owner@goodfork.com", "1000$00$00", "Someone Else"),
                )
        return original_connection()

    db.connection = racing_connection
    try:
        with pytest.raises(EmailExists):
            _register(db, tokens)
    finally:
        db.connection = original_connection
    with db.connection() as conn:
        assert conn.execute("SELECT COUNT(*) FROM accounts").fetchone()[0] == 1


def test_service_login_errors(db, tokens):
    _register(db, tokens)
    with pytest.raises(InvalidCredentials):
        AccountService.login(db, tokens, "owner@goodfork.com", "nope-nope")
    with pytest.raises(MissingFields):
        AccountService.login(db, tokens, None, "secret1")
