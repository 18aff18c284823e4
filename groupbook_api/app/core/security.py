"""
Security helpers for password hashing and JWT authentication.

This module implements a lightweight JSON Web Token (JWT) mechanism
using HMAC-SHA256 signatures and base64url encoding.  Tokens carry
exactly one application claim, ``account_id``, plus the standard
expiration claim ``exp``; every other account attribute is re-read
from the database when needed.  The signing key belongs to a
``TokenService`` created once per application from ``Settings``.

Passwords are hashed with PBKDF2-HMAC-SHA256 and a random 16-byte
salt.  The stored string is ``iterations$salt_hex$hash_hex`` so that
the work factor can be raised without invalidating existing hashes.
"""

import base64
import binascii
import hashlib
import hmac
import json
import os
import time
from typing import Any, Callable, Dict, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .errors import InvalidToken, TokenExpired, Unauthorized


def _b64_url_encode(data: bytes) -> str:
    """Base64-url encode bytes without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("utf-8")


def _b64_url_decode(data: str) -> bytes:
    """Decode base64-url encoded string, adding padding if necessary."""
    padding = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


def _sign(message: bytes, secret: str) -> bytes:
    """Compute HMAC-SHA256 signature of a message using the given secret."""
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).digest()


_HEADER = {"alg": "HS256", "typ": "JWT"}


class TokenService:
    """Issue and verify signed, time-limited identity tokens.

    Parameters
    ----------
    secret_key : str
        HMAC key used to sign tokens.
    expire_minutes : int
        Lifetime of issued tokens.
    clock : Callable[[], float]
        Source of the current UNIX time.  Defaults to ``time.time``;
        tests substitute a fixed clock.
    """

    def __init__(
        self,
        secret_key: str,
        expire_minutes: int,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if not secret_key:
            raise ValueError("secret_key must not be empty")
        self._secret_key = secret_key
        self._expire_seconds = expire_minutes * 60
        self._clock = clock

    def issue(self, account_id: int, expires_in: Optional[int] = None) -> str:
        """Create a signed token for ``account_id``.

        ``exp`` is kept with sub-second precision (a valid JWT
        NumericDate) so that two tokens issued for the same account are
        distinct values.
        """
        lifetime = self._expire_seconds if expires_in is None else expires_in
        payload = {"account_id": account_id, "exp": round(self._clock() + lifetime, 6)}
        header_b64 = _b64_url_encode(json.dumps(_HEADER, separators=(",", ":")).encode("utf-8"))
        payload_b64 = _b64_url_encode(json.dumps(payload, separators=(",", ":")).encode("utf-8"))
        signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
        signature_b64 = _b64_url_encode(_sign(signing_input, self._secret_key))
        return f"{header_b64}.{payload_b64}.{signature_b64}"

    def verify(self, token: str) -> int:
        """Verify ``token`` and return the account id it carries.

        Raises
        ------
        InvalidToken
            The token is malformed, its signature does not match or the
            payload does not hold a usable ``account_id``/``exp``.
        TokenExpired
            The signature is valid but ``exp`` has passed.
        """
        parts = token.split(".") if isinstance(token, str) else []
        if len(parts) != 3:
            raise InvalidToken()
        header_b64, payload_b64, signature_b64 = parts
        try:
            header = json.loads(_b64_url_decode(header_b64).decode("utf-8"))
            actual_sig = _b64_url_decode(signature_b64)
            payload = json.loads(_b64_url_decode(payload_b64).decode("utf-8"))
        except (ValueError, binascii.Error, UnicodeDecodeError) as exc:
            raise InvalidToken() from exc
        if not isinstance(header, dict) or header.get("alg") != "HS256":
            raise InvalidToken()
        signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
        expected_sig = _sign(signing_input, self._secret_key)
        # Constant-time comparison to prevent timing attacks
        if not hmac.compare_digest(expected_sig, actual_sig):
            raise InvalidToken()
        return self._account_id_from(payload)

    def _account_id_from(self, payload: Any) -> int:
        if not isinstance(payload, dict):
            raise InvalidToken()
        account_id = payload.get("account_id")
        exp = payload.get("exp")
        if not isinstance(account_id, int) or isinstance(account_id, bool):
            raise InvalidToken()
        if not isinstance(exp, (int, float)) or isinstance(exp, bool):
            raise InvalidToken()
        if exp <= self._clock():
            raise TokenExpired()
        return account_id


security = HTTPBearer(auto_error=False)


def get_token_service(request: Request) -> TokenService:
    return request.app.state.tokens


def get_current_account_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    tokens: TokenService = Depends(get_token_service),
) -> int:
    """Dependency guarding protected routes.

    Resolves the bearer token to an account id.  A missing, invalid or
    expired token raises ``Unauthorized`` so the route handler never
    runs.  Ownership of individual events is checked by the services
    once the row has been fetched.
    """
    if credentials is None or not credentials.credentials:
        raise Unauthorized("No token provided")
    return tokens.verify(credentials.credentials)


def hash_password(password: str, iterations: int = 100_000) -> str:
    """Hash a password using PBKDF2-HMAC with SHA-256.

    A 16-byte random salt is generated for each password.  The result
    is ``iterations$salt_hex$hash_hex``.
    """
    salt = os.urandom(16)
    dk = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)
    return f"{iterations}${salt.hex()}${dk.hex()}"


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Verify a plain password against a stored hash string.

    Returns ``False`` for a malformed or missing stored hash.
    """
    if not hashed_password:
        return False
    try:
        iterations_str, salt_hex, hash_hex = hashed_password.split("$", 2)
        iterations = int(iterations_str)
        salt = bytes.fromhex(salt_hex)
        stored_hash = bytes.fromhex(hash_hex)
    except ValueError:
        return False
    dk = hashlib.pbkdf2_hmac("sha256", plain_password.encode("utf-8"), salt, iterations)
    return hmac.compare_digest(dk, stored_hash)


def token_claims(token: str) -> Dict[str, Any]:
    """Decode a token's payload without verifying it.

    Intended for diagnostics and tests only; never use the result for
    an authorization decision.
    """
    payload_b64 = token.split(".")[1]
    return json.loads(_b64_url_decode(payload_b64).decode("utf-8"))
