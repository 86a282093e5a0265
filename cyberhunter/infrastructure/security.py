"""Security helpers for hashing and token generation."""

from __future__ import annotations

import secrets
from datetime import datetime, timedelta, timezone
from hashlib import sha256

from jose import JWTError, jwt
from passlib.context import CryptContext

from cyberhunter.config import get_settings

ALGORITHM = "HS256"

settings = get_settings()

pwd_context = CryptContext(
    schemes=["pbkdf2_sha256"],
    deprecated="auto",
    pbkdf2_sha256__rounds=settings.password_hash_rounds,
)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def password_signature(hashed_password: str, is_active: bool) -> str:
    """Fingerprint of the credentials a token was issued against.

    Changing the password or deactivating the account changes the signature,
    which invalidates every token issued before.
    """

    return sha256(f"{hashed_password}:{int(is_active)}".encode()).hexdigest()


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    return jwt.encode({**data, "exp": expire}, settings.secret_key, algorithm=ALGORITHM)


def decode_access_token(token: str) -> dict:
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
    except JWTError as exc:
        raise ValueError("Could not validate credentials") from exc


def generate_url_token() -> tuple[str, str]:
    """Return a one-time token for emailed links and the digest to store."""

    raw = secrets.token_urlsafe(32)
    return raw, hash_url_token(raw)


def hash_url_token(raw_token: str) -> str:
    return sha256(raw_token.encode()).hexdigest()


__all__ = [
    "create_access_token",
    "decode_access_token",
    "generate_url_token",
    "get_password_hash",
    "hash_url_token",
    "password_signature",
    "pwd_context",
    "verify_password",
]
