"""Random password and secret generation.

All generators draw 32 bytes from the OS CSPRNG, base64-encode them and strip
the characters that are awkward inside `.env` files and URLs (`=`, `+`, `/`).
The result is then cut to the requested length, the same shape as
`openssl rand -base64 32 | tr -d "=+/" | cut -c1-N`.
"""

from __future__ import annotations

import base64
import secrets

from core.domain.models import Credentials

_RANDOM_BYTES = 32
_STRIPPED = str.maketrans("", "", "=+/")

VPS_SECRET_LENGTH = 25
ENV_SETUP_SECRET_LENGTH = 32
RAILWAY_JWT_MAX_LENGTH = 64


def _random_token() -> str:
    raw = base64.b64encode(secrets.token_bytes(_RANDOM_BYTES)).decode("ascii")
    return raw.translate(_STRIPPED)


def generate_password(length: int = VPS_SECRET_LENGTH) -> str:
    """Return an alphanumeric password of at most `length` characters."""

    if length < 1:
        raise ValueError("length must be positive")
    return _random_token()[:length]


def generate_credentials(length: int = VPS_SECRET_LENGTH) -> Credentials:
    """Database and Redis passwords plus a double-length JWT secret."""

    return Credentials(
        db_password=generate_password(length),
        redis_password=generate_password(length),
        jwt_secret=generate_password(length) + generate_password(length),
    )


def generate_jwt_secret(max_length: int = RAILWAY_JWT_MAX_LENGTH) -> str:
    """Single-draw JWT secret used for Railway services."""

    return _random_token()[:max_length]
