"""Access token helpers.

Tokens are issued by the marketplace's auth service; this service only needs
to verify them. :func:`create_access_token` exists for seed scripts and tests.
"""

from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from jiffyjobs.config import get_settings

ALGORITHM = "HS256"


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    settings = get_settings()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    return jwt.encode({**data, "exp": expire}, settings.secret_key, algorithm=ALGORITHM)


def create_user_token(user_id: int, email: str) -> str:
    """Return a token carrying the claims the API expects for ``user_id``."""

    return create_access_token({"sub": str(user_id), "email": email})


def decode_access_token(token: str) -> dict:
    try:
        return jwt.decode(token, get_settings().secret_key, algorithms=[ALGORITHM])
    except JWTError as exc:
        raise ValueError("Could not validate credentials") from exc
