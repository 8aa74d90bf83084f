import uuid
from datetime import datetime, timedelta, timezone

import jwt
from sqlalchemy.orm import Session

from rollcall.core.config import settings
from rollcall.models.user import User

# ---------------------------------------------------------------------------
# JWT utilities
# ---------------------------------------------------------------------------


def create_access_token(user_id: uuid.UUID, expires_minutes: int | None = None) -> str:
    """Issue an access token for ``user_id``.

    Production tokens come from the identity provider; this is used by the
    seed script and tests, and matches the claims that provider issues.
    """
    expire = datetime.now(timezone.utc) + timedelta(
        minutes=expires_minutes if expires_minutes is not None else settings.ACCESS_TOKEN_EXPIRE_MINUTES
    )
    payload = {
        "sub": str(user_id),
        "exp": expire,
        "type": "access",
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> dict:
    """Decode and validate a JWT token. Raises jwt.PyJWTError on failure."""
    return jwt.decode(
        token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM]
    )


# ---------------------------------------------------------------------------
# User lookup
# ---------------------------------------------------------------------------


def get_user_by_id(db: Session, user_id: uuid.UUID) -> User | None:
    return db.get(User, user_id)
