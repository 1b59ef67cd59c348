"""Bearer token handling for the external auth provider."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt

from cardnd.config import settings
from cardnd.core.exceptions import AuthenticationError

ACTOR_ROLES = ("guest", "host", "admin")


@dataclass(frozen=True)
class Actor:
    """The authenticated caller, passed explicitly into every engine call."""

    id: str
    role: str = "guest"

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def create_access_token(
    data: dict[str, Any],
    expires_delta: timedelta | None = None,
) -> str:
    """Create a JWT access token (tooling and tests only)."""
    to_encode = data.copy()
    expire = datetime.now(UTC) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    to_encode.update({"exp": expire, "type": "access"})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def verify_token(token: str, token_type: str = "access") -> dict[str, Any]:
    """Verify and decode a JWT token."""
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
        )
        if payload.get("type") != token_type:
            raise AuthenticationError("Invalid token type")
        return payload
    except JWTError as e:
        raise AuthenticationError(f"Token validation failed: {str(e)}")


def actor_from_token(token: str) -> Actor:
    """Build the calling actor from a verified access token."""
    payload = verify_token(token, token_type="access")
    user_id = payload.get("sub")
    if not user_id:
        raise AuthenticationError("Invalid token payload")
    role = payload.get("role", "guest")
    if role not in ACTOR_ROLES:
        raise AuthenticationError(f"Unknown role '{role}'")
    return Actor(id=str(user_id), role=role)
