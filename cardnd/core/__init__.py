"""Core utilities and security modules."""

from cardnd.core.exceptions import (
    AppException,
    AuthenticationError,
    AuthorizationError,
    CollaboratorError,
    NotFoundError,
    PreconditionError,
    StaleWriteError,
    ValidationError,
)
from cardnd.core.security import Actor, actor_from_token, create_access_token, verify_token

__all__ = [
    "Actor",
    "AppException",
    "AuthenticationError",
    "AuthorizationError",
    "CollaboratorError",
    "NotFoundError",
    "PreconditionError",
    "StaleWriteError",
    "ValidationError",
    "actor_from_token",
    "create_access_token",
    "verify_token",
]
