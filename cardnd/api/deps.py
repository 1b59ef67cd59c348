"""API dependencies for authentication and the document store."""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from cardnd.core.exceptions import AuthorizationError
from cardnd.core.security import Actor, actor_from_token
from cardnd.store import DocumentStore, get_document_store

# Security scheme
security = HTTPBearer()


def get_store() -> DocumentStore:
    """Document store used by the request."""
    return get_document_store()


async def get_current_actor(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
) -> Actor:
    """Get the calling actor from the bearer token."""
    return actor_from_token(credentials.credentials)


async def get_current_host(
    actor: Annotated[Actor, Depends(get_current_actor)],
) -> Actor:
    """Get current actor and verify they are a host."""
    if actor.role not in ("host", "admin"):
        raise AuthorizationError("Host access required")
    return actor


async def get_current_admin(
    actor: Annotated[Actor, Depends(get_current_actor)],
) -> Actor:
    """Get current actor and verify they are an admin."""
    if not actor.is_admin:
        raise AuthorizationError("Admin access required")
    return actor


StoreDep = Annotated[DocumentStore, Depends(get_store)]
ActorDep = Annotated[Actor, Depends(get_current_actor)]
HostDep = Annotated[Actor, Depends(get_current_host)]
AdminDep = Annotated[Actor, Depends(get_current_admin)]
