from dataclasses import dataclass
from uuid import UUID

from fastapi import HTTPException, Request

from ecare.models.account import ActorRole


@dataclass(frozen=True)
class Actor:
    """Identity of the caller, already resolved by the auth gateway."""

    id: UUID
    role: ActorRole

    @property
    def is_admin(self) -> bool:
        return self.role == ActorRole.ADMIN

    @property
    def is_technician(self) -> bool:
        return self.role == ActorRole.TECHNICIAN

    @property
    def is_user(self) -> bool:
        return self.role == ActorRole.USER


def get_current_actor(request: Request) -> Actor:
    """Build the Actor from the ``X-Actor-Id`` and ``X-Actor-Role`` headers.

    The upstream gateway authenticates the caller and forwards its identity;
    this dependency only validates the shape of what it forwarded.
    """
    actor_id = request.headers.get("X-Actor-Id")
    actor_role = request.headers.get("X-Actor-Role")
    if not actor_id or not actor_role:
        raise HTTPException(status_code=401, detail="Actor identity is required")

    try:
        parsed_id = UUID(actor_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid X-Actor-Id header") from None

    try:
        role = ActorRole(actor_role.lower())
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid X-Actor-Role header") from None

    return Actor(id=parsed_id, role=role)
