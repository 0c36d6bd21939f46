"""
Ownership checks for mutating operations.

Identities reaching this module were already verified by the authenticator;
the guard only compares the verified subject with the recorded owner.
"""

from typing import Optional

from app.core.errors import Unauthenticated, Unauthorized
from app.core.logger import logger


def authorize(acting_identity: Optional[str], resource_owner_id: Optional[str]) -> bool:
    """True when the acting identity is the resource owner"""
    return bool(acting_identity) and acting_identity == resource_owner_id


def require_authenticated(acting_identity: Optional[str]) -> str:
    if not acting_identity:
        raise Unauthenticated("Authentication required")
    return acting_identity


def require_owner(acting_identity: Optional[str], resource_owner_id: Optional[str],
                  resource: str, resource_id: str) -> None:
    """Raise Unauthorized unless ``acting_identity`` owns the resource"""
    require_authenticated(acting_identity)
    if not authorize(acting_identity, resource_owner_id):
        logger.warning(
            f"Ownership check failed for {resource} {resource_id}",
            user_id=acting_identity,
            metadata={"event": "access_denied", "resource": resource, "resource_id": resource_id},
        )
        raise Unauthorized(f"You can only modify your own {resource}")
