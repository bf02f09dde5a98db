"""Link identity-provider principals to local user rows"""

import logging
from typing import Optional

from pydantic import BaseModel

from .models import Principal, User
from .storage import database

logger = logging.getLogger(__name__)


class AuthResult(BaseModel):
    status: int
    user: Optional[User] = None
    error: Optional[str] = None


def on_authenticate_user(principal: Optional[Principal], storage=None) -> AuthResult:
    """Resolve the local user for an authenticated principal

    Looks the user up by identity-provider ID first, then by email (relinking
    the account to the new ID), and creates the user when neither matches.

    Args:
        principal: Identity reported by the identity provider, None if anonymous
        storage: Storage collaborator (default: the database module)

    Returns:
        AuthResult with status 200 (existing), 201 (created), 403 (anonymous)
        or 500 (storage failure)
    """
    storage = storage or database

    if principal is None:
        return AuthResult(status=403)

    try:
        user = storage.get_user_by_external_id(principal.id)
        if user:
            return AuthResult(status=200, user=user)

        existing = storage.get_user_by_email(principal.email)
        if existing:
            user = storage.update_user_external_id(
                principal.email,
                principal.id,
                name=principal.name,
                profile_image=principal.image_url,
            )
            logger.info(f"Relinked user {existing.id} to identity {principal.id}")
            return AuthResult(status=200, user=user)

        user = storage.create_user(
            email=principal.email,
            external_id=principal.id,
            name=principal.name,
            profile_image=principal.image_url,
        )
        logger.info(f"Created user {user.id} for identity {principal.id}")
        return AuthResult(status=201, user=user)

    except Exception:
        logger.exception("Error authenticating user")
        return AuthResult(status=500, error="Internal Server Error")
