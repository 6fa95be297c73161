"""Current user and fridge membership resolution."""

import logging
from dataclasses import dataclass
from typing import Protocol

from myfridge.domain.errors import FridgeError, NoFridgeJoined, NotAuthenticated
from myfridge.domain.users import UserIdentity

_logger = logging.getLogger(__name__)

CURRENT_FRIDGE_KEY = "current_fridge_id"


class AuthGateway(Protocol):
    """Interface to the hosted auth service."""

    def get_user(self, access_token: str) -> UserIdentity | None:
        """Return the user for an access token, or None when invalid."""


class MembershipRepository(Protocol):
    """Persistence interface for fridge memberships."""

    def first_fridge_id(self, user_id: str) -> int | None:
        """Return the first fridge the user is a member of."""


def fridge_id_from_metadata(metadata: dict[str, object]) -> int | None:
    """Read ``current_fridge_id`` from user metadata, number or numeric string."""
    value = metadata.get(CURRENT_FRIDGE_KEY)
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    try:
        return int(str(value).strip())
    except ValueError:
        return None


@dataclass
class UserContextService:
    """Resolve the authenticated user and their current fridge."""

    auth_gateway: AuthGateway
    membership_repository: MembershipRepository

    def require_user(self, access_token: str | None) -> UserIdentity:
        """Return the current user or raise NotAuthenticated."""
        if not access_token:
            raise NotAuthenticated("Please sign in to continue.")
        user = self.auth_gateway.get_user(access_token)
        if user is None:
            raise NotAuthenticated("Please sign in to continue.")
        return user

    def resolve_fridge_id(self, user: UserIdentity) -> int | None:
        """Prefer the metadata fridge, falling back to the first membership."""
        metadata_id = fridge_id_from_metadata(user.metadata)
        if metadata_id is not None:
            return metadata_id
        try:
            return self.membership_repository.first_fridge_id(user.id)
        except FridgeError:
            _logger.warning(
                "Failed to resolve fridge membership for user_id=%s",
                user.id,
                exc_info=True,
            )
            return None

    def require_fridge_id(self, user: UserIdentity) -> int:
        """Return the user's fridge or raise NoFridgeJoined."""
        fridge_id = self.resolve_fridge_id(user)
        if fridge_id is None:
            raise NoFridgeJoined("No fridge joined yet. Create or join a fridge first.")
        return fridge_id
