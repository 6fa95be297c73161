"""Supabase auth lookups for bearer tokens."""

import logging
from dataclasses import dataclass

import httpx
from supabase import AuthApiError, Client

from myfridge.domain.errors import RemoteReadFailure
from myfridge.domain.users import UserIdentity
from myfridge.services.users import AuthGateway

_logger = logging.getLogger(__name__)


@dataclass
class SupabaseAuthGateway(AuthGateway):
    """Resolve users from access tokens issued by Supabase auth."""

    client: Client

    def get_user(self, access_token: str) -> UserIdentity | None:
        """Return the token's user, or None when the token is rejected."""
        try:
            response = self.client.auth.get_user(access_token)
        except AuthApiError:
            _logger.info("Access token rejected by auth service")
            return None
        except httpx.HTTPError as exc:
            raise RemoteReadFailure(f"Failed to reach auth service: {exc}") from exc
        if response is None or response.user is None:
            return None
        user = response.user
        return UserIdentity(
            id=str(user.id),
            email=user.email,
            metadata=dict(user.user_metadata or {}),
        )
