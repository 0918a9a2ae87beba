"""Bearer token verification backed by Supabase Auth."""

import logging
from dataclasses import dataclass

from supabase import AuthError, Client

from meal_tracker.services.auth import TokenVerifier

_logger = logging.getLogger(__name__)


@dataclass
class SupabaseTokenVerifier(TokenVerifier):
    """Resolve a user id from a Supabase access token."""

    client: Client

    def verify(self, token: str) -> str | None:
        """Return the user id for a valid token, otherwise None."""
        try:
            response = self.client.auth.get_user(token)
        except AuthError as exc:
            _logger.info("Rejected access token: %s", exc)
            return None
        if response is None or response.user is None:
            return None
        return str(response.user.id)
