"""Authentication interface used by the HTTP layer."""

from typing import Protocol


class TokenVerifier(Protocol):
    """Resolves a bearer token to a user id."""

    def verify(self, token: str) -> str | None:
        """Return the user id for a valid token, otherwise None."""
