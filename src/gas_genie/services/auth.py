"""Access token verification for end-user requests."""

from typing import Protocol


class AccessTokenVerifier(Protocol):
    """Interface for resolving a bearer token to a user id."""

    def resolve_user_id(self, access_token: str) -> str:
        """Return the user id for a valid token or raise AuthenticationError."""
