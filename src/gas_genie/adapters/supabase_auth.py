"""Supabase Auth access token verification."""

from dataclasses import dataclass

from supabase import Client

from gas_genie.errors import AuthenticationError
from gas_genie.services.auth import AccessTokenVerifier


@dataclass
class SupabaseAccessTokenVerifier(AccessTokenVerifier):
    """Resolves Supabase access tokens via the Auth API."""

    client: Client

    def resolve_user_id(self, access_token: str) -> str:
        """Return the user id owning the token."""
        try:
            response = self.client.auth.get_user(access_token)
        except Exception as exc:
            raise AuthenticationError("Invalid access token") from exc
        user = response.user if response else None
        if user is None:
            raise AuthenticationError("Invalid access token")
        return str(user.id)
