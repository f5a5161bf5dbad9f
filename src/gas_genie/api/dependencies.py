"""FastAPI dependencies shared by routers."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import Header, HTTPException, Request, status

from gas_genie.errors import AuthenticationError

if TYPE_CHECKING:
    from gas_genie.containers import AppContainer


async def require_user(
    request: Request,
    authorization: str | None = Header(default=None),
) -> str:
    """Resolve the bearer token on the request to a user id."""
    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing bearer token",
        )
    container: AppContainer = request.app.state.container
    try:
        return container.token_verifier.resolve_user_id(token.strip())
    except AuthenticationError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail=exc.message
        ) from exc
