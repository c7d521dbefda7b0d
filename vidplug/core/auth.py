"""
Authentication State - Explicit auth token value with refresh and clear.

The token, its expiry, and the user id live in an immutable ``AuthState``
owned by the calling source. Refreshing or clearing returns a new state
instead of mutating shared plugin state.
"""

import logging
import time
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from vidplug.core.exceptions import AuthenticationError
from vidplug.network.client import NetworkClient
from vidplug.network.graphql import join_url


logger = logging.getLogger(__name__)


TOKEN_LIFETIME_SECONDS = 24 * 60 * 60
TOKEN_ENDPOINT = "/auth/token"


class AuthState(BaseModel):
    """Authentication token, expiry timestamp and user id."""

    model_config = ConfigDict(frozen=True)

    auth_token: str = Field(default="", description="Bearer token")
    expires_at: float = Field(default=0.0, ge=0, description="Expiry as epoch seconds")
    user_id: str = Field(default="", description="Platform user id")

    def is_valid(self, now: Optional[float] = None) -> bool:
        """Check if the auth token is present and not yet expired."""
        current = time.time() if now is None else now
        return bool(self.auth_token) and self.expires_at > current

    def headers(self) -> Dict[str, str]:
        """Authorization header for authenticated requests."""
        if not self.auth_token:
            return {}
        return {"Authorization": f"Bearer {self.auth_token}"}

    def to_state_string(self) -> str:
        """Serialize for the host's saved-state slot."""
        return self.model_dump_json()

    @classmethod
    def from_state_string(cls, saved_state: Optional[str]) -> "AuthState":
        """Restore from a saved-state string; bad or empty input gives an empty state."""
        if not saved_state:
            return cls()
        try:
            return cls.model_validate_json(saved_state)
        except ValueError as e:
            logger.warning(f"Ignoring unreadable saved auth state: {e}")
            return cls()


async def refresh_auth_token(
    state: AuthState,
    client: NetworkClient,
    base_url: str,
    endpoint: str = TOKEN_ENDPOINT,
    lifetime: float = TOKEN_LIFETIME_SECONDS,
) -> AuthState:
    """
    Request an anonymous token and return the refreshed state.

    On failure the error is logged and ``state`` is returned unchanged.

    Args:
        state: Current auth state
        client: Network client used for the token request
        base_url: Active platform base URL
        endpoint: Token endpoint path
        lifetime: Seconds until the new token expires

    Returns:
        The refreshed auth state, or ``state`` if the refresh failed
    """
    try:
        data = await client.post_json(join_url(base_url, endpoint), {}, retries=0)
        if not isinstance(data, dict):
            raise AuthenticationError(f"Unexpected token response: {data!r}")

        token = data.get("accessToken") or data.get("token") or ""
        if not token:
            raise AuthenticationError("Token response did not include a token")

        refreshed = AuthState(
            auth_token=token,
            user_id=str(data.get("userId") or data.get("user_id") or ""),
            expires_at=time.time() + lifetime,
        )
        logger.info("Auth token refreshed")
        return refreshed

    except Exception as e:
        logger.error(f"Error refreshing token: {e}")
        return state


def clear_auth_state() -> AuthState:
    """Return an empty authentication state."""
    return AuthState()


__all__ = [
    "AuthState",
    "refresh_auth_token",
    "clear_auth_state",
    "TOKEN_ENDPOINT",
    "TOKEN_LIFETIME_SECONDS",
]
