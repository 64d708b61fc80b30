"""JWT validation for bearer tokens issued by the identity provider.

Validates tokens against the provider's JWKS, cached for a configurable TTL,
and extracts the caller's id and marketplace role.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Any

import httpx
from jose import JWTError, jwt
from jose.exceptions import ExpiredSignatureError, JWTClaimsError

if TYPE_CHECKING:
    from shared_kernel.auth.observability import JWTValidatorProbe


@dataclass(frozen=True)
class TokenClaims:
    """Validated JWT claims."""

    sub: str
    role: str | None


class InvalidTokenError(Exception):
    """Raised when JWT validation fails."""

    pass


def read_claim(claims: dict[str, Any], path: str) -> Any:
    """Look up a claim, following dots into nested objects.

    ``app_metadata.role`` reads ``claims["app_metadata"]["role"]``.
    """
    value: Any = claims
    for part in path.split("."):
        if not isinstance(value, dict):
            return None
        value = value.get(part)
    return value


class JWTValidator:
    """Validates JWT tokens using the issuer's JWKS.

    Validates signature, expiry, issuer and audience, then reads the user id
    and role claims.
    """

    def __init__(
        self,
        issuer_url: str,
        audience: str,
        probe: JWTValidatorProbe,
        user_id_claim: str = "sub",
        role_claim: str = "role",
        jwks_cache_ttl: timedelta = timedelta(hours=24),
    ):
        """Initialize the JWT validator.

        Args:
            issuer_url: The OIDC issuer URL.
            audience: Expected audience claim value.
            probe: Observability probe for logging events.
            user_id_claim: Claim holding the user id (default: sub).
            role_claim: Claim holding the marketplace role; dotted paths
                reach into nested objects (default: role).
            jwks_cache_ttl: How long to cache JWKS keys (default: 24 hours).
        """
        self._issuer_url = issuer_url.rstrip("/")
        self._audience = audience
        self._probe = probe
        self._user_id_claim = user_id_claim
        self._role_claim = role_claim
        self._jwks_cache_ttl = jwks_cache_ttl

        self._jwks: dict[str, Any] | None = None
        self._jwks_fetched_at: datetime | None = None
        self._jwks_lock = asyncio.Lock()

    async def validate_token(self, token: str) -> TokenClaims:
        """Validate a JWT and return its claims.

        Raises:
            InvalidTokenError: If the token is malformed, expired or fails
                verification.
        """
        try:
            header = jwt.get_unverified_header(token)
        except JWTError as e:
            self._probe.token_validation_failed(reason=f"Malformed token: {e}")
            raise InvalidTokenError(f"Invalid token format: {e}") from e

        if not header:
            self._probe.token_validation_failed(reason="Missing token header")
            raise InvalidTokenError("Invalid token: missing header")

        jwks = await self._get_jwks()

        try:
            claims = jwt.decode(
                token=token,
                key=jwks,
                algorithms=["RS256"],
                audience=self._audience,
                issuer=self._issuer_url,
            )
        except ExpiredSignatureError as e:
            self._probe.token_validation_failed(reason="Token expired")
            raise InvalidTokenError("Token has expired") from e
        except JWTClaimsError as e:
            self._probe.token_validation_failed(reason=f"Claims error: {e}")
            raise InvalidTokenError(f"Invalid token claims: {e}") from e
        except JWTError as e:
            self._probe.token_validation_failed(reason=f"JWT error: {e}")
            raise InvalidTokenError(f"Invalid token: {e}") from e

        user_id = read_claim(claims, self._user_id_claim)
        if user_id is None or str(user_id) == "":
            self._probe.token_validation_failed(
                reason=f"Missing {self._user_id_claim} claim"
            )
            raise InvalidTokenError(f"Missing required claim: {self._user_id_claim}")

        role = read_claim(claims, self._role_claim)
        if role is None:
            self._probe.role_claim_missing(
                user_id=str(user_id), claim=self._role_claim
            )
        self._probe.token_validated(
            user_id=str(user_id), role=str(role) if role is not None else None
        )

        return TokenClaims(
            sub=str(user_id),
            role=str(role) if role is not None else None,
        )

    async def _get_jwks(self) -> dict[str, Any]:
        """Get JWKS, fetching from the issuer when the cache expired."""
        if self._is_cache_valid():
            self._probe.jwks_cache_hit()
            return self._jwks  # type: ignore[return-value]

        async with self._jwks_lock:
            if self._is_cache_valid():
                self._probe.jwks_cache_hit()
                return self._jwks  # type: ignore[return-value]
            return await self._fetch_jwks()

    def _is_cache_valid(self) -> bool:
        if self._jwks is None or self._jwks_fetched_at is None:
            return False
        now = datetime.now(tz=timezone.utc)
        return (now - self._jwks_fetched_at) < self._jwks_cache_ttl

    async def _fetch_jwks(self) -> dict[str, Any]:
        """Fetch JWKS through the issuer's discovery document.

        Raises:
            InvalidTokenError: If JWKS cannot be fetched.
        """
        try:
            async with httpx.AsyncClient() as client:
                config_response = await client.get(
                    f"{self._issuer_url}/.well-known/openid-configuration"
                )
                config_response.raise_for_status()
                jwks_uri = config_response.json().get("jwks_uri")
                if not jwks_uri:
                    self._probe.jwks_fetch_failed(
                        error="Missing jwks_uri in OpenID configuration"
                    )
                    raise InvalidTokenError(
                        "Identity provider missing jwks_uri in configuration"
                    )

                jwks_response = await client.get(jwks_uri)
                jwks_response.raise_for_status()
                jwks = jwks_response.json()
        except httpx.HTTPError as e:
            self._probe.jwks_fetch_failed(error=str(e))
            raise InvalidTokenError(f"Failed to fetch JWKS: {e}") from e

        self._jwks = jwks
        self._jwks_fetched_at = datetime.now(tz=timezone.utc)
        self._probe.jwks_fetched(key_count=len(jwks.get("keys", [])))
        return jwks
