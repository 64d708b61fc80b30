"""Domain probe for bearer token validation."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class JWTValidatorProbe(Protocol):
    """Domain probe for token validation and key retrieval."""

    def token_validated(self, user_id: str, role: str | None) -> None:
        """Record that a token was accepted."""
        ...

    def role_claim_missing(self, user_id: str, claim: str) -> None:
        """Record a valid token without a role; the caller acts as a user."""
        ...

    def token_validation_failed(self, reason: str) -> None:
        """Record that a token was rejected."""
        ...

    def jwks_fetched(self, key_count: int) -> None:
        """Record that signing keys were fetched from the issuer."""
        ...

    def jwks_cache_hit(self) -> None:
        ...

    def jwks_fetch_failed(self, error: str) -> None:
        """Record that signing keys could not be fetched."""
        ...

    def with_context(self, context: ObservationContext) -> JWTValidatorProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultJWTValidatorProbe:
    """Default implementation of JWTValidatorProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultJWTValidatorProbe:
        return DefaultJWTValidatorProbe(logger=self._logger, context=context)

    def token_validated(self, user_id: str, role: str | None) -> None:
        self._logger.debug(
            "caller_token_validated",
            user_id=user_id,
            role=role,
            **self._get_context_kwargs(),
        )

    def role_claim_missing(self, user_id: str, claim: str) -> None:
        self._logger.info(
            "caller_role_claim_missing",
            user_id=user_id,
            claim=claim,
            **self._get_context_kwargs(),
        )

    def token_validation_failed(self, reason: str) -> None:
        self._logger.warning(
            "caller_token_rejected", reason=reason, **self._get_context_kwargs()
        )

    def jwks_fetched(self, key_count: int) -> None:
        self._logger.info(
            "signing_keys_fetched", key_count=key_count, **self._get_context_kwargs()
        )

    def jwks_cache_hit(self) -> None:
        self._logger.debug("signing_keys_cache_hit", **self._get_context_kwargs())

    def jwks_fetch_failed(self, error: str) -> None:
        self._logger.error(
            "signing_keys_fetch_failed", error=error, **self._get_context_kwargs()
        )
