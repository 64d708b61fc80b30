"""Caller resolution for catalog routes.

Every catalog route accepts anonymous callers; a bearer token, when sent,
must be valid.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from ulid import ULID

from catalog.application.value_objects import Caller, CallerRole
from infrastructure.settings import get_oidc_settings
from shared_kernel.auth import InvalidTokenError, JWTValidator
from shared_kernel.auth.observability import DefaultJWTValidatorProbe
from shared_kernel.observability_context import ObservationContext

bearer_scheme = HTTPBearer(auto_error=False)


@lru_cache
def get_jwt_validator() -> JWTValidator:
    """Get cached JWT validator.

    A single instance is reused across requests so its JWKS cache is shared.
    """
    settings = get_oidc_settings()
    return JWTValidator(
        issuer_url=settings.issuer_url,
        audience=settings.effective_audience,
        probe=DefaultJWTValidatorProbe(),
        user_id_claim=settings.user_id_claim,
        role_claim=settings.role_claim,
    )


async def get_caller(
    validator: Annotated[JWTValidator, Depends(get_jwt_validator)],
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(bearer_scheme)
    ] = None,
) -> Caller:
    """Resolve the caller of the current request.

    Returns:
        An anonymous caller when no bearer token is sent, otherwise the
        caller named by the token

    Raises:
        HTTPException 401: If a token is sent but is not valid
    """
    if credentials is None:
        return Caller.anonymous()

    try:
        claims = await validator.validate_token(credentials.credentials)
    except InvalidTokenError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        ) from e

    return Caller(id=claims.sub, role=CallerRole.from_claim(claims.role))


def get_observation_context(
    request: Request,
    caller: Annotated[Caller, Depends(get_caller)],
) -> ObservationContext:
    """Build the observation context bound to every probe of a request.

    Reuses the client's X-Request-ID when present.
    """
    request_id = request.headers.get("x-request-id") or str(ULID())
    context = ObservationContext(request_id=request_id)
    if caller.id is None:
        return context
    return context.with_caller(caller.id, caller.role.value)
