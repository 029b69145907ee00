"""Bearer JWT authentication verified against the issuer's JWKS."""

import asyncio
from typing import Annotated, Any

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jwt import PyJWKClient, PyJWKClientError

from shopmetrics.core.config import settings

bearer_scheme = HTTPBearer(auto_error=False)

_jwks_client: PyJWKClient | None = None
_jwks_lock = asyncio.Lock()


def get_jwks_client() -> PyJWKClient:
    """Get or create the cached JWKS client."""
    global _jwks_client  # noqa: PLW0603
    if _jwks_client is None:
        jwks_url = settings.auth_jwks_url or f"{settings.auth_url}/api/auth/jwks"
        _jwks_client = PyJWKClient(jwks_url, cache_keys=True)
    return _jwks_client


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def verify_token(token: str) -> dict[str, Any]:
    """Verify an RS256 JWT and return its payload.

    Raises:
        HTTPException: 401 for invalid/expired tokens or tokens without a
            subject, 503 if the JWKS endpoint cannot be reached.
    """
    try:
        signing_key = get_jwks_client().get_signing_key_from_jwt(token)
        payload: dict[str, Any] = jwt.decode(
            token,
            signing_key.key,
            algorithms=["RS256"],
            audience=settings.auth_url,
            issuer=settings.auth_url,
            options={"verify_exp": True, "verify_aud": True, "verify_iss": True},
        )
    except jwt.ExpiredSignatureError:
        raise _unauthorized("Token has expired")
    except jwt.InvalidTokenError as e:
        raise _unauthorized(f"Invalid token: {e}")
    except PyJWKClientError as e:
        # Drop the cached client so the next request refetches the key set
        async with _jwks_lock:
            global _jwks_client  # noqa: PLW0603
            _jwks_client = None
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Authentication service unavailable: {e}",
        )

    if not payload.get("sub"):
        raise _unauthorized("Token has no subject")
    return payload


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> dict[str, Any]:
    """Return the verified JWT payload of the caller.

    Raises:
        HTTPException: 401 when no bearer token is supplied.
    """
    if credentials is None:
        raise _unauthorized("Not authenticated")

    return await verify_token(credentials.credentials)


CurrentUser = Annotated[dict[str, Any], Depends(get_current_user)]
