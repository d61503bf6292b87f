"""
Bearer token access control for FastAPI routes.

Provides:
- Token extraction from the Authorization header
- Token verification through the TokenService
- Request context enrichment with the decoded payload
- Standardized 401/403 errors
"""

import structlog
from typing import Optional
from fastapi import Depends, HTTPException, Request, status

from api.src.dependencies import get_client_ip, get_token_service
from api.src.exceptions import InvalidTokenError
from api.src.models.auth import DecodedToken
from api.src.services.token_service import TokenService

logger = structlog.get_logger(__name__)

UNAUTHORIZED_MESSAGE = "Unauthorized access"


def create_auth_error(detail: str = UNAUTHORIZED_MESSAGE) -> HTTPException:
    """
    Create standardized authentication error (401).

    Args:
        detail: Error detail message

    Returns:
        HTTPException with 401 status
    """
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"}
    )


def create_forbidden_error(detail: str = UNAUTHORIZED_MESSAGE) -> HTTPException:
    """
    Create standardized forbidden error (403).

    Args:
        detail: Error detail message

    Returns:
        HTTPException with 403 status
    """
    return HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail=detail
    )


def extract_token(authorization: str) -> Optional[str]:
    """
    Take the second space-separated segment of an Authorization value.

    The scheme word is not checked, so ``"Bearer <t>"`` and ``"Token <t>"``
    both yield ``<t>``.
    """
    parts = authorization.split(" ")
    if len(parts) < 2:
        return None
    return parts[1]


async def verify_jwt(
    request: Request,
    token_service: TokenService = Depends(get_token_service),
    client_ip: str = Depends(get_client_ip),
) -> DecodedToken:
    """
    Require a valid bearer token.

    FastAPI dependency wrapping protected routes. On success the decoded
    payload is stored on ``request.state.decoded`` and returned.

    Raises:
        HTTPException: 401 if the header is missing or the token is invalid
    """
    authorization = request.headers.get("Authorization")

    if not authorization:
        logger.warning(
            "auth_missing_header",
            path=request.url.path,
            method=request.method,
            client=client_ip
        )
        raise create_auth_error()

    try:
        decoded = token_service.verify(extract_token(authorization))
    except InvalidTokenError as e:
        logger.warning(
            "auth_invalid_token",
            path=request.url.path,
            method=request.method,
            client=client_ip,
            reason=e.reason
        )
        raise create_auth_error()

    request.state.decoded = decoded
    return decoded
