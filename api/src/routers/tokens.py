"""
Token router: issues access tokens to the storefront.
"""

import structlog
from typing import Any, Dict
from fastapi import APIRouter, Body, Depends, status

from api.src.dependencies import get_token_service
from api.src.models.auth import TokenResponse
from api.src.services.token_service import TokenService

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["Authentication"])


@router.post(
    "/jwt",
    response_model=TokenResponse,
    status_code=status.HTTP_200_OK,
    summary="Issue access token",
    description="""
    Sign the posted JSON object into a bearer token valid for one hour.

    The payload is not validated; it is expected to carry the caller's
    ``email``, which protected order routes compare against.

    **Authentication:** Not required (public endpoint)
    """,
)
async def issue_token(
    payload: Dict[str, Any] = Body(...),
    token_service: TokenService = Depends(get_token_service),
) -> TokenResponse:
    token = token_service.issue(payload)
    return TokenResponse(token=token)
