"""
Order management router.

Every endpoint requires a bearer token. Listing, creating and deleting are
scoped to the token's ``email``; status updates are open to any
authenticated caller who knows the order id.
"""

import structlog
from typing import Any, Dict, List, Optional
from fastapi import APIRouter, Body, Depends, Query

from api.src.dependencies import get_order_repository
from api.src.exceptions import OrderNotFoundError
from api.src.middleware.auth import create_forbidden_error, verify_jwt
from api.src.models.auth import DecodedToken, MessageResponse
from api.src.models.documents import serialize_documents
from api.src.models.results import DeleteOrderResult, InsertResult, UpdateStatusResult
from api.src.repositories.order_repo import OrderRepository

logger = structlog.get_logger(__name__)

router = APIRouter(
    prefix="/orders",
    tags=["Orders"],
    responses={
        401: {"model": MessageResponse, "description": "Unauthorized"},
        403: {"model": MessageResponse, "description": "Forbidden"},
    },
)


def ensure_owner(decoded: DecodedToken, email: Optional[Any], action: str) -> None:
    """
    Reject the request unless the token's email equals ``email``.

    Raises:
        HTTPException: 403 on mismatch
    """
    if decoded.get("email") != email:
        logger.warning("order_access_denied", action=action)
        raise create_forbidden_error()


@router.get(
    "",
    summary="List my orders",
    description="List the orders owned by ``email``, which must match the token.",
)
async def list_orders(
    email: Optional[str] = Query(default=None),
    decoded: DecodedToken = Depends(verify_jwt),
    repo: OrderRepository = Depends(get_order_repository),
) -> List[Dict[str, Any]]:
    ensure_owner(decoded, email, "list")
    orders = await repo.list_orders(email or "")
    return serialize_documents(orders)


@router.post(
    "",
    response_model=InsertResult,
    summary="Create order",
    description="Insert the posted order as-is; its ``email`` must match the token.",
)
async def create_order(
    order: Dict[str, Any] = Body(...),
    decoded: DecodedToken = Depends(verify_jwt),
    repo: OrderRepository = Depends(get_order_repository),
) -> InsertResult:
    ensure_owner(decoded, order.get("email"), "create")
    result = await repo.create_order(order)
    return InsertResult.from_pymongo(result)


@router.patch(
    "/{order_id}",
    response_model=UpdateStatusResult,
    summary="Update order status",
    description="""
    Set the order's ``status``. Any authenticated caller may do this; no
    ownership check is applied. An unknown id reports zero matches.
    """,
)
async def update_order_status(
    order_id: str,
    body: Dict[str, Any] = Body(...),
    decoded: DecodedToken = Depends(verify_jwt),
    repo: OrderRepository = Depends(get_order_repository),
) -> UpdateStatusResult:
    result = await repo.update_status(order_id, body.get("status"))
    return UpdateStatusResult.from_pymongo(result)


@router.delete(
    "/{order_id}",
    response_model=DeleteOrderResult,
    summary="Delete order",
    description="""
    Delete an order owned by the caller. An unknown id is an unhandled server
    error rather than a 404.
    """,
)
async def delete_order(
    order_id: str,
    decoded: DecodedToken = Depends(verify_jwt),
    repo: OrderRepository = Depends(get_order_repository),
) -> DeleteOrderResult:
    order = await repo.get_order(order_id)
    if order is None:
        raise OrderNotFoundError(order_id)

    ensure_owner(decoded, order.get("email"), "delete")
    result = await repo.delete_order(order_id)
    return DeleteOrderResult.from_pymongo(result)
