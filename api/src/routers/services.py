"""
Service catalog router.

Public, read-only endpoints over the ``services`` collection.
"""

from typing import Any, Dict, List, Optional
from fastapi import APIRouter, Depends, Query

from api.src.dependencies import get_service_repository
from api.src.models.documents import serialize_document, serialize_documents
from api.src.repositories.service_repo import ServiceRepository

router = APIRouter(prefix="/services", tags=["Services"])


@router.get(
    "",
    summary="List services",
    description="""
    List services, full-text filtered by ``search`` when given, sorted by
    price ascending for ``order=asc`` and descending otherwise.
    """,
)
async def list_services(
    search: Optional[str] = Query(default=""),
    order: Optional[str] = Query(default=None),
    repo: ServiceRepository = Depends(get_service_repository),
) -> List[Dict[str, Any]]:
    services = await repo.list_services(search=search, order=order)
    return serialize_documents(services)


@router.get(
    "/{service_id}",
    summary="Get service",
    description="""
    Fetch one service by id. Responds ``null`` with status 200 when no service
    matches; a malformed id is an unhandled server error.
    """,
)
async def get_service(
    service_id: str,
    repo: ServiceRepository = Depends(get_service_repository),
) -> Optional[Dict[str, Any]]:
    service = await repo.get_service(service_id)
    return serialize_document(service)
