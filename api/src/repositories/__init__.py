"""MongoDB repositories for the services and orders collections."""

from api.src.repositories.order_repo import OrderRepository
from api.src.repositories.service_repo import ServiceRepository

__all__ = ["OrderRepository", "ServiceRepository"]
