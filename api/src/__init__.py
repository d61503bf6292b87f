"""FastAPI service for the Delta Car storefront.

This package provides REST API endpoints for browsing car services, managing
customer orders and issuing access tokens, backed by MongoDB.
"""

__version__ = "1.0.0"
