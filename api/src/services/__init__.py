"""Business logic services.

This package contains service classes that implement logic shared by the
API endpoints, such as access token handling.
"""
