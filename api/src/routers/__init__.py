"""API routers for tokens, services and orders."""
