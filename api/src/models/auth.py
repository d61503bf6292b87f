"""
Pydantic models for access tokens and error bodies.
"""

from typing import Any, Dict

from pydantic import BaseModel, Field

# Token payloads are caller supplied and unvalidated, so the decoded identity
# stays an open mapping. Ownership checks read ``email`` from it.
DecodedToken = Dict[str, Any]


class TokenResponse(BaseModel):
    """Response of POST /jwt."""
    token: str = Field(..., description="Signed bearer token")


class MessageResponse(BaseModel):
    """Error body used for 401/403/500 responses."""
    message: str = Field(..., examples=["Unauthorized access"])
