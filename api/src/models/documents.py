"""
Conversion of raw MongoDB documents into JSON-compatible values.

Documents are passed through as stored; only BSON-specific types are mapped
(ObjectId -> hex string, datetimes -> ISO strings by FastAPI's encoder).
"""

from typing import Any, Dict, List, Optional

from bson import ObjectId
from fastapi.encoders import jsonable_encoder

Document = Dict[str, Any]

BSON_ENCODERS = {ObjectId: str}


def serialize_document(document: Optional[Document]) -> Optional[Document]:
    """Render one document for a JSON response; ``None`` stays ``None``."""
    if document is None:
        return None
    return jsonable_encoder(document, custom_encoder=BSON_ENCODERS)


def serialize_documents(documents: List[Document]) -> List[Document]:
    """Render a list of documents for a JSON response."""
    return [serialize_document(document) for document in documents]
