"""
Write result descriptors returned by the order endpoints.

Field names follow the MongoDB driver result documents the storefront reads
(``insertedId``, ``modifiedCount``, ...).
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pymongo.results import DeleteResult, InsertOneResult, UpdateResult


class _ResultModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    acknowledged: bool = True


class InsertResult(_ResultModel):
    """Outcome of inserting one order."""
    inserted_id: str = Field(..., alias="insertedId")

    @classmethod
    def from_pymongo(cls, result: InsertOneResult) -> "InsertResult":
        return cls(acknowledged=result.acknowledged, inserted_id=str(result.inserted_id))


class UpdateStatusResult(_ResultModel):
    """Outcome of updating one order's status."""
    matched_count: int = Field(0, alias="matchedCount")
    modified_count: int = Field(0, alias="modifiedCount")
    upserted_count: int = Field(0, alias="upsertedCount")
    upserted_id: Optional[str] = Field(None, alias="upsertedId")

    @classmethod
    def from_pymongo(cls, result: UpdateResult) -> "UpdateStatusResult":
        upserted_id = result.upserted_id
        return cls(
            acknowledged=result.acknowledged,
            matched_count=result.matched_count,
            modified_count=result.modified_count,
            upserted_count=1 if upserted_id is not None else 0,
            upserted_id=str(upserted_id) if upserted_id is not None else None,
        )


class DeleteOrderResult(_ResultModel):
    """Outcome of deleting one order."""
    deleted_count: int = Field(0, alias="deletedCount")

    @classmethod
    def from_pymongo(cls, result: DeleteResult) -> "DeleteOrderResult":
        return cls(acknowledged=result.acknowledged, deleted_count=result.deleted_count)
