"""Wire schemas shared by every router.

Payloads use camelCase on the wire (``availableSeats``, ``insertedId``) and
snake_case in Python; ``populate_by_name`` lets either form through on input.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class InsertResult(ApiModel):
    acknowledged: bool = True
    inserted_id: int | None = None


class UpdateResult(ApiModel):
    acknowledged: bool = True
    matched_count: int = 0
    modified_count: int = 0
    upserted_id: int | None = None


class DeleteResult(ApiModel):
    acknowledged: bool = True
    deleted_count: int = 0


class MessageResult(InsertResult):
    message: str | None = None
