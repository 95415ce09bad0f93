"""User Schemas — request bodies, the UserRecord payload and response envelopes.

Invariants:
    - UserCreate/UserUpdate accept any subset of the four fields; absent keys stay unset
    - Unknown keys (including id, createdAt, updatedAt) are ignored
    - UserRecord.id is the store id rendered as a string
    - Every response body is an envelope with success and message
"""

from datetime import datetime, timezone
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore",
    )


class UserCreate(_CamelModel):
    """POST /users body. Rules are checked by the repository, not here."""
    name: str | None = None
    address: str | None = None
    phone_number: str | None = None
    company_name: str | None = None

    def to_fields(self) -> dict[str, Any]:
        """Supplied fields keyed by wire name."""
        return self.model_dump(by_alias=True, exclude_unset=True)


class UserUpdate(UserCreate):
    """PUT /users/{id} body — any subset of the four fields."""


class UserRecord(_CamelModel):
    """One stored user, as returned by the API."""
    id: str
    name: str
    address: str
    phone_number: str
    company_name: str
    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "UserRecord":
        """Build from a raw store document (keyed by wire names, id under _id)."""
        return cls(
            id=str(doc["_id"]),
            name=doc["name"],
            address=doc["address"],
            phone_number=doc["phoneNumber"],
            company_name=doc["companyName"],
            created_at=doc["createdAt"],
            updated_at=doc["updatedAt"],
        )

    def business_fields(self) -> dict[str, str]:
        return self.model_dump(
            by_alias=True, include={"name", "address", "phone_number", "company_name"},
        )


class UserEnvelope(BaseModel):
    success: bool = True
    message: str
    data: UserRecord


class UserListEnvelope(BaseModel):
    success: bool = True
    message: str
    count: int
    data: list[UserRecord]


class MessageEnvelope(BaseModel):
    success: bool = True
    message: str
