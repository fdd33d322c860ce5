"""
Shared pydantic building blocks for request/response shapes.

Every entity has three shapes:

* full   — server fields included, everything optional (responses, round-trips)
* create — server fields excluded, required fields enforced
* update — create fields, all optional; an explicit ``null`` is rejected so a
           partial update can never silently clear a column
"""

from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

ISO_DATE_PATTERN = r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$"

# Largest value an INTEGER primary key can hold
MAX_ID = 2**63 - 1

T = TypeVar("T")


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class PartialUpdateModel(CamelModel):
    """Base for update shapes. Omitted fields stay unset; ``null`` is invalid."""

    model_config = ConfigDict(extra="ignore")

    @field_validator("*", mode="before")
    @classmethod
    def reject_explicit_null(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("Field cannot be null")
        return value

    def changes(self) -> dict[str, Any]:
        """Only the fields the client actually sent, keyed by attribute name."""
        return self.model_dump(exclude_unset=True)


class DataResponse(BaseModel, Generic[T]):
    success: bool = True
    data: T


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class ValidationIssue(BaseModel):
    path: list[Any]
    message: str
    code: Optional[str] = None


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    message: Optional[str] = None
    details: Optional[list[ValidationIssue]] = None
