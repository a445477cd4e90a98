"""Base models for API payloads and responses.

Request payloads arrive in camelCase (``taskId``, ``startTime``) while
responses mirror the database columns in snake_case, the same shapes the
dashboard consumes. Money leaves the API as JSON numbers.
"""

from decimal import Decimal
from typing import Generic, List, TypeVar

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel
from typing_extensions import Annotated

Money = Annotated[
    Decimal, PlainSerializer(lambda v: float(v), return_type=float, when_used="json")
]


class BaseDataModel(BaseModel):
    """Base class for request payloads.

    - Field names are snake_case in Python and camelCase on the wire
    - Either spelling is accepted on input
    - Unknown fields are ignored so older dashboard builds keep working
    - Surrounding whitespace is stripped from strings

    Example:
        >>> class Example(BaseDataModel):
        ...     task_id: int
        >>> Example.model_validate({"taskId": 3}).task_id
        3
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
        validate_assignment=True,
    )


class ResponseModel(BaseModel):
    """Base class for responses built from ORM rows or plain dicts."""

    model_config = ConfigDict(from_attributes=True)


class Pagination(ResponseModel):
    total: int
    page: int
    limit: int
    total_pages: int = Field(serialization_alias="totalPages")


T = TypeVar("T")


class Page(ResponseModel, Generic[T]):
    """Paginated list envelope: ``{"data": [...], "pagination": {...}}``."""

    data: List[T]
    pagination: Pagination

    @classmethod
    def build(cls, items: List[T], total: int, page: int, limit: int) -> "Page[T]":
        total_pages = (total + limit - 1) // limit if limit else 0
        return cls(
            data=items,
            pagination=Pagination(
                total=total, page=page, limit=limit, total_pages=total_pages
            ),
        )


class MessageResponse(ResponseModel):
    message: str
