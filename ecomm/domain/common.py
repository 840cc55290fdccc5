"""
Shared building blocks for domain models

All API payloads use camelCase on the wire. Money values are Decimals
internally and plain JSON numbers on the wire.
"""
from decimal import Decimal
from typing import Annotated, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel

T = TypeVar("T")

Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class CamelModel(BaseModel):
    """Base model: camelCase aliases, snake_case accepted, ORM-friendly"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Address(CamelModel):
    street: str = ""
    city: str = ""
    state: str = ""
    postal_code: str = ""
    country: str = ""


class PagedResponse(CamelModel, Generic[T]):
    """Page of results for admin list endpoints"""
    data: List[T] = []
    total: int = 0
    page: int = 1
    limit: int = 20


class UploadResponse(CamelModel):
    urls: List[str] = []
    errors: Optional[List[str]] = None
