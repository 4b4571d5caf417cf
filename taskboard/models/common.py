"""Shared pydantic building blocks: camelCase models, ids, envelope, pagination."""

import math
from typing import Annotated, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, StringConstraints
from pydantic.alias_generators import to_camel

# ULID: 26 chars of Crockford base32
ID_PATTERN = r"^[0-9A-HJKMNP-TV-Z]{26}$"

EntityId = Annotated[str, StringConstraints(pattern=ID_PATTERN)]

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100

DataT = TypeVar("DataT")


class CamelModel(BaseModel):
    """Base model exposing snake_case fields as camelCase JSON keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ApiResponse(BaseModel, Generic[DataT]):
    """Envelope shared by every endpoint."""

    success: bool = True
    message: str | None = None
    data: DataT | None = None


class Pagination(BaseModel):
    """Page metadata returned next to list results."""

    current: int
    pages: int
    total: int
    limit: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        return cls(current=page, pages=math.ceil(total / limit), total=total, limit=limit)


class PageParams(BaseModel):
    """Validated page/limit pair."""

    page: int = Field(1, ge=1)
    limit: int = Field(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit
