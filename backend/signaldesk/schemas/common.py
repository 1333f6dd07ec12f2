from enum import Enum
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """
    Base for every payload exchanged with the frontend.

    Attributes are snake_case in Python and camelCase on the wire.
    """

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class DataSource(str, Enum):
    """Where the data of a service call came from."""

    BACKEND = "backend"
    MOCK = "mock"
    # A backend is configured but the call failed, so mock data was served.
    DEGRADED = "degraded"


class PaginatedResponse(CamelModel, Generic[T]):
    data: list[T]
    total: int
    page: int
    limit: int
    has_more: bool


class ServiceResult(BaseModel, Generic[T]):
    """
    Outcome of a service call that may have been served by the mock fallback.

    Hard failures are not represented here: they are raised as exceptions.
    """

    data: T
    source: DataSource
    error: Optional[str] = None

    @property
    def degraded(self) -> bool:
        return self.source is DataSource.DEGRADED
