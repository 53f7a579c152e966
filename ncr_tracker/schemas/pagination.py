from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, computed_field

T = TypeVar("T")


class PageRequest(BaseModel):
    page: int = 1
    limit: int = 10
    filters: dict[str, str | None] = Field(default_factory=dict)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class Page(BaseModel, Generic[T]):
    """One slice of an ordered listing plus where it sits in the full result.

    ``total_pages``, ``has_next`` and ``has_prev`` are derived from the stored
    fields and cannot be set by callers.
    """

    model_config = ConfigDict(frozen=True)

    data: list[T]
    total: int
    page: int
    limit: int

    @computed_field
    @property
    def total_pages(self) -> int:
        if self.limit <= 0 or self.total <= 0:
            return 0
        return (self.total + self.limit - 1) // self.limit

    @computed_field
    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @computed_field
    @property
    def has_prev(self) -> bool:
        return self.page > 1
