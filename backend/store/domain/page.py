"""
Page Domain Model

One page of a sorted, paginated result plus the metadata needed to
navigate the rest of it.

Author: TM3
Date: 2025-10-17
"""
import math
from enum import Enum
from typing import Generic, List, TypeVar

from pydantic import BaseModel, Field, ConfigDict

T = TypeVar('T')


class SortOrder(str, Enum):
    """Sort direction; anything other than 'desc' (any case) sorts ascending"""
    ASC = "asc"
    DESC = "desc"

    @classmethod
    def parse(cls, value) -> "SortOrder":
        if isinstance(value, str) and value.strip().lower() == "desc":
            return cls.DESC
        return cls.ASC

    @property
    def sql(self) -> str:
        return "DESC" if self is SortOrder.DESC else "ASC"


class Page(BaseModel, Generic[T]):
    """
    Page of results (page numbers are 0-based)

    Fields:
        content: Items on this page
        page: Page number requested
        size: Page size requested
        total_elements: Items across all pages
        sort_by: Sort field requested
        sort_order: Sort direction requested, as given by the caller

    Derived:
        total_pages = ceil(total_elements / size)
        first / last / has_next / has_previous
    """

    content: List[T] = Field(default_factory=list, description="Items on this page")
    page: int = Field(..., description="0-based page number", ge=0)
    size: int = Field(..., description="Page size", ge=1)
    total_elements: int = Field(..., description="Total items across pages", ge=0)
    sort_by: str = Field("id", description="Sort field")
    sort_order: str = Field("asc", description="Sort direction")

    model_config = ConfigDict(from_attributes=True)

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_elements / self.size)

    @property
    def number_of_elements(self) -> int:
        return len(self.content)

    @property
    def first(self) -> bool:
        return self.page == 0

    @property
    def has_next(self) -> bool:
        return self.page + 1 < self.total_pages

    @property
    def last(self) -> bool:
        return not self.has_next

    @property
    def has_previous(self) -> bool:
        return self.page > 0

    def to_dict(self) -> dict:
        """
        Convert to dictionary with the derived navigation flags
        """
        data = self.model_dump()

        data['total_pages'] = self.total_pages
        data['first'] = self.first
        data['last'] = self.last
        data['has_next'] = self.has_next
        data['has_previous'] = self.has_previous

        return data
