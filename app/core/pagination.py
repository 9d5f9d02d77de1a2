# app/core/pagination.py
import math

from fastapi import Query


class PageParams:
    """
    `?page=&limit=` query dependency used by the paginated listings.
    """

    def __init__(
        self,
        page: int = Query(1, ge=1),
        limit: int = Query(10, ge=1, le=100),
    ):
        self.page = page
        self.limit = limit

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


def page_count(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit else 0
