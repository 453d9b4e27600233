"""分页参数解析与分页信息（列表接口共用）。"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from .errors import InvalidArgument

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 48  # 前端一屏 8x6
MIN_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


def clamp_int(value: int, *, lo: int, hi: int) -> int:
    """把整数夹在 [lo, hi] 之间。"""
    return max(lo, min(int(value), hi))


def _parse_positive(value: Any, default: int) -> int:
    if value is None or value == "":
        return default
    try:
        number = int(str(value).strip())
    except ValueError:
        raise InvalidArgument("无效的分页参数") from None
    if number < 1:
        raise InvalidArgument("无效的分页参数")
    return number


def parse_page_params(page: Any, page_size: Any, *, clamp: bool = False) -> tuple[int, int]:
    """解析 page/pageSize：缺省取默认值；非整数或 < 1 抛 InvalidArgument。

    clamp=True 时 pageSize 夹到 [10, 100]（大陆/HD 列表使用，日本列表不夹）。
    """
    page = _parse_positive(page, DEFAULT_PAGE)
    page_size = _parse_positive(page_size, DEFAULT_PAGE_SIZE)
    if clamp:
        page_size = clamp_int(page_size, lo=MIN_PAGE_SIZE, hi=MAX_PAGE_SIZE)
    return page, page_size


@dataclass(frozen=True)
class PageInfo:
    page: int
    page_size: int
    total_items: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_items / self.page_size)

    def to_dict(self) -> dict:
        total_pages = self.total_pages
        return {
            "currentPage": self.page,
            "pageSize": self.page_size,
            "totalItems": self.total_items,
            "totalPages": total_pages,
            "hasNextPage": self.page < total_pages,
            "hasPrevPage": self.page > 1,
        }
