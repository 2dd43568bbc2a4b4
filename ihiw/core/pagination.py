# ihiw/core/pagination.py

"""
목록 조회의 페이지 요청 해석과 페이징 응답 헤더 생성을 담당하는 모듈입니다.

- `page`와 `size`가 모두 주어질 때만 페이징하며, 그렇지 않으면 전체 목록(unpaged)을 반환합니다.
- `sort`는 "필드,방향" 형식입니다. (예: "login,desc")
- 응답에는 항상 `X-Total-Count`가, 페이징된 경우 `Link` 헤더가 추가됩니다.
"""

import math
from dataclasses import dataclass
from typing import Dict, Generic, List, Optional, TypeVar

from starlette.datastructures import URL

from ihiw.core.errors import ValidationError

T = TypeVar("T")

DEFAULT_SORT = "id,asc"


@dataclass(frozen=True)
class PageRequest:
    page: int
    size: int
    sort_field: str = "id"
    descending: bool = False

    @property
    def offset(self) -> int:
        return self.page * self.size

    @classmethod
    def from_query(
        cls, page: Optional[int], size: Optional[int], sort: Optional[str] = None
    ) -> Optional["PageRequest"]:
        """
        쿼리 파라미터로부터 페이지 요청을 만듭니다. page/size 중 하나라도 없으면 None(unpaged).
        `sort` 형식은 페이징 여부와 관계없이 검사합니다.
        """
        sort_field, descending = parse_sort(sort or DEFAULT_SORT)
        if page is None or size is None:
            return None
        return cls(page=page, size=size, sort_field=sort_field, descending=descending)


def parse_sort(sort: str) -> tuple:
    parts = [p.strip() for p in sort.split(",")]
    sort_field = parts[0]
    direction = parts[1].lower() if len(parts) > 1 and parts[1] else "asc"
    if not sort_field or direction not in ("asc", "desc"):
        raise ValidationError(f"Invalid sort parameter: {sort}", entity_name="pagination", error_key="sortinvalid")
    return sort_field, direction == "desc"


@dataclass
class Page(Generic[T]):
    content: List[T]
    total: int
    request: Optional[PageRequest] = None

    @property
    def total_pages(self) -> int:
        if self.request is None:
            return 1
        return max(1, math.ceil(self.total / self.request.size))

    @classmethod
    def empty(cls, request: Optional[PageRequest] = None) -> "Page[T]":
        return cls(content=[], total=0, request=request)


def _page_link(url: URL, page: int, size: int, rel: str) -> str:
    return f'<{url.include_query_params(page=page, size=size)}>; rel="{rel}"'


def generate_pagination_headers(url: URL, page: Page) -> Dict[str, str]:
    """
    `X-Total-Count`와 `Link`(next/prev/last/first) 헤더를 생성합니다.
    """
    headers = {"X-Total-Count": str(page.total)}
    request = page.request
    if request is None:
        return headers

    links = []
    last_page = page.total_pages - 1
    if request.page < last_page:
        links.append(_page_link(url, request.page + 1, request.size, "next"))
    if request.page > 0:
        links.append(_page_link(url, request.page - 1, request.size, "prev"))
    links.append(_page_link(url, last_page, request.size, "last"))
    links.append(_page_link(url, 0, request.size, "first"))
    headers["Link"] = ",".join(links)
    return headers
