# ihiw/domains/usr/permissions.py

"""
계정 관리 권한 판단 함수 모음입니다.

모두 호출자의 역할 목록과 실험실 ID만 받는 순수 함수이므로 DB나 요청 없이 검증할 수 있습니다.
"""

from enum import Enum
from typing import Iterable, List, Optional

from .models import Authority


class ListingScope(str, Enum):
    ALL = "all"    # 모든 계정
    LAB = "lab"    # 호출자와 같은 실험실 계정
    NONE = "none"  # 빈 목록


def _tags(authorities: Optional[Iterable]) -> set:
    return {a.value if isinstance(a, Authority) else a for a in (authorities or [])}


def is_admin(authorities: Optional[Iterable]) -> bool:
    return Authority.ADMIN.value in _tags(authorities)


def is_pi(authorities: Optional[Iterable]) -> bool:
    return Authority.PI.value in _tags(authorities)


def can_manage_account(
    caller_authorities: Optional[Iterable],
    caller_lab_id: Optional[int],
    target_lab_id: Optional[int],
) -> bool:
    """
    관리자이거나, 대상과 같은 실험실에 속한 PI이면 True.
    실험실이 없는 PI는 어떤 계정도 관리할 수 없습니다.
    """
    if is_admin(caller_authorities):
        return True
    return is_pi(caller_authorities) and caller_lab_id is not None and caller_lab_id == target_lab_id


def listing_scope(caller_authorities: Optional[Iterable], caller_lab_id: Optional[int]) -> ListingScope:
    if is_admin(caller_authorities):
        return ListingScope.ALL
    if is_pi(caller_authorities) and caller_lab_id is not None:
        return ListingScope.LAB
    return ListingScope.NONE


def resolve_authorities(
    caller_authorities: Optional[Iterable],
    requested: Optional[Iterable],
    existing: Optional[Iterable],
) -> List[str]:
    """
    수정 후 대상 계정이 가질 역할 목록을 결정합니다.
    관리자가 값을 보낸 경우에만 요청 값을 따르고, 그 외에는 기존 값을 유지합니다.
    """
    if is_admin(caller_authorities) and requested:
        return sorted(_tags(requested))
    return list(existing or [])
