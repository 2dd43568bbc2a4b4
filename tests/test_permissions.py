# tests/test_permissions.py

"""
계정 관리 권한 판단 함수에 대한 단위 테스트 모듈입니다.
"""

from ihiw.domains.usr import permissions
from ihiw.domains.usr.models import Authority

ADMIN = [Authority.ADMIN.value, Authority.USER.value]
PI = [Authority.PI.value, Authority.USER.value]
USER = [Authority.USER.value]


def test_admin_can_manage_anyone():
    assert permissions.can_manage_account(ADMIN, None, None)
    assert permissions.can_manage_account(ADMIN, None, 7)
    assert permissions.can_manage_account([Authority.ADMIN], 1, 2)


def test_pi_can_manage_only_own_lab():
    assert permissions.can_manage_account(PI, 3, 3)
    assert not permissions.can_manage_account(PI, 3, 4)
    assert not permissions.can_manage_account(PI, 3, None)


def test_pi_without_lab_cannot_manage_lab_less_account():
    assert not permissions.can_manage_account(PI, None, None)


def test_plain_user_cannot_manage():
    assert not permissions.can_manage_account(USER, 3, 3)
    assert not permissions.can_manage_account([], 3, 3)
    assert not permissions.can_manage_account(None, 3, 3)


def test_listing_scope():
    assert permissions.listing_scope(ADMIN, None) is permissions.ListingScope.ALL
    assert permissions.listing_scope(PI, 5) is permissions.ListingScope.LAB
    assert permissions.listing_scope(PI, None) is permissions.ListingScope.NONE
    assert permissions.listing_scope(USER, 5) is permissions.ListingScope.NONE


def test_resolve_authorities_admin_may_change():
    assert permissions.resolve_authorities(ADMIN, ["ROLE_USER", "ROLE_PI"], USER) == ["ROLE_PI", "ROLE_USER"]
    assert permissions.resolve_authorities(ADMIN, [Authority.PI, Authority.PI], USER) == ["ROLE_PI"]


def test_resolve_authorities_admin_omitting_keeps_existing():
    assert permissions.resolve_authorities(ADMIN, None, PI) == PI


def test_resolve_authorities_non_admin_request_is_discarded():
    assert permissions.resolve_authorities(PI, ["ROLE_ADMIN"], USER) == USER
    assert permissions.resolve_authorities(USER, ["ROLE_ADMIN"], USER) == USER
