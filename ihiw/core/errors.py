# ihiw/core/errors.py

"""
클라이언트에게 구분되는 결과로 노출되는 오류 정의 모듈입니다.

모든 오류는 FastAPI의 HTTPException을 상속하므로 CRUD/서비스 계층에서 그대로 raise하면
별도 핸들러 없이 응답으로 변환됩니다. 클라이언트는 `X-ihiwApp-error` 헤더의 키로
오류 종류를 구분합니다.
"""

from typing import Optional

from fastapi import HTTPException, status

from ihiw import CLIENT_APP_NAME


def alert_headers(message_key: str, param: str) -> dict:
    """성공한 변경 작업에 붙이는 알림 헤더를 만듭니다."""
    return {
        f"X-{CLIENT_APP_NAME}-alert": message_key,
        f"X-{CLIENT_APP_NAME}-params": param,
    }


def failure_headers(entity_name: str, error_key: str) -> dict:
    """실패 응답에 붙이는 오류 헤더를 만듭니다."""
    return {
        f"X-{CLIENT_APP_NAME}-error": f"error.{error_key}",
        f"X-{CLIENT_APP_NAME}-params": entity_name,
    }


class BadRequestAlertError(HTTPException):
    """오류 키와 엔티티 이름을 함께 전달하는 400 오류의 기본 클래스입니다."""

    def __init__(self, detail: str, entity_name: str, error_key: str,
                 status_code: int = status.HTTP_400_BAD_REQUEST):
        super().__init__(
            status_code=status_code,
            detail=detail,
            headers=failure_headers(entity_name, error_key),
        )
        self.entity_name = entity_name
        self.error_key = error_key


class ValidationError(BadRequestAlertError):
    """입력이 잘못되었거나 모순되는 경우 (예: 생성 요청에 id가 포함됨)"""

    def __init__(self, detail: str, entity_name: str = "userManagement", error_key: str = "idexists"):
        super().__init__(detail, entity_name, error_key)


class LoginConflictError(BadRequestAlertError):
    def __init__(self):
        super().__init__("Login name already used!", "userManagement", "userexists")


class EmailConflictError(BadRequestAlertError):
    def __init__(self):
        super().__init__("Email is already in use!", "userManagement", "emailexists")


class ForbiddenError(BadRequestAlertError):
    """권한 부족. 상태 변경 없이 400으로 응답합니다."""

    def __init__(self, detail: str = "Not allowed to modify this account", entity_name: str = "USER"):
        super().__init__(detail, entity_name, "forbidden")


class NotFoundError(HTTPException):
    def __init__(self, detail: Optional[str] = None):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail or "Not found")
