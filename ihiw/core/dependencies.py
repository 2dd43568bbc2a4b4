# ihiw/core/dependencies.py

"""
FastAPI 의존성 주입(Dependency Injection) 모음입니다.

- 현재 인증된 사용자 (get_current_active_user, get_current_admin_user): security.py에서 재노출.
- 알림 디스패처 (get_notification_dispatcher): 앱 수명 주기에서 만든 ARQ Redis 풀을 사용합니다.

데이터베이스 세션은 ihiw.core.database.get_session을 직접 사용합니다.
"""

from fastapi import Request

# flake8: noqa
from ihiw.core.security import (
    create_access_token,
    get_current_active_user,
    get_current_admin_user,
)
from ihiw.services.notification import NotificationDispatcher


def get_notification_dispatcher(request: Request) -> NotificationDispatcher:
    """
    요청을 처리하는 앱의 ARQ Redis 풀로 알림 디스패처를 만듭니다.
    풀이 없으면(워커 미기동, 테스트 등) 디스패처는 경고만 남기고 발송을 건너뜁니다.
    """
    return NotificationDispatcher(getattr(request.app.state, "redis", None))
