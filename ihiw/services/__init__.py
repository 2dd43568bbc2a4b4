# ihiw/services/__init__.py

"""
도메인을 가로지르는 서비스 계층 패키지입니다.

- `notification.py`: 요청 처리 중 메일 발송 작업을 ARQ 큐에 넣는 알림 디스패처 (fire-and-forget).
- `mail_service.py`: ARQ 워커에서 템플릿을 렌더링하고 SMTP로 메일을 발송하는 서비스.
- `mail_templates.py`: 메일 본문 템플릿과 언어별 제목 메시지.
"""

__title__ = "IHIW Services"
__version__ = "0.1.0"
__all__ = []
