# tests/__init__.py

"""
IHIW 관리 API의 테스트 스위트 패키지입니다.

- `domains/`: 도메인별(usr, lab) API 통합 테스트.
- `conftest.py`: 테스트 DB 세션, 역할별 사용자/실험실, 인증 클라이언트, 알림 큐 대역 픽스처.
- 루트의 `test_*.py`: 권한 함수, 페이징, 알림/메일, CLI 단위 테스트.
"""

__title__ = "IHIW API Tests"
__version__ = "0.1.0"
__all__ = []
