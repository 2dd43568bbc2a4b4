# tests/domains/__init__.py

"""
도메인별 API 통합 테스트 패키지입니다.

- `test_auth_n.py`: 토큰 발급과 현재 사용자 조회.
- `test_usr_n.py`: 계정 생성/수정/조회/삭제와 역할/실험실 범위 규칙.
- `test_account_n.py`: 활성화, 비밀번호 재설정, 계정 CRUD 수준 동작.
- `test_lab_n.py`: 실험실 목록, 프로젝트 조회, 실험실 구독.
"""

__title__ = "IHIW Domain Tests"
__version__ = "0.1.0"
__all__ = []
