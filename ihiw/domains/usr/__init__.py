# ihiw/domains/usr/__init__.py

"""
'usr' 도메인 패키지입니다.

사용자 계정(Account), 실험실 프로필(LabProfile), 인증, 그리고 역할/실험실 범위에 따른
사용자 관리 워크플로를 담당합니다.

주요 서브모듈:
- `models.py`: users, lab_profiles 테이블 SQLModel 정의와 권한(Authority) Enum.
- `schemas.py`: 요청/응답 DTO.
- `crud.py`: 계정 및 실험실 프로필 조회/저장 로직.
- `permissions.py`: 역할과 실험실을 입력으로 받는 순수 권한 판단 함수.
- `services.py`: 권한 검사, 중복 검사, 알림을 묶는 사용자 관리 서비스.
- `routers.py`: 인증, 계정, 사용자 관리 API 엔드포인트.
- `tasks.py`: ARQ 워커가 실행하는 메일 발송 태스크.
"""

__title__ = "IHIW User Domain"
__version__ = "0.1.0"
__all__ = []
