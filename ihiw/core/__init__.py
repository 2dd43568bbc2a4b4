# ihiw/core/__init__.py

"""
애플리케이션의 핵심 구성 요소 패키지입니다.

- `config.py`: 애플리케이션 설정 및 환경 변수 관리 (Pydantic Settings).
- `database.py`: 데이터베이스 엔진, 세션 관리 (SQLModel 및 AsyncSQLAlchemy).
- `security.py`: 비밀번호 해싱, JWT 발급/검증, 역할 기반 의존성.
- `dependencies.py`: 라우터에서 공통으로 사용하는 의존성 함수.
- `crud_base.py`: 공통 비동기 CRUD 기본 클래스.
- `errors.py`: 사용자에게 노출되는 오류(HTTPException) 정의.
- `pagination.py`: 페이지 요청 해석 및 페이징 응답 헤더 생성.
- `logging_config.py`: 로깅 초기화.
- `tasks.py`: ARQ 워커의 주기 작업 (데이터베이스 헬스 체크).
"""

__title__ = "IHIW Core"
__version__ = "0.1.0"
__all__ = []
