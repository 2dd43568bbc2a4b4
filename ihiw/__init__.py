# ihiw/__init__.py

"""
IHIW 관리 FastAPI 애플리케이션의 메인 패키지입니다.

이 패키지는 실험실(Lab), 프로젝트(Project), 업로드(Upload) 및 사용자 계정 관리를 위한
API 백엔드를 포함합니다.

- `core`: 설정, 데이터베이스 연결, 보안, 페이징, 오류 정의 등 공통 구성 요소.
- `domains`: 비즈니스 도메인별 (usr, lab) 모델, 스키마, CRUD, 라우터.
- `services`: 메일 발송 및 알림 디스패처 등 도메인을 가로지르는 서비스.
"""

APP_NAME = "IHIW Management API"
APP_VERSION = "0.1.0"
API_PREFIX = "/api/v1"  # API 라우트의 공통 접두사 (main.py에서 적용)

# 응답 헤더에 사용되는 클라이언트 애플리케이션 이름 (X-ihiwApp-alert 등)
CLIENT_APP_NAME = "ihiwApp"

__version__ = APP_VERSION
__title__ = APP_NAME
__description__ = "IHIW management API backend."
__license__ = "MIT"
__all__ = []
