# ihiw/domains/lab/__init__.py

"""
'lab' 도메인 패키지입니다.

실험실(Lab), 실험실을 묶는 프로젝트(Project), 실험실이 제출하는 타이핑 데이터 파일
업로드(Upload) 기록을 관리합니다.
"""

__title__ = "IHIW Lab Domain"
__version__ = "0.1.0"
__all__ = []
