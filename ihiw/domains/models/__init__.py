# ihiw/domains/models/__init__.py

"""
모든 도메인의 SQLModel 모델을 한 곳에서 임포트하여
SQLModel.metadata가 모든 테이블과 관계를 인식하도록 보장합니다.
"""

# usr (User, LabProfile)
from ihiw.domains.usr.models import User, LabProfile, Authority  # noqa: F401

# lab (Lab, Project, ProjectLab, Upload)
from ihiw.domains.lab.models import Lab, Project, ProjectLab, Upload, UploadType  # noqa: F401
