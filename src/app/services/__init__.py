"""
Application Services.

역할:
- workflow: 파일 선택 → 업로드 → 필드 편집 → 생성 → 다운로드 상태 머신
- sessions: 브라우저 세션별 워크플로 보관
"""

from .sessions import WorkflowRegistry
from .workflow import WorkflowController

__all__ = [
    "WorkflowController",
    "WorkflowRegistry",
]
