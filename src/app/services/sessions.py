"""
Workflow Registry: 브라우저 세션 ID → WorkflowController.

- 세션마다 독립된 컨트롤러 (전역 싱글턴 없음)
- Provider는 세션 간 공유 (HTTP 커넥션 풀)
- 최대 세션 수 초과 시 가장 오래된 세션부터 제거
"""

import logging
from collections import OrderedDict
from pathlib import Path

from src.app.providers.base import TemplateServiceProvider
from src.app.services.workflow import WorkflowController
from src.core.ids import generate_session_id, is_session_id
from src.domain.constants import (
    DEFAULT_GENERATE_TIMEOUT,
    DEFAULT_MAX_SESSIONS,
    DEFAULT_UPLOAD_TIMEOUT,
)
from src.domain.errors import ErrorCodes, WorkflowError

logger = logging.getLogger(__name__)


class WorkflowRegistry:
    """세션별 WorkflowController 관리."""

    def __init__(
        self,
        provider: TemplateServiceProvider,
        max_sessions: int = DEFAULT_MAX_SESSIONS,
        upload_timeout: float | None = DEFAULT_UPLOAD_TIMEOUT,
        generate_timeout: float | None = DEFAULT_GENERATE_TIMEOUT,
        logs_dir: Path | None = None,
    ):
        """
        Args:
            provider: 공유 템플릿 서비스 Provider
            max_sessions: 동시 보관 세션 상한
            upload_timeout: 컨트롤러 업로드 타임아웃(초)
            generate_timeout: 컨트롤러 생성 타임아웃(초)
            logs_dir: run log 저장 루트 (세션별 하위 디렉터리)
        """
        self.provider = provider
        self.max_sessions = max_sessions
        self.upload_timeout = upload_timeout
        self.generate_timeout = generate_timeout
        self.logs_dir = logs_dir
        self._workflows: OrderedDict[str, WorkflowController] = OrderedDict()

    def create(self) -> tuple[str, WorkflowController]:
        """새 세션 생성."""
        session_id = generate_session_id()
        controller = WorkflowController(
            self.provider,
            upload_timeout=self.upload_timeout,
            generate_timeout=self.generate_timeout,
            logs_dir=self.logs_dir / session_id if self.logs_dir else None,
        )
        self._workflows[session_id] = controller
        self._evict()
        return session_id, controller

    def get(self, session_id: str) -> WorkflowController:
        """
        세션 조회.

        Raises:
            WorkflowError: SESSION_NOT_FOUND
        """
        if not is_session_id(session_id) or session_id not in self._workflows:
            raise WorkflowError(ErrorCodes.SESSION_NOT_FOUND, session_id=session_id)
        self._workflows.move_to_end(session_id)
        return self._workflows[session_id]

    def discard(self, session_id: str) -> None:
        self._workflows.pop(session_id, None)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._workflows

    def __len__(self) -> int:
        return len(self._workflows)

    def _evict(self) -> None:
        while len(self._workflows) > self.max_sessions:
            # busy 세션은 건너뛰지 않는다: 상한이 우선
            session_id, _ = self._workflows.popitem(last=False)
            logger.info(f"Workflow session evicted: {session_id}")
