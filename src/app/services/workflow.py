"""
Workflow Controller: 템플릿 채우기 상태 머신.

흐름:
    파일 선택 → (upload) → TemplateSession + FieldMap
              → (필드 편집) → (generate) → GenerationResult → (다운로드 소비)

규칙:
- 상태 전진은 컨트롤러만 수행 (렌더링 계층은 snapshot 구독만)
- busy는 유일한 상호배제 수단: 작업 시작 시 설정, 성공/실패 무관하게 해제
- 업로드/생성 실패는 예외 대신 status.error에 기록하고 직전 안정 상태로 복귀
- 자동 재시도 없음 (재시도는 사용자가 새로 시작하는 액션)
- 응답 없는 요청은 타임아웃으로 실패 처리 (busy 영구 점유 방지)
"""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import replace
from pathlib import Path
from typing import Any

from src.app.providers.base import ProviderError, TemplateServiceProvider
from src.core.fields import FieldMap
from src.core.logging import complete_run_log, create_run_log, emit_warning, save_run_log
from src.core.selection import SelectionStore
from src.domain.constants import (
    DEFAULT_GENERATE_TIMEOUT,
    DEFAULT_UPLOAD_TIMEOUT,
    GENERATION_FAILED_MESSAGE,
    UPLOAD_FAILED_MESSAGE,
)
from src.domain.errors import ErrorCodes, WorkflowError
from src.domain.schemas import (
    GenerationResult,
    Operation,
    RunLog,
    SourceFile,
    TemplateSession,
    WorkflowFailure,
    WorkflowSnapshot,
    WorkflowState,
    WorkflowStatus,
)

logger = logging.getLogger(__name__)

Listener = Callable[[WorkflowSnapshot], None]

# 작업별 실패 코드/메시지
_FAILURES = {
    Operation.UPLOAD: (ErrorCodes.UPLOAD_FAILED, UPLOAD_FAILED_MESSAGE),
    Operation.GENERATE: (ErrorCodes.GENERATION_FAILED, GENERATION_FAILED_MESSAGE),
}


class WorkflowController:
    """
    단일 워크플로 인스턴스.

    모든 엔티티(SourceFile, TemplateSession, FieldMap, GenerationResult,
    WorkflowStatus)를 독점 소유한다. 모듈 전역 상태 없음:
    인스턴스마다 독립된 워크플로.

    Usage:
        controller = WorkflowController(HttpTemplateService())
        controller.select_file(SourceFile(pdf_bytes, "invoice.pdf"))
        await controller.upload()
        controller.set_field("name", "Alice")
        if controller.can_generate:
            await controller.generate()
        url = controller.consume_download()
    """

    HISTORY_LIMIT = 100

    def __init__(
        self,
        provider: TemplateServiceProvider,
        upload_timeout: float | None = DEFAULT_UPLOAD_TIMEOUT,
        generate_timeout: float | None = DEFAULT_GENERATE_TIMEOUT,
        logs_dir: Path | None = None,
    ):
        """
        Args:
            provider: 템플릿 서비스 Provider
            upload_timeout: 업로드 상한(초), None이면 무제한
            generate_timeout: 생성 상한(초), None이면 무제한
            logs_dir: run log 저장 디렉터리 (None이면 메모리에만 보관)
        """
        self.provider = provider
        self.upload_timeout = upload_timeout
        self.generate_timeout = generate_timeout
        self.logs_dir = logs_dir

        self._selection = SelectionStore()
        self._session: TemplateSession | None = None
        self._fields = FieldMap()
        self._result: GenerationResult | None = None
        self._status = WorkflowStatus()
        self._listeners: list[Listener] = []
        self.history: list[RunLog] = []

    # =========================================================================
    # Read Accessors (렌더링 계층용)
    # =========================================================================

    @property
    def source_file(self) -> SourceFile | None:
        return self._selection.current

    @property
    def session(self) -> TemplateSession | None:
        return self._session

    @property
    def placeholders(self) -> tuple[str, ...]:
        return self._session.placeholders if self._session else ()

    @property
    def fields(self) -> dict[str, str]:
        return self._fields.to_dict()

    @property
    def generation_result(self) -> GenerationResult | None:
        return self._result

    @property
    def status(self) -> WorkflowStatus:
        return replace(self._status)

    @property
    def state(self) -> WorkflowState:
        if self._status.busy:
            if self._status.operation is Operation.UPLOAD:
                return WorkflowState.UPLOADING
            return WorkflowState.GENERATING
        if self._selection.has_file:
            return WorkflowState.FILE_SELECTED
        if self._session is None:
            return WorkflowState.IDLE
        if self._result is not None:
            return WorkflowState.DOCUMENT_READY
        return WorkflowState.TEMPLATE_READY

    @property
    def can_upload(self) -> bool:
        return self._selection.has_file and not self._status.busy

    @property
    def can_generate(self) -> bool:
        return (
            self._session is not None
            and self._fields.is_complete()
            and not self._status.busy
        )

    def is_complete(self) -> bool:
        """모든 placeholder 값이 채워졌는지."""
        return self._fields.is_complete()

    def missing_fields(self) -> list[str]:
        return self._fields.missing()

    def snapshot(self) -> WorkflowSnapshot:
        """현재 상태의 읽기 전용 투영."""
        source = self._selection.current
        return WorkflowSnapshot(
            state=self.state,
            filename=source.filename if source else None,
            placeholders=self.placeholders,
            fields=self._fields.to_dict(),
            download_path=self._result.download_path if self._result else None,
            busy=self._status.busy,
            error=self._status.error,
            can_upload=self.can_upload,
            can_generate=self.can_generate,
            has_session=self._session is not None,
        )

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        상태 변경 구독.

        Returns:
            구독 해제 함수
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # =========================================================================
    # Actions
    # =========================================================================

    def select_file(self, file: SourceFile) -> None:
        """
        파일 선택.

        이전 선택을 교체하고 에러를 지운다. I/O 없음.
        기존 TemplateSession은 다음 업로드 성공 시까지 유지된다.
        """
        self._selection.select(file)
        self._status.error = None
        logger.info(f"File selected: {file.filename} ({file.size} bytes)")
        self._notify()

    async def upload(self) -> TemplateSession | None:
        """
        선택된 파일 업로드.

        Returns:
            성공 시 새 TemplateSession, 파일 없음/실패 시 None

        Raises:
            WorkflowError: WORKFLOW_BUSY
        """
        file = self._selection.current
        if file is None:
            return None
        self._ensure_not_busy(Operation.UPLOAD)

        run_log = create_run_log(Operation.UPLOAD.value, session_ref=file.filename)
        try:
            self._begin(Operation.UPLOAD)
            session = await asyncio.wait_for(
                self.provider.upload_template(file),
                timeout=self.upload_timeout,
            )
        except Exception as e:
            self._fail(Operation.UPLOAD, run_log, e)
            return None
        except asyncio.CancelledError:
            self._cancel(Operation.UPLOAD, run_log)
            raise
        else:
            self._apply_session(session, file, run_log)
            return session
        finally:
            self._end(run_log)

    def set_field(self, name: str, value: str) -> None:
        """
        placeholder 값 편집.

        Raises:
            WorkflowError: UNKNOWN_PLACEHOLDER
        """
        self._fields.set(name, value)
        self._notify()

    async def generate(self) -> GenerationResult | None:
        """
        현재 세션 + FieldMap으로 문서 생성.

        Returns:
            성공 시 GenerationResult, 실패 시 None

        Raises:
            WorkflowError: WORKFLOW_BUSY, GENERATE_NOT_AVAILABLE
        """
        self._ensure_not_busy(Operation.GENERATE)
        if not self.can_generate or self._session is None:
            raise WorkflowError(
                ErrorCodes.GENERATE_NOT_AVAILABLE,
                has_session=self._session is not None,
                missing=self._fields.missing(),
            )

        session = self._session
        payload = self._fields.to_dict()

        run_log = create_run_log(Operation.GENERATE.value, session_ref=session.file_path)
        try:
            self._begin(Operation.GENERATE)
            result = await asyncio.wait_for(
                self.provider.generate_document(session, payload),
                timeout=self.generate_timeout,
            )
        except Exception as e:
            self._fail(Operation.GENERATE, run_log, e)
            return None
        except asyncio.CancelledError:
            self._cancel(Operation.GENERATE, run_log)
            raise
        else:
            self._result = result
            complete_run_log(run_log, success=True)
            logger.info(f"Document ready: {result.download_path}")
            return result
        finally:
            self._end(run_log)

    def consume_download(self) -> str | None:
        """
        다운로드 시작 시 결과 소비.

        실제 전송 완료 여부와 무관하게 즉시 GenerationResult를 비운다.

        Returns:
            소비된 다운로드 참조 (없으면 None)
        """
        if self._result is None:
            return None

        download_path = self._result.download_path
        self._result = None
        logger.info(f"Download consumed: {download_path}")
        self._notify()
        return download_path

    # =========================================================================
    # Internals
    # =========================================================================

    def _ensure_not_busy(self, operation: Operation) -> None:
        if self._status.busy:
            raise WorkflowError(
                ErrorCodes.WORKFLOW_BUSY,
                requested=operation.value,
                running=self._status.operation.value if self._status.operation else None,
            )

    def _begin(self, operation: Operation) -> None:
        self._status.busy = True
        self._status.operation = operation
        self._status.error = None
        self._notify()

    def _end(self, run_log: RunLog) -> None:
        self._status.busy = False
        self._status.operation = None
        self._record(run_log)
        self._notify()

    def _apply_session(
        self,
        session: TemplateSession,
        uploaded: SourceFile,
        run_log: RunLog,
    ) -> None:
        """세션/FieldMap 원자적 교체. 이전 값은 이월하지 않는다."""
        self._session = session
        self._fields = FieldMap.from_placeholders(session.placeholders)
        self._result = None
        # 업로드 도중 새로 고른 파일은 유지
        if self._selection.current is uploaded:
            self._selection.clear()
        self._status.error = None

        if not session.placeholders:
            emit_warning(run_log, "Template declared no placeholders")
        complete_run_log(run_log, success=True)
        logger.info(
            f"Template ready: {session.file_path} "
            f"placeholders={list(session.placeholders)}"
        )

    def _fail(self, operation: Operation, run_log: RunLog, error: Exception) -> None:
        """실패 기록: 사용자 메시지 1개로 교체, 세션/결과는 건드리지 않음."""
        code, message = _FAILURES[operation]
        context: dict[str, Any]

        if isinstance(error, ProviderError):
            # 전송 타임아웃은 wait_for 타임아웃과 같은 detail로 기록
            detail = "timeout" if error.context.get("detail") == "timeout" else error.message
            context = error.to_dict()
            logger.error(f"{operation.value} failed: {error}")
        elif isinstance(error, TimeoutError):
            detail = "timeout"
            timeout = (
                self.upload_timeout if operation is Operation.UPLOAD else self.generate_timeout
            )
            context = {"timeout": timeout}
            logger.error(f"{operation.value} timed out after {timeout}s")
        else:
            detail = f"{type(error).__name__}: {error}"
            context = {"exception": type(error).__name__}
            logger.error(f"{operation.value} failed with unexpected error: {error}", exc_info=True)

        self._status.error = WorkflowFailure(code=code, message=message, detail=detail)
        complete_run_log(run_log, success=False, error_code=code, error_context=context)

    def _cancel(self, operation: Operation, run_log: RunLog) -> None:
        code, _ = _FAILURES[operation]
        logger.warning(f"{operation.value} cancelled")
        complete_run_log(run_log, success=False, error_code=code, error_context={"cancelled": True})

    def _record(self, run_log: RunLog) -> None:
        self.history.append(run_log)
        if len(self.history) > self.HISTORY_LIMIT:
            del self.history[: len(self.history) - self.HISTORY_LIMIT]

        if self.logs_dir is not None:
            try:
                save_run_log(run_log, self.logs_dir)
            except OSError as e:
                logger.warning(f"Run log save failed for {run_log.run_id}: {e}")

    def _notify(self) -> None:
        if not self._listeners:
            return
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception(f"Workflow listener failed: {listener!r}")
