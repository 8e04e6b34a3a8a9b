"""
Data schemas for the template fill workflow.

규칙:
- 모든 엔티티는 WorkflowController가 독점 소유
- TemplateSession / GenerationResult는 불변 (부분 갱신 금지, 통째로 교체)
- 렌더링 계층은 WorkflowSnapshot만 읽는다
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from src.domain.constants import PDF_MIME_TYPE

# =============================================================================
# Workflow State
# =============================================================================

class WorkflowState(str, Enum):
    """
    워크플로 상태.

    Error는 별도 상태가 아니라 안정 상태에 붙는 속성(WorkflowStatus.error).
    GENERATING / DOCUMENT_READY는 TEMPLATE_READY의 하위 상태.
    """
    IDLE = "idle"                      # 파일 없음
    FILE_SELECTED = "file_selected"    # 업로드 대기 중인 파일 있음
    UPLOADING = "uploading"
    TEMPLATE_READY = "template_ready"
    GENERATING = "generating"
    DOCUMENT_READY = "document_ready"  # 다운로드 가능한 결과 있음


class Operation(str, Enum):
    """busy 플래그를 잡는 작업 종류."""
    UPLOAD = "upload"
    GENERATE = "generate"


# =============================================================================
# Core Schemas
# =============================================================================

@dataclass(frozen=True)
class SourceFile:
    """
    사용자가 선택한 원본 파일 (클라이언트 전용).

    한 번에 하나만 존재하며 다음 선택 시 통째로 교체된다.
    """
    content: bytes
    filename: str
    content_type: str = PDF_MIME_TYPE

    @property
    def size(self) -> int:
        return len(self.content)

    @classmethod
    def from_path(cls, path: Path, content_type: str = PDF_MIME_TYPE) -> "SourceFile":
        """로컬 파일에서 생성 (CLI용)."""
        return cls(content=path.read_bytes(), filename=path.name, content_type=content_type)


@dataclass(frozen=True)
class TemplateSession:
    """
    업로드 성공 결과.

    file_path: 서버 측 템플릿 참조 (불투명 문자열)
    placeholders: 서비스가 선언한 placeholder 이름 (순서 유지, 중복 없음)
    """
    file_path: str
    placeholders: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "file_path": self.file_path,
            "placeholders": list(self.placeholders),
        }


@dataclass(frozen=True)
class GenerationResult:
    """생성 성공 결과. 다운로드 시작 시 소비(제거)된다."""
    download_path: str

    def to_dict(self) -> dict[str, Any]:
        return {"download_path": self.download_path}


@dataclass(frozen=True)
class WorkflowFailure:
    """
    가장 최근 실패한 작업의 에러.

    code: ErrorCodes.UPLOAD_FAILED | ErrorCodes.GENERATION_FAILED
    message: 사용자 노출 메시지
    detail: 디버깅용 원인 (status_code, timeout 등)
    """
    code: str
    message: str
    detail: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "detail": self.detail,
        }


@dataclass
class WorkflowStatus:
    """
    busy / error 상태.

    busy는 작업 시작 시 설정, 성공/실패와 무관하게 종료 시 해제.
    """
    busy: bool = False
    operation: Operation | None = None
    error: WorkflowFailure | None = None


@dataclass(frozen=True)
class WorkflowSnapshot:
    """
    렌더링 계층용 읽기 전용 투영.

    컨트롤러 상태가 바뀔 때마다 새로 만들어 구독자에게 전달된다.
    """
    state: WorkflowState
    filename: str | None
    placeholders: tuple[str, ...]
    fields: dict[str, str]
    download_path: str | None
    busy: bool
    error: WorkflowFailure | None
    can_upload: bool
    can_generate: bool
    has_session: bool

    @property
    def missing_fields(self) -> list[str]:
        return [name for name in self.placeholders if not self.fields.get(name)]

    def to_dict(self) -> dict[str, Any]:
        """JSON 직렬화용."""
        return {
            "state": self.state.value,
            "filename": self.filename,
            "placeholders": list(self.placeholders),
            "fields": dict(self.fields),
            "download_path": self.download_path,
            "busy": self.busy,
            "error": self.error.to_dict() if self.error else None,
            "can_upload": self.can_upload,
            "can_generate": self.can_generate,
            "has_session": self.has_session,
            "missing_fields": self.missing_fields,
        }


# =============================================================================
# Run Log Schemas
# =============================================================================

@dataclass
class RunLog:
    """
    작업 실행 로그.

    upload/generate 1회 호출 단위 결과 및 메타데이터.
    """
    run_id: str
    operation: str  # upload, generate
    started_at: str  # ISO 8601
    finished_at: str | None = None
    result: str = "pending"  # pending, success, failed

    # 관련 참조 (파일명 또는 서버 템플릿 참조)
    session_ref: str | None = None

    # 관대한 정규화 등 경고
    warnings: list[str] = field(default_factory=list)

    # Error (if failed)
    error_code: str | None = None
    error_context: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "run_id": self.run_id,
            "operation": self.operation,
            "started_at": self.started_at,
            "finished_at": self.finished_at,
            "result": self.result,
            "session_ref": self.session_ref,
            "warnings": list(self.warnings),
            "error_code": self.error_code,
            "error_context": self.error_context,
        }
