"""
Error definitions for the template fill workflow.

규칙:
- 업로드/생성 실패는 예외가 아닌 WorkflowFailure로 상태에 기록
- WorkflowError는 호출 측 계약 위반(비활성 액션 호출 등)에만 사용
- 사용자에게는 항상 단일 메시지만 노출
"""

from typing import Any


class WorkflowError(Exception):
    """
    워크플로 계약 위반 시 발생하는 에러.

    사용 예:
    - 템플릿에 없는 placeholder 편집
    - 비활성 상태의 generate 호출
    - busy 중 upload/generate 재호출

    Usage:
        raise WorkflowError("UNKNOWN_PLACEHOLDER", name="amount")
    """

    def __init__(self, code: str, **context: Any) -> None:
        self.code = code
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        ctx_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
        return f"[{self.code}] {ctx_str}" if ctx_str else f"[{self.code}]"

    def to_dict(self) -> dict[str, Any]:
        """로그/JSON 직렬화용."""
        return {
            "code": self.code,
            **self.context,
        }


# =============================================================================
# Error Codes
# =============================================================================

class ErrorCodes:
    """에러 코드 상수."""

    # === Service (사용자 노출, 상태에 기록) ===
    UPLOAD_FAILED = "UPLOAD_FAILED"
    GENERATION_FAILED = "GENERATION_FAILED"

    # === Action Surface (호출 측 계약 위반) ===
    UNKNOWN_PLACEHOLDER = "UNKNOWN_PLACEHOLDER"
    GENERATE_NOT_AVAILABLE = "GENERATE_NOT_AVAILABLE"
    WORKFLOW_BUSY = "WORKFLOW_BUSY"

    # === Host (파일 선택기, 웹 세션) ===
    INVALID_FILE_TYPE = "INVALID_FILE_TYPE"
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    NOTHING_TO_DOWNLOAD = "NOTHING_TO_DOWNLOAD"
