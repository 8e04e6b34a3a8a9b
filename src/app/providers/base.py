"""
Template Service Provider 추상 인터페이스.

외부 템플릿 처리 서비스(PDF 파싱/렌더링)와의 경계.
- 업로드: 원본 PDF → 서버 참조 + placeholder 목록
- 생성: 서버 참조 + 필드 값 → 다운로드 참조

전송 방식(HTTP 등)은 구현체가 결정하고,
워크플로는 이 인터페이스와 ProviderError만 안다.
"""

from abc import ABC, abstractmethod
from typing import Any

from src.domain.schemas import GenerationResult, SourceFile, TemplateSession

# =============================================================================
# Provider Exceptions
# =============================================================================

class ProviderError(Exception):
    """
    Provider 관련 에러.

    code: ErrorCodes.UPLOAD_FAILED | ErrorCodes.GENERATION_FAILED
    """

    def __init__(self, code: str, message: str, **context: Any) -> None:
        self.code = code
        self.message = message
        self.context = context
        super().__init__(f"[{code}] {message}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            **self.context,
        }


# =============================================================================
# Abstract Provider
# =============================================================================

class TemplateServiceProvider(ABC):
    """
    템플릿 서비스 Provider 추상 인터페이스.

    역할: 요청 1회 = 응답 1회 (스트리밍/재시도 없음)
    """

    @abstractmethod
    async def upload_template(self, file: SourceFile) -> TemplateSession:
        """
        템플릿 업로드.

        Args:
            file: 선택된 원본 PDF

        Returns:
            TemplateSession (placeholder 목록은 정규화된 상태)

        Raises:
            ProviderError: UPLOAD_FAILED (네트워크 실패, 비 2xx, 해석 불가 응답)
        """
        ...

    @abstractmethod
    async def generate_document(
        self,
        session: TemplateSession,
        fields: dict[str, str],
    ) -> GenerationResult:
        """
        문서 생성.

        Args:
            session: 현재 템플릿 세션
            fields: placeholder → 값 (키 집합 == session.placeholders)

        Returns:
            GenerationResult

        Raises:
            ProviderError: GENERATION_FAILED
        """
        ...

    def resolve_download_url(self, download_path: str) -> str:
        """다운로드 참조 → 브라우저가 이동할 URL (기본: 그대로)."""
        return download_path

    async def aclose(self) -> None:
        """리소스 정리 (필요한 구현체만 override)."""
        return None
