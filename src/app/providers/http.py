"""
HTTP Template Service Provider (httpx).

엔드포인트:
- POST {base_url}/upload-template  (multipart, 필드명 "pdf")
- POST {base_url}/generate-pdf     (JSON {filePath, data})

실패 처리:
- 비 2xx → 본문과 무관하게 UPLOAD_FAILED / GENERATION_FAILED
- 전송 오류/타임아웃 (httpx.HTTPError) → 동일 코드
- JSON 해석 불가 → 동일 코드
"""

import logging
import os
from typing import Any

import httpx

from src.app.providers.base import ProviderError, TemplateServiceProvider
from src.app.providers.decode import decode_generate_response, decode_upload_response
from src.domain.constants import (
    DEFAULT_GENERATE_TIMEOUT,
    DEFAULT_SERVICE_URL,
    DEFAULT_UPLOAD_TIMEOUT,
    GENERATE_DOCUMENT_ENDPOINT,
    REQUEST_DATA_KEY,
    REQUEST_FILE_PATH_KEY,
    UPLOAD_FILE_FIELD,
    UPLOAD_TEMPLATE_ENDPOINT,
)
from src.domain.errors import ErrorCodes
from src.domain.schemas import GenerationResult, SourceFile, TemplateSession

logger = logging.getLogger(__name__)


class HttpTemplateService(TemplateServiceProvider):
    """
    httpx 기반 템플릿 서비스 클라이언트.

    Usage:
        async with HttpTemplateService("http://localhost:5001") as service:
            session = await service.upload_template(source_file)
            result = await service.generate_document(session, {"name": "Alice"})
    """

    def __init__(
        self,
        base_url: str | None = None,
        upload_timeout: float = DEFAULT_UPLOAD_TIMEOUT,
        generate_timeout: float = DEFAULT_GENERATE_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Args:
            base_url: 서비스 주소 (환경변수 TEMPLATE_SERVICE_URL 사용 가능)
            upload_timeout: 업로드 요청 타임아웃(초)
            generate_timeout: 생성 요청 타임아웃(초)
            transport: httpx transport 주입 (테스트용 MockTransport 등)
        """
        self.base_url = (
            base_url or os.environ.get("TEMPLATE_SERVICE_URL") or DEFAULT_SERVICE_URL
        ).rstrip("/")
        self.upload_timeout = upload_timeout
        self.generate_timeout = generate_timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def _get_client(self) -> httpx.AsyncClient:
        """AsyncClient (lazy init)."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                transport=self._transport,
            )
        return self._client

    async def upload_template(self, file: SourceFile) -> TemplateSession:
        files = {UPLOAD_FILE_FIELD: (file.filename, file.content, file.content_type)}
        payload = await self._post(
            UPLOAD_TEMPLATE_ENDPOINT,
            ErrorCodes.UPLOAD_FAILED,
            timeout=self.upload_timeout,
            files=files,
        )
        session = decode_upload_response(payload)
        logger.info(
            f"Template uploaded: {file.filename} -> {session.file_path} "
            f"({len(session.placeholders)} placeholders)"
        )
        return session

    async def generate_document(
        self,
        session: TemplateSession,
        fields: dict[str, str],
    ) -> GenerationResult:
        body = {
            REQUEST_FILE_PATH_KEY: session.file_path,
            REQUEST_DATA_KEY: dict(fields),
        }
        payload = await self._post(
            GENERATE_DOCUMENT_ENDPOINT,
            ErrorCodes.GENERATION_FAILED,
            timeout=self.generate_timeout,
            json=body,
        )
        result = decode_generate_response(payload)
        logger.info(f"Document generated: {session.file_path} -> {result.download_path}")
        return result

    async def _post(
        self,
        endpoint: str,
        error_code: str,
        timeout: float,
        **kwargs: Any,
    ) -> Any:
        """POST 1회 → JSON 본문. 모든 실패는 error_code로 통일."""
        client = self._get_client()

        try:
            response = await client.post(endpoint, timeout=timeout, **kwargs)
        except httpx.TimeoutException as e:
            logger.error(f"{endpoint} timed out after {timeout}s: {e}")
            raise ProviderError(
                error_code,
                f"Request to {endpoint} timed out",
                detail="timeout",
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"{endpoint} request failed: {e}")
            raise ProviderError(
                error_code,
                f"Request to {endpoint} failed: {type(e).__name__}",
                detail=str(e),
            ) from e

        if not response.is_success:
            logger.error(f"{endpoint} returned HTTP {response.status_code}")
            raise ProviderError(
                error_code,
                f"{endpoint} returned HTTP {response.status_code}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise ProviderError(
                error_code,
                f"{endpoint} returned a non-JSON body",
                status_code=response.status_code,
            ) from e

    def resolve_download_url(self, download_path: str) -> str:
        """상대 경로 다운로드 참조를 서비스 주소 기준 절대 URL로 변환."""
        if download_path.startswith(("http://", "https://")):
            return download_path
        return f"{self.base_url}/{download_path.lstrip('/')}"

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "HttpTemplateService":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
