"""
Pytest fixtures for the workflow tests.

테스트 구성:
- FakeTemplateService: 네트워크 없는 Provider (응답/실패/지연 제어)
- mock_service_factory: httpx.MockTransport 기반 HttpTemplateService
"""

import asyncio
from collections.abc import Callable
from pathlib import Path

import httpx
import pytest
import yaml

from src.app.providers.base import ProviderError, TemplateServiceProvider
from src.app.providers.http import HttpTemplateService
from src.domain.errors import ErrorCodes
from src.domain.schemas import GenerationResult, SourceFile, TemplateSession

# 최소 PDF 바이트 (서비스가 파싱하지 않으므로 형식만 흉내)
SAMPLE_PDF_BYTES = b"%PDF-1.4\n%fake template\n%%EOF\n"


# =============================================================================
# Fake Provider
# =============================================================================


class FakeTemplateService(TemplateServiceProvider):
    """
    테스트용 Provider.

    - upload_result / generate_result: 성공 응답
    - upload_error / generate_error: 설정 시 해당 예외 발생
    - gate: 설정 시 gate.set() 전까지 응답 보류 (in-flight 재현)
    - started: 요청 함수에 진입하면 set (in-flight 시점 동기화)
    """

    def __init__(
        self,
        placeholders: list[str] | None = None,
        file_path: str = "uploads/invoice.pdf",
        download_path: str = "/downloads/filled.pdf",
    ):
        self.upload_result = TemplateSession(
            file_path=file_path,
            placeholders=tuple(placeholders if placeholders is not None else ["name", "amount"]),
        )
        self.generate_result = GenerationResult(download_path=download_path)
        self.upload_error: Exception | None = None
        self.generate_error: Exception | None = None
        self.gate: asyncio.Event | None = None
        self.started = asyncio.Event()
        self.uploaded: list[SourceFile] = []
        self.generated: list[tuple[TemplateSession, dict[str, str]]] = []
        self.closed = False

    async def upload_template(self, file: SourceFile) -> TemplateSession:
        self.started.set()
        self.uploaded.append(file)
        if self.gate is not None:
            await self.gate.wait()
        if self.upload_error is not None:
            raise self.upload_error
        return self.upload_result

    async def generate_document(
        self,
        session: TemplateSession,
        fields: dict[str, str],
    ) -> GenerationResult:
        self.started.set()
        self.generated.append((session, dict(fields)))
        if self.gate is not None:
            await self.gate.wait()
        if self.generate_error is not None:
            raise self.generate_error
        return self.generate_result

    def hold(self) -> asyncio.Event:
        """다음 요청을 gate.set() 전까지 보류. started도 새로 만든다."""
        self.gate = asyncio.Event()
        self.started = asyncio.Event()
        return self.gate

    async def aclose(self) -> None:
        self.closed = True


# =============================================================================
# Path / Config Fixtures
# =============================================================================


@pytest.fixture
def project_root() -> Path:
    """프로젝트 루트 경로."""
    return Path(__file__).parent.parent


@pytest.fixture
def default_config(project_root: Path) -> dict:
    """default.yaml 로드."""
    with open(project_root / "default.yaml", encoding="utf-8") as f:
        return yaml.safe_load(f)


# =============================================================================
# File Fixtures
# =============================================================================


@pytest.fixture
def sample_pdf() -> SourceFile:
    """invoice.pdf 원본 파일."""
    return SourceFile(content=SAMPLE_PDF_BYTES, filename="invoice.pdf")


@pytest.fixture
def sample_pdf_path(tmp_path: Path) -> Path:
    """디스크 위 invoice.pdf."""
    path = tmp_path / "invoice.pdf"
    path.write_bytes(SAMPLE_PDF_BYTES)
    return path


# =============================================================================
# Provider Fixtures
# =============================================================================


@pytest.fixture
def fake_service() -> FakeTemplateService:
    """placeholders = [name, amount] 인 Fake Provider."""
    return FakeTemplateService()


@pytest.fixture
def upload_failure() -> ProviderError:
    return ProviderError(ErrorCodes.UPLOAD_FAILED, "HTTP 500", status_code=500)


@pytest.fixture
def generation_failure() -> ProviderError:
    return ProviderError(ErrorCodes.GENERATION_FAILED, "HTTP 500", status_code=500)


@pytest.fixture
def fake_service_factory() -> type[FakeTemplateService]:
    """placeholder 목록을 지정해 Fake Provider 생성."""
    return FakeTemplateService


@pytest.fixture
def mock_service_factory() -> Callable[..., HttpTemplateService]:
    """핸들러 함수 → MockTransport 기반 HttpTemplateService."""

    def factory(
        handler: Callable[[httpx.Request], httpx.Response],
        base_url: str = "http://template.test",
    ) -> HttpTemplateService:
        return HttpTemplateService(base_url=base_url, transport=httpx.MockTransport(handler))

    return factory
