"""
FastAPI 애플리케이션 진입점.

실행:
- 개발: uv run uvicorn src.app.main:app --reload
- 프로덕션: uv run uvicorn src.app.main:app
"""

import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import yaml
from fastapi import FastAPI

from src.app.providers.base import TemplateServiceProvider
from src.app.providers.http import HttpTemplateService
from src.app.routes import workflow
from src.app.services.sessions import WorkflowRegistry
from src.domain.constants import (
    DEFAULT_GENERATE_TIMEOUT,
    DEFAULT_MAX_SESSIONS,
    DEFAULT_SERVICE_URL,
    DEFAULT_UPLOAD_TIMEOUT,
)

PROJECT_ROOT = Path(__file__).parent.parent.parent

# =============================================================================
# Configuration
# =============================================================================


def load_config(config_path: Path | None = None) -> dict:
    """설정 파일 로드."""
    if config_path is None:
        # 프로젝트 루트의 default.yaml
        config_path = PROJECT_ROOT / "default.yaml"

    if not config_path.exists():
        return {}

    with open(config_path, encoding="utf-8") as f:
        data: dict[Any, Any] = yaml.safe_load(f) or {}
        return data


def service_settings(config: dict) -> dict[str, Any]:
    """
    service 섹션 해석.

    우선순위: 환경변수 TEMPLATE_SERVICE_URL > default.yaml > 기본값
    """
    service = config.get("service", {}) or {}
    return {
        "base_url": (
            os.environ.get("TEMPLATE_SERVICE_URL")
            or service.get("base_url")
            or DEFAULT_SERVICE_URL
        ),
        "upload_timeout": float(service.get("upload_timeout", DEFAULT_UPLOAD_TIMEOUT)),
        "generate_timeout": float(service.get("generate_timeout", DEFAULT_GENERATE_TIMEOUT)),
    }


def build_registry(config: dict, provider: TemplateServiceProvider) -> WorkflowRegistry:
    """config → WorkflowRegistry."""
    settings = service_settings(config)
    workflow_config = config.get("workflow", {}) or {}
    sessions_config = config.get("sessions", {}) or {}

    logs_dir_value = workflow_config.get("run_logs_dir")
    logs_dir = None
    if logs_dir_value:
        logs_dir = Path(logs_dir_value)
        if not logs_dir.is_absolute():
            logs_dir = PROJECT_ROOT / logs_dir

    return WorkflowRegistry(
        provider,
        max_sessions=int(sessions_config.get("max_sessions", DEFAULT_MAX_SESSIONS)),
        upload_timeout=settings["upload_timeout"],
        generate_timeout=settings["generate_timeout"],
        logs_dir=logs_dir,
    )


# =============================================================================
# App Factory
# =============================================================================


def create_app(
    config: dict | None = None,
    template_service: TemplateServiceProvider | None = None,
) -> FastAPI:
    """
    애플리케이션 생성.

    Args:
        config: 설정 (None이면 default.yaml)
        template_service: Provider 주입 (None이면 config 기반 HttpTemplateService)
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """
        애플리케이션 생명주기 관리.

        시작 시: 설정 로드, Provider/Registry 생성
        종료 시: Provider 정리 (직접 만든 경우만)
        """
        # Startup
        app.state.config = config if config is not None else load_config()

        owns_provider = template_service is None
        if template_service is None:
            settings = service_settings(app.state.config)
            provider: TemplateServiceProvider = HttpTemplateService(
                base_url=settings["base_url"],
                upload_timeout=settings["upload_timeout"],
                generate_timeout=settings["generate_timeout"],
            )
        else:
            provider = template_service

        app.state.template_service = provider
        app.state.registry = build_registry(app.state.config, provider)

        yield

        # Shutdown
        if owns_provider:
            await provider.aclose()

    app = FastAPI(
        title="PDF Template Generator",
        description="PDF 템플릿 업로드 → placeholder 입력 → 문서 생성/다운로드",
        version="0.1.0",
        lifespan=lifespan,
    )

    # 페이지 라우트 (HTML)
    app.include_router(workflow.router, prefix="", tags=["Workflow"])

    # API 라우트
    app.include_router(workflow.api_router, prefix="/api/workflow", tags=["Workflow API"])

    @app.get("/health")
    async def health() -> dict[str, str]:
        """헬스 체크."""
        return {"status": "ok"}

    return app


# =============================================================================
# App Instance
# =============================================================================

app = create_app()


# =============================================================================
# CLI Entry Point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.app.main:app",
        host="127.0.0.1",
        port=8000,
        reload=True,
    )
