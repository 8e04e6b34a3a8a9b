"""
Workflow Routes: PDF 템플릿 채우기 화면 (HTMX).

- GET /                         → 메인 화면 (새 세션)
- POST /api/workflow/sessions   → 새 세션 (JSON)
- POST /api/workflow/select     → 파일 선택 (PDF만)
- POST /api/workflow/upload     → 템플릿 업로드
- POST /api/workflow/fields     → placeholder 값 편집
- POST /api/workflow/generate   → 문서 생성
- GET /api/workflow/download    → 결과 소비 + 다운로드 주소로 이동
- GET /api/workflow/state       → 현재 snapshot (JSON)

화면은 WorkflowSnapshot의 투영일 뿐, 상태는 컨트롤러만 바꾼다.
"""

import html as html_escape_module
import json
import logging
from typing import Any

from fastapi import APIRouter, File, Form, HTTPException, Request, UploadFile
from fastapi.responses import HTMLResponse, RedirectResponse

from src.app.services.sessions import WorkflowRegistry
from src.app.services.workflow import WorkflowController
from src.domain.constants import PDF_MIME_TYPE, is_pdf
from src.domain.errors import ErrorCodes, WorkflowError
from src.domain.schemas import SourceFile, WorkflowSnapshot, WorkflowState

logger = logging.getLogger(__name__)

# Routers
router = APIRouter()  # HTML pages
api_router = APIRouter()  # API endpoints

# WorkflowError 코드 → HTTP 상태
_STATUS_BY_CODE = {
    ErrorCodes.SESSION_NOT_FOUND: 404,
    ErrorCodes.NOTHING_TO_DOWNLOAD: 404,
    ErrorCodes.UNKNOWN_PLACEHOLDER: 400,
    ErrorCodes.INVALID_FILE_TYPE: 400,
    ErrorCodes.WORKFLOW_BUSY: 409,
    ErrorCodes.GENERATE_NOT_AVAILABLE: 409,
}


# =============================================================================
# Helpers
# =============================================================================


def get_registry(request: Request) -> WorkflowRegistry:
    registry: WorkflowRegistry = request.app.state.registry
    return registry


def get_workflow(request: Request, session_id: str) -> WorkflowController:
    """세션 ID → 컨트롤러. 없으면 404."""
    try:
        return get_registry(request).get(session_id)
    except WorkflowError as e:
        raise to_http_exception(e) from e


def to_http_exception(error: WorkflowError) -> HTTPException:
    status_code = _STATUS_BY_CODE.get(error.code, 400)
    return HTTPException(
        status_code=status_code,
        detail={"code": error.code, "message": str(error)},
    )


def escape_html(text: str) -> str:
    """HTML 이스케이프."""
    return html_escape_module.escape(text)


def _hx_vals(session_id: str, **extra: str) -> str:
    return escape_html(json.dumps({"session_id": session_id, **extra}))


# =============================================================================
# HTML Generation Helpers
# =============================================================================


def build_error_html(snapshot: WorkflowSnapshot) -> str:
    """에러 배너 (가장 최근 실패 1건)."""
    if snapshot.error is None:
        return ""
    return f'<div class="error" role="alert">{escape_html(snapshot.error.message)}</div>'


def build_upload_html(session_id: str, snapshot: WorkflowSnapshot) -> str:
    """파일 선택 + 업로드 버튼."""
    prompt = (
        escape_html(snapshot.filename)
        if snapshot.filename
        else "Drag &amp; drop a PDF template here, or click to select one"
    )
    disabled = "" if snapshot.can_upload else " disabled"
    label = "Uploading…" if snapshot.state is WorkflowState.UPLOADING else "Upload Template"

    return f"""
    <section class="upload">
        <form hx-post="/api/workflow/select"
              hx-encoding="multipart/form-data"
              hx-trigger="change"
              hx-target="#workflow-panel"
              hx-swap="outerHTML">
            <input type="hidden" name="session_id" value="{escape_html(session_id)}">
            <label class="dropzone">
                <input type="file" name="file" accept=".pdf,{PDF_MIME_TYPE}">
                <p class="file-name">{prompt}</p>
                <p class="hint">Supported format: PDF</p>
            </label>
        </form>
        <button id="upload-button"
                hx-post="/api/workflow/upload"
                hx-vals="{_hx_vals(session_id)}"
                hx-target="#workflow-panel"
                hx-swap="outerHTML"{disabled}>{label}</button>
    </section>
    """


def build_fields_html(session_id: str, snapshot: WorkflowSnapshot) -> str:
    """placeholder 입력 폼 (placeholder 순서)."""
    if not snapshot.placeholders:
        return ""

    rows = []
    for name in snapshot.placeholders:
        safe_name = escape_html(name)
        value = escape_html(snapshot.fields.get(name, ""))
        rows.append(f"""
            <div class="field">
                <label>{safe_name}:</label>
                <input type="text" name="value" value="{value}"
                       placeholder="Enter {safe_name}"
                       hx-post="/api/workflow/fields"
                       hx-vals="{_hx_vals(session_id, name=name)}"
                       hx-trigger="keyup changed delay:300ms"
                       hx-target="#workflow-actions"
                       hx-swap="outerHTML">
            </div>""")

    return f"""
    <section class="placeholders">
        <h2>Fill Placeholders</h2>
        {"".join(rows)}
    </section>
    """


def build_actions_html(session_id: str, snapshot: WorkflowSnapshot) -> str:
    """생성 버튼 + 다운로드 링크."""
    if not snapshot.has_session:
        return '<div id="workflow-actions"></div>'

    disabled = "" if snapshot.can_generate else " disabled"
    label = "Generating…" if snapshot.state is WorkflowState.GENERATING else "Generate PDF"

    download = ""
    if snapshot.download_path:
        download = f"""
        <a class="download"
           href="/api/workflow/download?session_id={escape_html(session_id)}"
           onclick="this.remove()">Download Processed PDF</a>"""

    return f"""
    <div id="workflow-actions" class="actions">
        <button id="generate-button"
                hx-post="/api/workflow/generate"
                hx-vals="{_hx_vals(session_id)}"
                hx-target="#workflow-panel"
                hx-swap="outerHTML"{disabled}>{label}</button>{download}
    </div>
    """


def build_panel_html(session_id: str, snapshot: WorkflowSnapshot) -> str:
    """워크플로 패널 전체 (HTMX swap 단위)."""
    return f"""
<div id="workflow-panel" data-state="{snapshot.state.value}">
    {build_error_html(snapshot)}
    {build_upload_html(session_id, snapshot)}
    {build_fields_html(session_id, snapshot)}
    {build_actions_html(session_id, snapshot)}
</div>
"""


# =============================================================================
# Page Routes (HTML)
# =============================================================================


@router.get("/", response_class=HTMLResponse)
async def workflow_page(request: Request) -> HTMLResponse:
    """메인 화면. 접속마다 새 워크플로 세션."""
    session_id, controller = get_registry(request).create()
    panel = build_panel_html(session_id, controller.snapshot())

    return HTMLResponse(content=f"""
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>PDF Template Generator</title>
    <script src="https://unpkg.com/htmx.org@1.9.10"></script>
</head>
<body>
    <div class="container">
        <header>
            <h1>PDF Template Generator</h1>
            <p>Upload your PDF template and fill in the placeholders</p>
        </header>
        {panel}
    </div>
</body>
</html>
    """)


# =============================================================================
# API Routes
# =============================================================================


@api_router.post("/sessions")
async def create_session(request: Request) -> dict[str, Any]:
    """새 워크플로 세션 (API 클라이언트용)."""
    session_id, controller = get_registry(request).create()
    return {"session_id": session_id, **controller.snapshot().to_dict()}


@api_router.post("/select", response_class=HTMLResponse)
async def select_file(
    request: Request,
    session_id: str = Form(...),
    file: UploadFile = File(...),
) -> HTMLResponse:
    """
    파일 선택.

    파일 선택기 계약(PDF 1개)은 여기서 강제한다.
    """
    controller = get_workflow(request, session_id)

    filename = file.filename or ""
    if not is_pdf(filename, file.content_type):
        logger.warning(f"Rejected non-PDF file: {filename} ({file.content_type})")
        raise to_http_exception(
            WorkflowError(
                ErrorCodes.INVALID_FILE_TYPE,
                filename=filename,
                content_type=file.content_type,
            )
        )

    content = await file.read()
    controller.select_file(
        SourceFile(content=content, filename=filename, content_type=PDF_MIME_TYPE)
    )
    return HTMLResponse(content=build_panel_html(session_id, controller.snapshot()))


@api_router.post("/upload", response_class=HTMLResponse)
async def upload_template(
    request: Request,
    session_id: str = Form(...),
) -> HTMLResponse:
    """
    템플릿 업로드.

    실패해도 200: 에러 배너가 포함된 패널을 돌려준다.
    """
    controller = get_workflow(request, session_id)
    try:
        await controller.upload()
    except WorkflowError as e:
        raise to_http_exception(e) from e
    return HTMLResponse(content=build_panel_html(session_id, controller.snapshot()))


@api_router.post("/fields", response_class=HTMLResponse)
async def set_field(
    request: Request,
    session_id: str = Form(...),
    name: str = Form(...),
    value: str = Form(""),
) -> HTMLResponse:
    """placeholder 값 편집 → 생성 버튼 영역만 갱신."""
    controller = get_workflow(request, session_id)
    try:
        controller.set_field(name, value)
    except WorkflowError as e:
        raise to_http_exception(e) from e
    return HTMLResponse(content=build_actions_html(session_id, controller.snapshot()))


@api_router.post("/generate", response_class=HTMLResponse)
async def generate_document(
    request: Request,
    session_id: str = Form(...),
) -> HTMLResponse:
    """문서 생성. 비활성 상태 호출은 409."""
    controller = get_workflow(request, session_id)
    try:
        await controller.generate()
    except WorkflowError as e:
        raise to_http_exception(e) from e
    return HTMLResponse(content=build_panel_html(session_id, controller.snapshot()))


@api_router.get("/download")
async def download_document(
    request: Request,
    session_id: str,
) -> RedirectResponse:
    """
    다운로드 시작.

    결과는 즉시 소비되고(전송 완료 여부 무관) 다운로드 주소로 이동한다.
    """
    controller = get_workflow(request, session_id)
    download_path = controller.consume_download()
    if download_path is None:
        raise to_http_exception(
            WorkflowError(ErrorCodes.NOTHING_TO_DOWNLOAD, session_id=session_id)
        )

    url = controller.provider.resolve_download_url(download_path)
    return RedirectResponse(url=url, status_code=307)


@api_router.get("/state")
async def get_state(
    request: Request,
    session_id: str,
) -> dict[str, Any]:
    """현재 snapshot (JSON)."""
    controller = get_workflow(request, session_id)
    return {"session_id": session_id, **controller.snapshot().to_dict()}
