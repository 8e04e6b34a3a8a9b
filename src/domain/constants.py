"""
Domain Constants: 템플릿 채우기 워크플로 전역 상수.

외부 템플릿 서비스 계약(엔드포인트, JSON 키), 파일 선택 정책,
사용자 메시지 등 시스템 전반에서 사용되는 값들.
"""

# =============================================================================
# Template Service (외부 템플릿 처리 서비스)
# =============================================================================
# 업로드: multipart, 단일 바이너리 필드 → {filePath, placeholders}
# 생성: JSON {filePath, data} → {downloadPath}

DEFAULT_SERVICE_URL = "http://localhost:5001"

UPLOAD_TEMPLATE_ENDPOINT = "/upload-template"
GENERATE_DOCUMENT_ENDPOINT = "/generate-pdf"

UPLOAD_FILE_FIELD = "pdf"

RESPONSE_FILE_PATH_KEY = "filePath"
RESPONSE_PLACEHOLDERS_KEY = "placeholders"
RESPONSE_DOWNLOAD_PATH_KEY = "downloadPath"

REQUEST_FILE_PATH_KEY = "filePath"
REQUEST_DATA_KEY = "data"

# =============================================================================
# Timeouts (초)
# =============================================================================
# 응답이 오지 않는 요청이 busy 상태를 영원히 붙잡지 않도록 상한을 둔다.

DEFAULT_UPLOAD_TIMEOUT = 30.0
DEFAULT_GENERATE_TIMEOUT = 60.0

# =============================================================================
# File Selection (파일 선택 정책)
# =============================================================================
# 호스트의 파일 선택기가 강제: PDF 1개

PDF_MIME_TYPE = "application/pdf"
PDF_EXTENSION = ".pdf"

# =============================================================================
# User Messages (사용자 노출 메시지)
# =============================================================================

UPLOAD_FAILED_MESSAGE = "Failed to upload template. Please try again."
GENERATION_FAILED_MESSAGE = "Failed to generate PDF. Please try again."

# =============================================================================
# ID Prefixes
# =============================================================================

RUN_ID_PREFIX = "RUN-"
SESSION_ID_PREFIX = "WF-"

# =============================================================================
# Run Log
# =============================================================================

RUN_LOG_FILENAME_PATTERN = "run_{run_id}.json"

DEFAULT_MAX_SESSIONS = 1000


def is_pdf(filename: str | None, content_type: str | None = None) -> bool:
    """
    PDF 파일 여부 판정.

    호스트 측 파일 선택 계약(확장자 .pdf 또는 application/pdf)을
    검사한다. 컨트롤러는 이 함수를 사용하지 않는다.

    Args:
        filename: 파일명
        content_type: MIME 타입 (선택)

    Returns:
        PDF면 True
    """
    if content_type and content_type.split(";")[0].strip().lower() == PDF_MIME_TYPE:
        return True
    return bool(filename) and filename.lower().endswith(PDF_EXTENSION)
