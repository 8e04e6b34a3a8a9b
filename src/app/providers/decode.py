"""
서비스 응답 디코더.

관대한 정규화 정책:
- placeholder 목록이 올바른 문자열 리스트가 아니면 빈 리스트로 취급
  (에러로 올리지 않음, 경고 로그만 남김)
- 서버 참조/다운로드 참조가 없으면 실패 처리
"""

import logging
from typing import Any

from src.app.providers.base import ProviderError
from src.domain.constants import (
    RESPONSE_DOWNLOAD_PATH_KEY,
    RESPONSE_FILE_PATH_KEY,
    RESPONSE_PLACEHOLDERS_KEY,
)
from src.domain.errors import ErrorCodes
from src.domain.schemas import GenerationResult, TemplateSession

logger = logging.getLogger(__name__)


def normalize_placeholders(value: Any) -> list[str]:
    """
    placeholder 목록 정규화.

    Args:
        value: 응답의 placeholders 값 (임의 타입)

    Returns:
        문자열 리스트 (순서 유지, 중복은 첫 항목만).
        리스트가 아니거나 문자열이 아닌 항목이 섞여 있으면 [].
    """
    if not isinstance(value, list):
        if value is not None:
            logger.warning(
                f"placeholders is not a list ({type(value).__name__}); treating as empty"
            )
        return []

    if not all(isinstance(item, str) for item in value):
        logger.warning("placeholders contains non-string items; treating as empty")
        return []

    seen: set[str] = set()
    names: list[str] = []
    for item in value:
        if item in seen:
            logger.warning(f"Duplicate placeholder '{item}' ignored")
            continue
        seen.add(item)
        names.append(item)
    return names


def decode_upload_response(payload: Any) -> TemplateSession:
    """
    업로드 응답 → TemplateSession.

    Raises:
        ProviderError: UPLOAD_FAILED (객체가 아니거나 filePath 없음)
    """
    if not isinstance(payload, dict):
        raise ProviderError(
            ErrorCodes.UPLOAD_FAILED,
            "Upload response is not a JSON object",
            payload_type=type(payload).__name__,
        )

    file_path = payload.get(RESPONSE_FILE_PATH_KEY)
    if not isinstance(file_path, str) or not file_path:
        raise ProviderError(
            ErrorCodes.UPLOAD_FAILED,
            f"Upload response has no '{RESPONSE_FILE_PATH_KEY}'",
        )

    placeholders = normalize_placeholders(payload.get(RESPONSE_PLACEHOLDERS_KEY))
    return TemplateSession(file_path=file_path, placeholders=tuple(placeholders))


def decode_generate_response(payload: Any) -> GenerationResult:
    """
    생성 응답 → GenerationResult.

    Raises:
        ProviderError: GENERATION_FAILED (객체가 아니거나 downloadPath 없음)
    """
    if not isinstance(payload, dict):
        raise ProviderError(
            ErrorCodes.GENERATION_FAILED,
            "Generate response is not a JSON object",
            payload_type=type(payload).__name__,
        )

    download_path = payload.get(RESPONSE_DOWNLOAD_PATH_KEY)
    if not isinstance(download_path, str) or not download_path:
        raise ProviderError(
            ErrorCodes.GENERATION_FAILED,
            f"Generate response has no '{RESPONSE_DOWNLOAD_PATH_KEY}'",
        )

    return GenerationResult(download_path=download_path)
