"""
ID 생성: run_id, session_id

- run_id: upload/generate 호출마다 새로 발급
- session_id: 브라우저 세션마다 독립 워크플로 1개
"""

import uuid
from datetime import UTC, datetime

from src.domain.constants import RUN_ID_PREFIX, SESSION_ID_PREFIX


def generate_run_id() -> str:
    """
    Run ID 생성.

    고유성 보장: UUID v4
    포맷: RUN-{timestamp}-{uuid[:8]}

    Returns:
        run_id 문자열
    """
    now = datetime.now(UTC)
    timestamp = now.strftime("%Y%m%d%H%M%S")
    unique = uuid.uuid4().hex[:8]

    return f"{RUN_ID_PREFIX}{timestamp}-{unique}"


def generate_session_id() -> str:
    """
    워크플로 세션 ID 생성.

    포맷: WF-{uuid hex 16자}
    """
    return f"{SESSION_ID_PREFIX}{uuid.uuid4().hex[:16]}"


def is_session_id(value: str) -> bool:
    """세션 ID 포맷 확인 (접두어 + 16자리 hex)."""
    if not value.startswith(SESSION_ID_PREFIX):
        return False
    body = value[len(SESSION_ID_PREFIX):]
    return len(body) == 16 and all(c in "0123456789abcdef" for c in body)
