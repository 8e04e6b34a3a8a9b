"""
Run logging: upload/generate 작업 단위 실행 로그.

규칙:
- 작업 시작 시 생성, 성공/실패와 무관하게 종료 시 완료 처리
- 실패 시 error_code + error_context 필수
- 관대한 정규화(placeholder 목록 무시 등)는 warnings에 기록
"""

import json
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from src.core.ids import generate_run_id
from src.core.storage import atomic_write_json
from src.domain.constants import RUN_LOG_FILENAME_PATTERN
from src.domain.schemas import RunLog

# =============================================================================
# Run Log Management
# =============================================================================


def create_run_log(operation: str, session_ref: str | None = None) -> RunLog:
    """
    새 RunLog 생성.

    Args:
        operation: "upload" 또는 "generate"
        session_ref: 파일명 또는 서버 템플릿 참조

    Returns:
        초기화된 RunLog
    """
    return RunLog(
        run_id=generate_run_id(),
        operation=operation,
        started_at=datetime.now(UTC).isoformat(),
        session_ref=session_ref,
    )


def emit_warning(run_log: RunLog, message: str) -> None:
    """경고 기록."""
    run_log.warnings.append(message)


def complete_run_log(
    run_log: RunLog,
    success: bool,
    error_code: str | None = None,
    error_context: dict[str, Any] | None = None,
) -> None:
    """
    RunLog 완료 처리.

    Args:
        run_log: RunLog 인스턴스
        success: 성공 여부
        error_code: 에러 코드 (실패 시)
        error_context: 에러 컨텍스트 (실패 시)
    """
    run_log.finished_at = datetime.now(UTC).isoformat()
    run_log.result = "success" if success else "failed"

    if not success:
        run_log.error_code = error_code
        run_log.error_context = error_context


def save_run_log(run_log: RunLog, logs_dir: Path) -> Path:
    """
    RunLog를 파일로 저장.

    Args:
        run_log: RunLog 인스턴스
        logs_dir: 저장 디렉터리

    Returns:
        저장된 파일 경로
    """
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_path = logs_dir / RUN_LOG_FILENAME_PATTERN.format(run_id=run_log.run_id)
    atomic_write_json(log_path, run_log.to_dict())
    return log_path


def load_run_log(log_path: Path) -> dict[str, Any]:
    """RunLog 파일 로드."""
    data: dict[str, Any] = json.loads(log_path.read_text(encoding="utf-8"))
    return data


def list_run_logs(logs_dir: Path) -> list[Path]:
    """
    디렉터리의 모든 run log 파일 목록.

    Returns:
        로그 파일 경로 목록 (최신순)
    """
    if not logs_dir.exists():
        return []

    logs = list(logs_dir.glob("run_*.json"))
    logs.sort(key=lambda p: p.stat().st_mtime, reverse=True)
    return logs
