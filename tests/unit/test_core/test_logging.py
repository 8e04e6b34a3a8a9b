"""
test_logging.py - RunLog 관리 테스트

DoD:
- run log 스키마대로 저장
- 경고 기록, 실패 시 error_code + error_context
"""

import os
from datetime import UTC, datetime
from pathlib import Path

from src.core.logging import (
    complete_run_log,
    create_run_log,
    emit_warning,
    list_run_logs,
    load_run_log,
    save_run_log,
)

# =============================================================================
# create_run_log 테스트
# =============================================================================


class TestCreateRunLog:
    """create_run_log 함수 테스트."""

    def test_creates_with_operation(self):
        """operation으로 RunLog 생성."""
        run_log = create_run_log("upload", session_ref="invoice.pdf")

        assert run_log.operation == "upload"
        assert run_log.session_ref == "invoice.pdf"
        assert run_log.run_id.startswith("RUN-")
        assert run_log.result == "pending"

    def test_has_started_at(self):
        """started_at 타임스탬프 포함."""
        before = datetime.now(UTC)
        run_log = create_run_log("generate")
        after = datetime.now(UTC)

        started = datetime.fromisoformat(run_log.started_at)
        assert before <= started <= after

    def test_empty_warnings(self):
        run_log = create_run_log("upload")

        assert run_log.warnings == []
        assert run_log.finished_at is None


# =============================================================================
# emit_warning 테스트
# =============================================================================


class TestEmitWarning:
    """emit_warning 함수 테스트."""

    def test_adds_warning_to_list(self):
        run_log = create_run_log("upload")

        emit_warning(run_log, "Template declared no placeholders")

        assert run_log.warnings == ["Template declared no placeholders"]


# =============================================================================
# complete_run_log 테스트
# =============================================================================


class TestCompleteRunLog:
    """complete_run_log 함수 테스트."""

    def test_success(self):
        run_log = create_run_log("upload")

        complete_run_log(run_log, success=True)

        assert run_log.result == "success"
        assert run_log.finished_at is not None
        assert run_log.error_code is None

    def test_failure_records_error(self):
        """실패 시 error_code + error_context 기록."""
        run_log = create_run_log("generate")

        complete_run_log(
            run_log,
            success=False,
            error_code="GENERATION_FAILED",
            error_context={"status_code": 500},
        )

        assert run_log.result == "failed"
        assert run_log.error_code == "GENERATION_FAILED"
        assert run_log.error_context == {"status_code": 500}


# =============================================================================
# 저장/로드 테스트
# =============================================================================


class TestSaveAndLoad:
    """save_run_log / load_run_log / list_run_logs 테스트."""

    def test_save_creates_file(self, tmp_path: Path):
        run_log = create_run_log("upload")
        complete_run_log(run_log, success=True)

        log_path = save_run_log(run_log, tmp_path / "logs")

        assert log_path.exists()
        assert log_path.name == f"run_{run_log.run_id}.json"

    def test_load_matches_schema(self, tmp_path: Path):
        run_log = create_run_log("generate", session_ref="uploads/invoice.pdf")
        emit_warning(run_log, "warn")
        complete_run_log(run_log, success=False, error_code="GENERATION_FAILED", error_context={})

        data = load_run_log(save_run_log(run_log, tmp_path))

        assert data == run_log.to_dict()
        assert data["operation"] == "generate"
        assert data["warnings"] == ["warn"]

    def test_list_missing_dir(self, tmp_path: Path):
        assert list_run_logs(tmp_path / "missing") == []

    def test_list_newest_first(self, tmp_path: Path):
        first = save_run_log(create_run_log("upload"), tmp_path)
        second = save_run_log(create_run_log("generate"), tmp_path)

        # mtime 명시 (파일시스템 해상도 차이 회피)
        os.utime(first, (1_000_000, 1_000_000))
        os.utime(second, (2_000_000, 2_000_000))

        assert list_run_logs(tmp_path) == [second, first]

    def test_no_temp_files_left(self, tmp_path: Path):
        """원자적 저장 후 임시 파일 없음."""
        save_run_log(create_run_log("upload"), tmp_path)

        assert [p.name for p in tmp_path.iterdir() if not p.name.startswith("run_")] == []
