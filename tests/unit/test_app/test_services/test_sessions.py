"""
test_sessions.py - WorkflowRegistry 테스트

- 세션마다 독립 컨트롤러
- 최대 세션 수 초과 시 가장 오래된 세션 제거
"""

from pathlib import Path

import pytest

from src.app.services.sessions import WorkflowRegistry
from src.domain.errors import ErrorCodes, WorkflowError


class TestWorkflowRegistry:
    """WorkflowRegistry 테스트."""

    def test_create_returns_valid_id(self, fake_service):
        registry = WorkflowRegistry(fake_service)

        session_id, controller = registry.create()

        assert session_id.startswith("WF-")
        assert registry.get(session_id) is controller
        assert session_id in registry

    def test_sessions_are_independent(self, fake_service, sample_pdf):
        registry = WorkflowRegistry(fake_service)
        _, first = registry.create()
        _, second = registry.create()

        first.select_file(sample_pdf)

        assert first.source_file is sample_pdf
        assert second.source_file is None

    def test_shared_provider(self, fake_service):
        registry = WorkflowRegistry(fake_service)

        _, first = registry.create()
        _, second = registry.create()

        assert first.provider is second.provider is fake_service

    def test_timeouts_forwarded(self, fake_service):
        registry = WorkflowRegistry(fake_service, upload_timeout=5, generate_timeout=7)

        _, controller = registry.create()

        assert controller.upload_timeout == 5
        assert controller.generate_timeout == 7

    def test_logs_dir_per_session(self, fake_service, tmp_path: Path):
        registry = WorkflowRegistry(fake_service, logs_dir=tmp_path)

        session_id, controller = registry.create()

        assert controller.logs_dir == tmp_path / session_id

    def test_unknown_session(self, fake_service):
        registry = WorkflowRegistry(fake_service)

        with pytest.raises(WorkflowError) as exc_info:
            registry.get("WF-0123456789abcdef")

        assert exc_info.value.code == ErrorCodes.SESSION_NOT_FOUND

    def test_malformed_session_id(self, fake_service):
        registry = WorkflowRegistry(fake_service)

        with pytest.raises(WorkflowError) as exc_info:
            registry.get("not-a-session")

        assert exc_info.value.code == ErrorCodes.SESSION_NOT_FOUND

    def test_evicts_oldest(self, fake_service):
        registry = WorkflowRegistry(fake_service, max_sessions=2)
        first, _ = registry.create()
        second, _ = registry.create()

        third, _ = registry.create()

        assert len(registry) == 2
        assert first not in registry
        assert second in registry
        assert third in registry

    def test_recent_access_protects_from_eviction(self, fake_service):
        registry = WorkflowRegistry(fake_service, max_sessions=2)
        first, _ = registry.create()
        second, _ = registry.create()

        registry.get(first)
        registry.create()

        assert first in registry
        assert second not in registry

    def test_discard(self, fake_service):
        registry = WorkflowRegistry(fake_service)
        session_id, _ = registry.create()

        registry.discard(session_id)
        registry.discard(session_id)

        assert session_id not in registry
