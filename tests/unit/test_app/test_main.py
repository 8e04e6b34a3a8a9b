"""
test_main.py - 설정 로드 / 앱 구성 테스트
"""

from pathlib import Path

from src.app.main import PROJECT_ROOT, build_registry, load_config, service_settings

# =============================================================================
# load_config
# =============================================================================


class TestLoadConfig:
    """load_config 테스트."""

    def test_default_yaml(self, default_config):
        config = load_config()

        assert config == default_config
        assert config["service"]["base_url"] == "http://localhost:5001"

    def test_missing_file(self, tmp_path: Path):
        assert load_config(tmp_path / "missing.yaml") == {}

    def test_empty_file(self, tmp_path: Path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")

        assert load_config(path) == {}


# =============================================================================
# service_settings
# =============================================================================


class TestServiceSettings:
    """service_settings 테스트."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("TEMPLATE_SERVICE_URL", raising=False)

        settings = service_settings({})

        assert settings == {
            "base_url": "http://localhost:5001",
            "upload_timeout": 30.0,
            "generate_timeout": 60.0,
        }

    def test_yaml_values(self, monkeypatch):
        monkeypatch.delenv("TEMPLATE_SERVICE_URL", raising=False)
        config = {"service": {"base_url": "http://svc:9000", "upload_timeout": 5}}

        settings = service_settings(config)

        assert settings["base_url"] == "http://svc:9000"
        assert settings["upload_timeout"] == 5.0

    def test_env_overrides_yaml(self, monkeypatch):
        monkeypatch.setenv("TEMPLATE_SERVICE_URL", "http://env:7000")

        settings = service_settings({"service": {"base_url": "http://svc:9000"}})

        assert settings["base_url"] == "http://env:7000"


# =============================================================================
# build_registry
# =============================================================================


class TestBuildRegistry:
    """build_registry 테스트."""

    def test_defaults(self, fake_service):
        registry = build_registry({}, fake_service)

        assert registry.max_sessions == 1000
        assert registry.logs_dir is None

    def test_relative_logs_dir(self, fake_service):
        registry = build_registry({"workflow": {"run_logs_dir": "logs/runs"}}, fake_service)

        assert registry.logs_dir == PROJECT_ROOT / "logs" / "runs"

    def test_absolute_logs_dir(self, fake_service, tmp_path: Path):
        registry = build_registry({"workflow": {"run_logs_dir": str(tmp_path)}}, fake_service)

        assert registry.logs_dir == tmp_path

    def test_max_sessions(self, fake_service):
        registry = build_registry({"sessions": {"max_sessions": 3}}, fake_service)

        assert registry.max_sessions == 3
