"""Tests for publisher configuration module."""

import pytest

from artifact_publisher.utils.config import (
    ConfigSource,
    ConfigVar,
    PublisherConfig,
    get_config,
    get_log_format,
    get_log_level,
    get_metrics_enabled,
    is_dry_run,
)


@pytest.fixture
def dirs(tmp_path):
    project = tmp_path / "project"
    home = tmp_path / "home"
    project.mkdir()
    home.mkdir()
    return project, home


class TestConfigSource:
    """Test value precedence: environment > project file > home file."""

    def test_environment_wins(self, monkeypatch, dirs):
        project, home = dirs
        (project / ".publisher.env").write_text("GCS_BUCKET=project-bucket\n")
        (home / ".publisher.env").write_text("GCS_BUCKET=home-bucket\n")
        monkeypatch.setenv("GCS_BUCKET", "env-bucket")

        assert ConfigSource(project, home).read("GCS_BUCKET") == "env-bucket"

    def test_project_file_beats_home_file(self, monkeypatch, dirs):
        project, home = dirs
        monkeypatch.delenv("GCS_BUCKET", raising=False)
        (project / ".publisher.env").write_text("GCS_BUCKET=project-bucket\n")
        (home / ".publisher.env").write_text("GCS_BUCKET=home-bucket\n")

        assert ConfigSource(project, home).read("GCS_BUCKET") == "project-bucket"

    def test_home_file_used_last(self, monkeypatch, dirs):
        project, home = dirs
        monkeypatch.delenv("GCS_BUCKET", raising=False)
        (home / ".publisher.env").write_text("GCS_BUCKET=home-bucket\n")

        assert ConfigSource(project, home).read("GCS_BUCKET") == "home-bucket"

    def test_missing_value(self, monkeypatch, dirs):
        monkeypatch.delenv("NOT_A_REAL_SETTING", raising=False)
        assert ConfigSource(*dirs).read("NOT_A_REAL_SETTING") is None

    def test_empty_environment_value_falls_through(self, monkeypatch, dirs):
        project, home = dirs
        monkeypatch.setenv("GCS_BUCKET", "")
        (project / ".publisher.env").write_text("GCS_BUCKET=project-bucket\n")

        assert ConfigSource(project, home).read("GCS_BUCKET") == "project-bucket"


class TestConfigVar:
    """Test ConfigVar lookups."""

    def test_reads_current_name(self, monkeypatch, dirs):
        monkeypatch.setenv("NEW_NAME", "value")
        assert ConfigVar("NEW_NAME", legacy_name="OLD_NAME").read(ConfigSource(*dirs)) == "value"

    def test_current_name_beats_legacy(self, monkeypatch, dirs):
        monkeypatch.setenv("NEW_NAME", "new")
        monkeypatch.setenv("OLD_NAME", "old")
        assert ConfigVar("NEW_NAME", legacy_name="OLD_NAME").read(ConfigSource(*dirs)) == "new"

    def test_falls_back_to_legacy(self, monkeypatch, dirs, caplog):
        monkeypatch.delenv("NEW_NAME", raising=False)
        monkeypatch.setenv("OLD_NAME", "old")

        assert ConfigVar("NEW_NAME", legacy_name="OLD_NAME").read(ConfigSource(*dirs)) == "old"
        assert "deprecated" in caplog.text


class TestIsDryRun:
    """Test the process-wide dry-run flag."""

    @pytest.mark.parametrize("value", ["true", "1", "yes", "TRUE", "anything"])
    def test_enabled(self, monkeypatch, value):
        monkeypatch.setenv("DRY_RUN", value)
        assert is_dry_run() is True

    @pytest.mark.parametrize("value", ["", "false", "0", "no", "False"])
    def test_disabled(self, monkeypatch, value):
        monkeypatch.setenv("DRY_RUN", value)
        assert is_dry_run() is False

    def test_unset(self):
        assert is_dry_run() is False


class TestPublisherConfig:
    """Test PublisherConfig dataclass and loading."""

    def test_config_creation(self):
        config = PublisherConfig(bucket_name="release-bucket")

        assert config.bucket_name == "release-bucket"
        assert config.credentials_json_var.name == "GCS_CREDENTIALS_JSON"
        assert config.credentials_path_var.name == "GCS_CREDENTIALS_PATH"
        assert config.credentials_path_var.legacy_name == "GOOGLE_APPLICATION_CREDENTIALS"
        assert config.log_level == "INFO"
        assert config.log_format == "text"
        assert config.metrics_enabled is True

    def test_from_env_missing_required(self, monkeypatch, dirs):
        monkeypatch.delenv("GCS_BUCKET", raising=False)

        with pytest.raises(ValueError, match="GCS_BUCKET is required"):
            PublisherConfig.from_env(ConfigSource(*dirs))

    def test_from_env_with_all_vars(self, monkeypatch, dirs):
        monkeypatch.setenv("GCS_BUCKET", "env-bucket")
        monkeypatch.setenv("PUBLISHER_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("METRICS_ENABLED", "false")

        config = PublisherConfig.from_env(ConfigSource(*dirs))

        assert config.bucket_name == "env-bucket"
        assert config.log_level == "DEBUG"
        assert config.metrics_enabled is False

    def test_from_project_file(self, monkeypatch, dirs):
        project, home = dirs
        monkeypatch.delenv("GCS_BUCKET", raising=False)
        monkeypatch.delenv("PUBLISHER_LOG_LEVEL", raising=False)
        (project / ".publisher.env").write_text(
            "GCS_BUCKET=file-bucket\nPUBLISHER_LOG_LEVEL=WARNING\n"
        )

        config = PublisherConfig.from_env(ConfigSource(project, home))

        assert config.bucket_name == "file-bucket"
        assert config.log_level == "WARNING"
        assert get_log_level(ConfigSource(project, home)) == "WARNING"

    def test_get_config_singleton(self, monkeypatch):
        monkeypatch.setenv("GCS_BUCKET", "singleton-bucket")

        import artifact_publisher.utils.config as config_module

        monkeypatch.setattr(config_module, "_config", None)

        config1 = get_config()
        config2 = get_config()

        assert config1 is config2
        assert config1.bucket_name == "singleton-bucket"

    def test_logging_and_metrics_settings_from_project_file(self, monkeypatch, dirs):
        project, home = dirs
        for name in ("GCS_BUCKET", "LOG_FORMAT", "METRICS_ENABLED"):
            monkeypatch.delenv(name, raising=False)
        (project / ".publisher.env").write_text(
            "GCS_BUCKET=file-bucket\nLOG_FORMAT=JSON\nMETRICS_ENABLED=false\n"
        )
        source = ConfigSource(project, home)

        config = PublisherConfig.from_env(source)

        assert config.log_format == "json"
        assert config.metrics_enabled is False
        assert get_log_format(source) == "json"
        assert get_metrics_enabled(source) is False

    def test_logging_and_metrics_defaults(self, monkeypatch, dirs):
        monkeypatch.delenv("LOG_FORMAT", raising=False)
        monkeypatch.delenv("METRICS_ENABLED", raising=False)
        source = ConfigSource(*dirs)

        assert get_log_format(source) == "text"
        assert get_metrics_enabled(source) is True
