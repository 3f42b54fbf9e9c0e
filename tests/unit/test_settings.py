"""Unit tests for settings models and loader."""

import json
from pathlib import Path
from tempfile import TemporaryDirectory

import pytest

from src.commons.settings.loader import (
    SettingsLoader,
    _deep_merge,
    get_settings,
    reset_settings,
)
from src.commons.settings.models import (
    AppSettings,
    AuthSettings,
    BlobStorageSettings,
    MetadataDBSettings,
    ServerSettings,
    Settings,
    TelemetrySettings,
    TranscodingSettings,
    UploadSettings,
)


class TestAppSettings:
    """Tests for AppSettings model."""

    def test_default_values(self):
        settings = AppSettings()
        assert settings.name == "video-vault-server"
        assert settings.environment == "dev"
        assert settings.debug is False
        assert settings.log_level == "INFO"

    def test_invalid_environment(self):
        with pytest.raises(ValueError):
            AppSettings(environment="invalid")  # type: ignore[arg-type]


class TestServerSettings:
    """Tests for ServerSettings model."""

    def test_default_values(self):
        settings = ServerSettings()
        assert settings.port == 3000
        assert settings.api_prefix == "/api"
        assert settings.cors_origins == ["*"]

    def test_port_validation(self):
        with pytest.raises(ValueError):
            ServerSettings(port=0)
        with pytest.raises(ValueError):
            ServerSettings(port=70000)


class TestBlobStorageSettings:
    """Tests for BlobStorageSettings model."""

    def test_default_values(self):
        settings = BlobStorageSettings()
        assert settings.bucket == "videos"
        assert settings.raw_prefix == "raw"
        assert settings.processed_prefix == "processed"
        assert settings.presigned_url_expiry_seconds == 3600

    def test_expiry_bounds(self):
        with pytest.raises(ValueError):
            BlobStorageSettings(presigned_url_expiry_seconds=0)
        with pytest.raises(ValueError):
            BlobStorageSettings(presigned_url_expiry_seconds=604801)


class TestMetadataDBSettings:
    """Tests for MetadataDBSettings model."""

    def test_defaults_to_postgres(self):
        settings = MetadataDBSettings()
        assert settings.provider == "postgres"
        assert settings.table == "videos"
        assert settings.url is None

    def test_invalid_provider(self):
        with pytest.raises(ValueError):
            MetadataDBSettings(provider="sqlite")  # type: ignore[arg-type]


class TestUploadSettings:
    """Tests for UploadSettings model."""

    def test_default_limit(self):
        settings = UploadSettings()
        assert settings.max_upload_mb == 200
        assert settings.max_upload_bytes == 200 * 1024 * 1024
        assert settings.allowed_mime_pattern == "^video/"

    def test_custom_limit(self):
        assert UploadSettings(max_upload_mb=5).max_upload_bytes == 5 * 1024 * 1024


class TestOtherSections:
    """Defaults of the remaining sections."""

    def test_transcoding(self):
        settings = TranscodingSettings()
        assert settings.ffmpeg_path == "ffmpeg"
        assert settings.timeout_seconds == 900

    def test_auth(self):
        settings = AuthSettings()
        assert settings.algorithm == "HS256"
        assert settings.owner_claim == "sub"

    def test_telemetry(self):
        settings = TelemetrySettings()
        assert settings.log_format == "json"

    def test_root_settings(self):
        settings = Settings()
        assert isinstance(settings.upload, UploadSettings)
        assert isinstance(settings.metadata_db, MetadataDBSettings)


class TestSettingsLoader:
    """Tests for SettingsLoader."""

    def test_missing_files_give_defaults(self):
        with TemporaryDirectory() as tmpdir:
            loader = SettingsLoader(config_dir=Path(tmpdir), environ={})
            settings = loader.load()
            assert settings.server.port == 3000
            assert settings.blob_storage.bucket == "videos"

    def test_load_base_config(self):
        with TemporaryDirectory() as tmpdir:
            config_dir = Path(tmpdir)
            base_config = {
                "app": {"name": "test-app"},
                "blob_storage": {"bucket": "media"},
            }
            (config_dir / "appsettings.json").write_text(json.dumps(base_config))

            settings = SettingsLoader(config_dir=config_dir, environ={}).load()
            assert settings.app.name == "test-app"
            assert settings.blob_storage.bucket == "media"

    def test_environment_file_overrides_base(self):
        with TemporaryDirectory() as tmpdir:
            config_dir = Path(tmpdir)
            (config_dir / "appsettings.json").write_text(
                json.dumps({"upload": {"max_upload_mb": 200}, "server": {"port": 3000}})
            )
            (config_dir / "appsettings.prod.json").write_text(
                json.dumps({"upload": {"max_upload_mb": 50}})
            )

            loader = SettingsLoader(
                config_dir=config_dir, environment="prod", environ={}
            )
            settings = loader.load()

            assert settings.upload.max_upload_mb == 50
            assert settings.server.port == 3000

    def test_environment_variables_win(self):
        with TemporaryDirectory() as tmpdir:
            config_dir = Path(tmpdir)
            (config_dir / "appsettings.json").write_text(
                json.dumps({"transcoding": {"timeout_seconds": 900}})
            )
            environ = {
                "VIDEO_VAULT__TRANSCODING__TIMEOUT_SECONDS": "60",
                "VIDEO_VAULT__SERVER__CORS_ORIGINS": '["https://example.com"]',
                "UNRELATED": "ignored",
            }

            settings = SettingsLoader(config_dir=config_dir, environ=environ).load()

            assert settings.transcoding.timeout_seconds == 60
            assert settings.server.cors_origins == ["https://example.com"]

    def test_numeric_looking_strings_stay_strings(self):
        with TemporaryDirectory() as tmpdir:
            environ = {"VIDEO_VAULT__METADATA_DB__PASSWORD": "12345"}
            settings = SettingsLoader(config_dir=Path(tmpdir), environ=environ).load()
            assert settings.metadata_db.password == "12345"

    def test_environment_name_from_environ(self):
        loader = SettingsLoader(environ={"VIDEO_VAULT__APP__ENVIRONMENT": "staging"})
        assert loader.environment == "staging"

    def test_deep_merge(self):
        base = {"a": {"b": 1, "c": 2}, "d": 3}
        override = {"a": {"b": 10, "e": 4}, "f": 5}

        result = _deep_merge(base, override)

        assert result == {"a": {"b": 10, "c": 2, "e": 4}, "d": 3, "f": 5}
        assert base == {"a": {"b": 1, "c": 2}, "d": 3}


class TestGetSettings:
    """Tests for get_settings function."""

    def setup_method(self):
        reset_settings()

    def teardown_method(self):
        reset_settings()

    def test_get_settings_cached(self):
        with TemporaryDirectory() as tmpdir:
            settings1 = get_settings(config_dir=Path(tmpdir))
            settings2 = get_settings(config_dir=Path(tmpdir))
            assert settings1 is settings2

    def test_get_settings_reload(self):
        with TemporaryDirectory() as tmpdir:
            settings1 = get_settings(config_dir=Path(tmpdir))
            settings2 = get_settings(config_dir=Path(tmpdir), reload=True)
            assert settings1 is not settings2
