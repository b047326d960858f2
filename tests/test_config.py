import json
import os

import pytest
from pydantic import ValidationError

from utilkit.core.config import (
    IdConfig,
    LogLevel,
    Settings,
    UploadConfig,
    load_config_from_file,
    load_settings,
    locate_config_file,
)


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_defaults(workdir):
    settings = load_settings(Settings)

    assert settings.app.name == "utilkit"
    assert settings.id.machine_id == 1
    assert settings.export.export_path == "exports"
    assert settings.upload.allowed_extensions == [".png", ".jpg", ".jpeg"]
    assert settings.minio is None
    assert settings.log.level == LogLevel.INFO


def test_environment_overrides_defaults(workdir, monkeypatch):
    monkeypatch.setenv("UTILKIT_ID__MACHINE_ID", "5")
    monkeypatch.setenv("UTILKIT_APP__NAME", "billing")

    settings = load_settings(Settings)

    assert settings.id.machine_id == 5
    assert settings.app.name == "billing"


def test_yaml_file_overrides_environment(workdir, monkeypatch):
    monkeypatch.setenv("UTILKIT_ID__MACHINE_ID", "5")
    (workdir / "config.yaml").write_text(
        "id:\n  machine_id: 12\nupload:\n  live: true\n", encoding="utf-8"
    )

    settings = load_settings(Settings)

    assert settings.id.machine_id == 12
    assert settings.upload.stage_dir == "live"


def test_explicit_json_file(workdir):
    path = workdir / "custom.json"
    path.write_text(
        json.dumps(
            {
                "minio": {
                    "endpoint": "cdn.example.com",
                    "access_key": "key",
                    "secret_key": "secret",
                    "base_url": "https://cdn.example.com",
                }
            }
        ),
        encoding="utf-8",
    )

    settings = load_settings(Settings, config_path=str(path))

    assert settings.minio is not None
    assert settings.minio.get_endpoint_url() == "https://cdn.example.com"


def test_env_file_is_loaded(workdir):
    env_file = workdir / "local.env"
    env_file.write_text("UTILKIT_APP__DEBUG=true\n", encoding="utf-8")

    try:
        settings = load_settings(Settings, env_file=str(env_file))
    finally:
        os.environ.pop("UTILKIT_APP__DEBUG", None)

    assert settings.is_debug is True


def test_invalid_machine_id_in_config_file(workdir):
    (workdir / "config.yaml").write_text("id:\n  machine_id: 40\n", encoding="utf-8")

    with pytest.raises(ValidationError):
        load_settings(Settings)


@pytest.mark.parametrize("machine_id", [-1, 32])
def test_id_config_validates_range(machine_id):
    with pytest.raises(ValidationError):
        IdConfig(machine_id=machine_id)


def test_broken_yaml_is_ignored(workdir):
    (workdir / "config.yaml").write_text("id: [unclosed", encoding="utf-8")
    assert load_config_from_file() == {}


def test_locate_config_file_prefers_explicit_path(workdir):
    explicit = workdir / "nested" / "config.yaml"
    explicit.parent.mkdir()
    explicit.write_text("{}", encoding="utf-8")
    (workdir / "config.yaml").write_text("{}", encoding="utf-8")

    assert locate_config_file("config.yaml", str(explicit)) == explicit
    assert locate_config_file("config.yaml") == workdir / "config.yaml"


def test_upload_stage_dir():
    assert UploadConfig().stage_dir == "test"
    assert UploadConfig(live=True).stage_dir == "live"
