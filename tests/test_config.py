"""Tests for player.core.config.load_config."""

import os

import pytest

from player.core.config import load_config
from player.errors import ConfigError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for key in list(os.environ):
        if key.startswith("VIDEOSERVER_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)


def test_defaults_without_files():
    cfg = load_config("nothing-here")
    assert cfg.profile == "nothing-here"
    assert cfg.service_name == "MMM-VideoServerPlayer"
    assert cfg.resync_interval_s == 1.0
    assert cfg.videos == []
    assert cfg.shuffle is False


def test_profile_yaml_overrides(tmp_path):
    (tmp_path / "configs").mkdir()
    (tmp_path / "configs" / "mirror.yaml").write_text(
        "service_name: lobby\nport: 9000\nvideos: [a.mp4, b.mp4]\nshuffle: yes\nunknown_key: 1\n",
        encoding="utf-8",
    )
    cfg = load_config("mirror")
    assert (cfg.service_name, cfg.port, cfg.shuffle) == ("lobby", 9000, True)
    assert cfg.videos == ["a.mp4", "b.mp4"]
    assert not hasattr(cfg, "unknown_key")


def test_malformed_profile_yaml_is_ignored(tmp_path):
    (tmp_path / "configs").mkdir()
    (tmp_path / "configs" / "default.yaml").write_text("port: [unclosed\n", encoding="utf-8")
    assert load_config().port == 8090


def test_invalid_value_is_skipped(tmp_path):
    (tmp_path / "configs").mkdir()
    (tmp_path / "configs" / "default.yaml").write_text("port: eighty\nhost: 0.0.0.0\n", encoding="utf-8")
    cfg = load_config()
    assert cfg.port == 8090
    assert cfg.host == "0.0.0.0"


def test_env_overrides_yaml(tmp_path, monkeypatch):
    (tmp_path / "configs").mkdir()
    (tmp_path / "configs" / "default.yaml").write_text("port: 9000\n", encoding="utf-8")
    monkeypatch.setenv("VIDEOSERVER_PORT", "9100")
    monkeypatch.setenv("VIDEOSERVER_RESYNC_INTERVAL", "2.5")
    monkeypatch.setenv("VIDEOSERVER_VIDEOS", os.pathsep.join(["x.mp4", "y.mp4"]))
    monkeypatch.setenv("VIDEOSERVER_SHUFFLE", "true")
    cfg = load_config()
    assert cfg.port == 9100
    assert cfg.resync_interval_s == 2.5
    assert cfg.videos == ["x.mp4", "y.mp4"]
    assert cfg.shuffle is True


def test_unparsable_env_value_is_skipped(monkeypatch):
    monkeypatch.setenv("VIDEOSERVER_CHUNK_SIZE", "big")
    assert load_config().chunk_size == 64 * 1024


def test_explicit_path(tmp_path):
    p = tmp_path / "custom.yaml"
    p.write_text("advance_decrement_ms: 20\n", encoding="utf-8")
    assert load_config(path=p).advance_decrement_ms == 20


def test_explicit_missing_path_raises(tmp_path):
    with pytest.raises(ConfigError) as exc:
        load_config(path=tmp_path / "absent.yaml")
    assert exc.value.path.endswith("absent.yaml")
