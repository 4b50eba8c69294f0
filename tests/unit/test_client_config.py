"""Tests for the TOML-backed client configuration."""

from __future__ import annotations

import pathlib

import pytest

from offline_sync.client_config import (
    DEFAULT_SERVER_URL,
    ClientConfig,
    ConnectivityMode,
    get_config,
    get_offline_sync_dir,
    reset_config,
    validate_server_url,
)


class TestDataDir:
    def test_env_override(self, tmp_path: pathlib.Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OFFLINE_SYNC_DIR", str(tmp_path / "custom"))
        assert get_offline_sync_dir() == tmp_path / "custom"

    def test_default_in_home(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("OFFLINE_SYNC_DIR", raising=False)
        assert get_offline_sync_dir() == pathlib.Path.home() / ".offline-sync"


class TestLoadSave:
    def test_load_creates_default_file(self, tmp_path: pathlib.Path) -> None:
        config_path = tmp_path / "config.toml"

        config = ClientConfig.load(config_path)

        assert config_path.exists()
        assert config.remote.server_url == DEFAULT_SERVER_URL
        assert config.connectivity.mode == ConnectivityMode.PROBE
        assert config.sync.sync_on_reconnect is True
        assert config.db_path == tmp_path / "records.db"

    def test_roundtrip_through_toml(self, tmp_path: pathlib.Path) -> None:
        config = ClientConfig(data_dir=tmp_path)
        config.remote.server_url = "https://records.example.com"
        config.remote.timeout = 5.0
        config.connectivity.mode = ConnectivityMode.OFFLINE
        config.connectivity.probe_interval = 3.0
        config.sync.sync_on_reconnect = False
        config.sync.status_history = 10
        config.save()

        loaded = ClientConfig.load(tmp_path / "config.toml")

        assert loaded.to_dict() == config.to_dict()

    def test_missing_sections_use_defaults(self, tmp_path: pathlib.Path) -> None:
        (tmp_path / "config.toml").write_text('[remote]\nserver_url = "http://h:1"\n')

        config = ClientConfig.load(tmp_path / "config.toml")

        assert config.remote.server_url == "http://h:1"
        assert config.remote.timeout == 10.0
        assert config.connectivity.probe_interval == 15.0

    def test_unknown_mode_falls_back_to_probe(self, tmp_path: pathlib.Path) -> None:
        (tmp_path / "config.toml").write_text('[connectivity]\nmode = "carrier-pigeon"\n')

        config = ClientConfig.load(tmp_path / "config.toml")

        assert config.connectivity.mode == ConnectivityMode.PROBE

    def test_save_leaves_no_temp_files(self, tmp_path: pathlib.Path) -> None:
        ClientConfig(data_dir=tmp_path).save()
        assert [p.name for p in tmp_path.iterdir()] == ["config.toml"]


class TestSetters:
    def test_set_server_persists(self, tmp_path: pathlib.Path) -> None:
        config = ClientConfig(data_dir=tmp_path)

        config.set_server("http://10.0.0.5:8000/")

        loaded = ClientConfig.load(tmp_path / "config.toml")
        assert loaded.remote.server_url == "http://10.0.0.5:8000"

    @pytest.mark.parametrize(
        "url", ["ftp://host", "localhost:8000", 'http://evil"\nmode = "x', "http://a b"]
    )
    def test_set_server_rejects_invalid(self, tmp_path: pathlib.Path, url: str) -> None:
        config = ClientConfig(data_dir=tmp_path)
        with pytest.raises(ValueError):
            config.set_server(url)

    def test_set_mode(self, tmp_path: pathlib.Path) -> None:
        config = ClientConfig(data_dir=tmp_path)
        config.set_mode("online")

        loaded = ClientConfig.load(tmp_path / "config.toml")
        assert loaded.connectivity.mode == ConnectivityMode.ONLINE

    def test_set_mode_invalid(self, tmp_path: pathlib.Path) -> None:
        with pytest.raises(ValueError):
            ClientConfig(data_dir=tmp_path).set_mode("sometimes")

    def test_validate_strips_trailing_slash(self) -> None:
        assert validate_server_url(" http://h:1/ ") == "http://h:1"


class TestSingleton:
    def test_get_config_cached_until_reload(self) -> None:
        reset_config()
        first = get_config()
        assert get_config() is first
        assert get_config(reload=True) is not first
