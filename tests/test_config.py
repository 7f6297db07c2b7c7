"""Tests for the configuration model and INI config manager."""

import pytest

from framefetch.exceptions import ConfigurationError
from framefetch.models.config import ClientConfig
from framefetch.storage.config_manager import ConfigManager


def test_missing_file_gives_defaults(tmp_path):
    config = ConfigManager(tmp_path / "absent.ini").load_config()
    assert config.base_url == ""
    assert config.connect_timeout == 15.0
    assert config.buffer_size is None
    assert config.config_path == str(tmp_path)


def test_save_then_load_round_trip(tmp_path):
    path = tmp_path / "sub" / "config.ini"
    manager = ConfigManager(path)
    manager.save_new_config(
        {"base_url": "http://host:8080/stream/", "buffer_size": 1024}
    )

    config = ConfigManager(path).load_config()
    assert config.base_url == "http://host:8080/stream"
    assert config.buffer_size == 1024
    assert config.json_log_dir is None
    assert config.read_timeout == 30.0


def test_cli_options_override_file(tmp_path):
    path = tmp_path / "config.ini"
    path.write_text("[DEFAULT]\nbase_url = http://a/stream\nread_timeout = 5\n")

    config = ConfigManager(path).load_config(
        {"base_url": "https://b/stream", "read_timeout": None}
    )
    assert config.base_url == "https://b/stream"
    assert config.read_timeout == 5.0


@pytest.mark.parametrize(
    "content",
    [
        "[DEFAULT]\nbase_url = ftp://host/stream\n",
        "[DEFAULT]\nconnect_timeout = fast\n",
        "[DEFAULT]\nconnect_timeout = 90\n",
        "[DEFAULT]\nbuffer_size = -1\n",
        "not an ini file",
    ],
)
def test_invalid_config_raises(tmp_path, content):
    path = tmp_path / "config.ini"
    path.write_text(content)
    with pytest.raises(ConfigurationError):
        ConfigManager(path).load_config()


def test_zero_buffer_size_disables_reuse():
    assert ClientConfig(buffer_size=0).buffer_size is None


def test_base_url_rejects_query_string():
    with pytest.raises(ValueError):
        ClientConfig(base_url="http://host/stream?pts=1")
