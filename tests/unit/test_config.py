"""
Unit tests for configuration and logging setup
"""
import json
import logging

from learnlink.config import LearnLinkConfig
from learnlink.logging_config import JSONFormatter, get_logger, set_route, set_user_id, setup_logging


def test_relative_files_live_in_config_dir(tmp_path):
    config = LearnLinkConfig(config_dir=str(tmp_path), api_base_url="http://api:5000/")

    assert config.session_file == str(tmp_path / "session.json")
    assert config.log_file == str(tmp_path / "learnlink.log")
    assert config.api_base_url == "http://api:5000"


def test_environment_overrides(tmp_path, monkeypatch):
    monkeypatch.setenv("LEARNLINK_CONFIG_DIR", str(tmp_path))
    monkeypatch.setenv("VITE_API_URL", "http://vite:5000")
    monkeypatch.setenv("LEARNLINK_TIMEOUT", "5")
    monkeypatch.setenv("LEARNLINK_JSON_LOGS", "yes")
    monkeypatch.delenv("LEARNLINK_API_URL", raising=False)

    config = LearnLinkConfig.load_default()

    assert config.config_dir == str(tmp_path)
    assert config.api_base_url == "http://vite:5000"
    assert config.timeout == 5.0
    assert config.json_logs is True


def test_client_specific_url_wins(tmp_path, monkeypatch):
    monkeypatch.setenv("LEARNLINK_CONFIG_DIR", str(tmp_path))
    monkeypatch.setenv("VITE_API_URL", "http://vite:5000")
    monkeypatch.setenv("LEARNLINK_API_URL", "http://cli:5000")

    assert LearnLinkConfig.load_default().api_base_url == "http://cli:5000"


def test_config_file_is_read(tmp_path, monkeypatch):
    monkeypatch.setenv("LEARNLINK_CONFIG_DIR", str(tmp_path))
    for name in ("VITE_API_URL", "LEARNLINK_API_URL", "LEARNLINK_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
    (tmp_path / "config.json").write_text(json.dumps({"api_base_url": "http://file:5000", "timeout": 12}))

    config = LearnLinkConfig.load_default()

    assert config.api_base_url == "http://file:5000"
    assert config.timeout == 12


def test_log_file_gets_route_and_user(tmp_path):
    config = LearnLinkConfig(config_dir=str(tmp_path), log_level="DEBUG")
    setup_logging(config)

    set_route("/parent/bookings")
    set_user_id("u42")
    get_logger("learnlink.test").info("Bookings opened")
    for handler in logging.getLogger("learnlink").handlers:
        handler.flush()

    text = (tmp_path / "learnlink.log").read_text()
    assert "[/parent/bookings] [u42]" in text
    assert "Bookings opened" in text
    assert logging.getLogger("httpx").level == logging.WARNING


def test_json_formatter_adds_context_and_extras():
    set_route("/admin/disputes")
    set_user_id("admin1")
    record = logging.LogRecord("learnlink.api", logging.WARNING, __file__, 1, "Request failed", None, None)
    record.http_status = 500

    data = json.loads(JSONFormatter().format(record))

    assert data["message"] == "Request failed"
    assert data["route"] == "/admin/disputes"
    assert data["user_id"] == "admin1"
    assert data["http_status"] == 500


def test_loggers_have_structured_helpers():
    logger = get_logger("learnlink.somewhere")
    assert hasattr(logger, "log_request")
    assert hasattr(logger, "log_auth_event")


def test_saved_config_is_picked_up_again(tmp_path, monkeypatch):
    monkeypatch.setenv("LEARNLINK_CONFIG_DIR", str(tmp_path))
    for name in ("VITE_API_URL", "LEARNLINK_API_URL", "LEARNLINK_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
    config = LearnLinkConfig(config_dir=str(tmp_path), api_base_url="http://saved:5000", timeout=9)

    config.save_to_file()

    assert json.loads((tmp_path / "config.json").read_text())["api_base_url"] == "http://saved:5000"
    reloaded = LearnLinkConfig.load_default()
    assert reloaded.api_base_url == "http://saved:5000"
    assert reloaded.timeout == 9
