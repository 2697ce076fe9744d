import logging

import pytest

from ordering.utils.logging import configure_logging, get_log_level, get_logger


@pytest.fixture
def restore_logging():
    yield
    configure_logging()


class TestLogLevel:
    @pytest.mark.parametrize(
        "environment, level",
        [("production", "INFO"), ("development", "DEBUG"), ("test", "WARNING"), ("unknown", "INFO")],
    )
    def test_level_follows_environment(self, monkeypatch, environment, level):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        monkeypatch.setenv("ENVIRONMENT", environment)

        assert get_log_level() == level

    def test_explicit_level_wins(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.setenv("LOG_LEVEL", "error")

        assert get_log_level() == "ERROR"


@pytest.mark.usefixtures("restore_logging")
class TestConfigureLogging:
    def test_console_only_without_log_dir(self, monkeypatch):
        monkeypatch.delenv("ORDERING_LOG_DIR", raising=False)

        configure_logging()

        assert len(logging.getLogger().handlers) == 1

    def test_writes_rotating_file_when_log_dir_given(self, monkeypatch, tmp_path):
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.delenv("LOG_LEVEL", raising=False)

        configure_logging(tmp_path / "logs")
        get_logger("ordering.tests").warning("order_cancelled", order_id="ord-1", reason_text="تأخر الشحن")

        content = (tmp_path / "logs" / "ordering.log").read_text(encoding="utf-8")
        assert '"order_id": "ord-1"' in content
        assert "تأخر الشحن" in content
