"""
Unit tests for the logging helpers.
"""

import logging

import pytest
from structlog.testing import capture_logs

from lens.logging_config import get_log_level, log_context, log_security_event, log_user_action


class TestLogLevel:
    @pytest.mark.parametrize(("name", "level"), [("debug", logging.DEBUG), ("ERROR", logging.ERROR)])
    def test_known_levels(self, monkeypatch, name, level):
        monkeypatch.setenv("LOG_LEVEL", name)

        assert get_log_level() == level

    def test_unknown_level_falls_back_to_info(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "chatty")

        assert get_log_level() == logging.INFO


class TestAuditLogging:
    def test_user_action(self):
        with capture_logs() as logs:
            log_user_action("user-1", "album_created", album_id="a1")

        assert logs == [
            {
                "event": "user_action",
                "log_level": "info",
                "user_id": "user-1",
                "action": "album_created",
                "album_id": "a1",
            }
        ]

    def test_security_event(self):
        with capture_logs() as logs:
            log_security_event("sign_in_failed", context={"email_known": False})

        assert logs[0]["log_level"] == "warning"
        assert logs[0]["event_type"] == "sign_in_failed"


class TestLogContext:
    def test_binds_context(self):
        with capture_logs() as logs:
            with log_context(command="import_album", owner_id="user-1") as log:
                log.info("album_imported", album_id="a1")

        assert logs[0]["event"] == "album_imported"
        assert logs[0]["command"] == "import_album"
        assert logs[0]["owner_id"] == "user-1"

    def test_logs_escaping_exception(self):
        with capture_logs() as logs:
            with pytest.raises(RuntimeError):
                with log_context(command="import_album"):
                    raise RuntimeError("bucket unavailable")

        assert logs[-1]["event"] == "context_exception"
        assert logs[-1]["exception_type"] == "RuntimeError"
        assert logs[-1]["command"] == "import_album"
