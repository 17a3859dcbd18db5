"""Tests for the service logging setup."""

import logging

from yaya_proxy.logging_config import SERVICE_LOGGER, setup_logging


def test_setup_logging_writes_under_log_dir(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("LOG_DIR", str(tmp_path / "service-logs"))

    log_file = setup_logging()
    logging.getLogger("yaya_proxy.retry_policy").warning("upstream unavailable")
    for handler in logging.getLogger(SERVICE_LOGGER).handlers:
        handler.flush()

    assert log_file == tmp_path / "service-logs" / "yaya_proxy.log"
    assert "upstream unavailable" in log_file.read_text(encoding="utf-8")


def test_setup_logging_does_not_stack_handlers() -> None:
    setup_logging()
    setup_logging()

    assert len(logging.getLogger(SERVICE_LOGGER).handlers) == 2
