"""Unit tests for structlog configuration."""

from __future__ import annotations

import json
import logging

import pytest
import structlog

from src.utils.logging import configure_logging, get_logger


@pytest.fixture(autouse=True)
def _reset_structlog():
    yield
    structlog.reset_defaults()
    logging.getLogger().handlers.clear()


class TestConfigureLogging:
    def test_json_output(self, capsys) -> None:
        configure_logging("INFO", json_output=True)
        structlog.get_logger(logger_name="test").info("chunk_stored", chunk_index=3)

        line = capsys.readouterr().out.strip().splitlines()[-1]
        payload = json.loads(line)
        assert payload["event"] == "chunk_stored"
        assert payload["chunk_index"] == 3
        assert payload["level"] == "info"

    def test_production_env_selects_json(self, capsys, monkeypatch) -> None:
        monkeypatch.setenv("APP_ENV", "production")
        configure_logging("INFO")
        structlog.get_logger().info("document_extracted", pages=2)

        assert json.loads(capsys.readouterr().out.strip().splitlines()[-1])["pages"] == 2

    def test_level_filtering(self, capsys) -> None:
        configure_logging("WARNING", json_output=True)
        logger = structlog.get_logger()
        logger.info("hidden_event")
        logger.warning("visible_event")

        out = capsys.readouterr().out
        assert "hidden_event" not in out
        assert "visible_event" in out

    def test_stdlib_logging_bridged(self, capsys) -> None:
        configure_logging("INFO", json_output=True)
        logging.getLogger("chromadb").warning("collection_slow")

        assert "collection_slow" in capsys.readouterr().out


class TestGetLogger:
    def test_configures_on_first_use(self) -> None:
        structlog.reset_defaults()
        logger = get_logger("src.services.ingestion")
        assert structlog.is_configured()
        assert logger is not None
