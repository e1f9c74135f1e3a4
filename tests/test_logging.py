"""
Tests for structured operation logging.
"""

import logging

import pytest

from semstore.core.errors import DimensionMismatchError, NotOpenError
from semstore.util.logging import StructuredLogger, sanitize_details


@pytest.fixture
def structured_logger():
    return StructuredLogger("semstore.test")


def test_log_operation_format(structured_logger, caplog):
    with caplog.at_level(logging.INFO, logger="semstore.test"):
        structured_logger.log_operation("store.insert", "success", {"record_id": "abc"})

    assert "Operation: store.insert, Status: success, Details: {'record_id': 'abc'}" in caplog.text


def test_failed_operation_logs_warning(structured_logger, caplog):
    with caplog.at_level(logging.INFO, logger="semstore.test"):
        structured_logger.log_failure("store.insert", DimensionMismatchError(4, 3), {"items": 1})

    record = caplog.records[-1]
    assert record.levelno == logging.WARNING
    assert "'kind': 'DimensionMismatch'" in record.getMessage()
    assert "'items': 1" in record.getMessage()


def test_log_store_operation_truncates_content(structured_logger, caplog):
    with caplog.at_level(logging.INFO, logger="semstore.test"):
        structured_logger.log_store_operation("id-1", "x" * 80, 4, sanitized=2)

    message = caplog.records[-1].getMessage()
    assert "x" * 50 + "..." in message
    assert "x" * 51 not in message
    assert "'sanitized_components': 2" in message


def test_log_status(structured_logger, caplog):
    with caplog.at_level(logging.INFO, logger="semstore.test"):
        structured_logger.log_status("Stored 3/3 records")

    assert "Status: Stored 3/3 records" in caplog.text


def test_store_failures_are_logged(tmp_path, caplog):
    from semstore import EmbeddingStore

    store = EmbeddingStore(db_path=str(tmp_path / "log.db"), dimension=4)
    with caplog.at_level(logging.INFO, logger="semstore"):
        with pytest.raises(NotOpenError):
            store.search([1, 0, 0, 0], k=1)

    assert "Operation: index.search, Status: failed" in caplog.text
    assert "'kind': 'NotOpen'" in caplog.text


def test_sanitize_details():
    details = {
        "vector": [0.1, 0.2],
        "query_vector": [0.3],
        "content": "y" * 150,
        "k": 5,
    }
    sanitized = sanitize_details(details)

    assert sanitized["vector"] == "[REDACTED]"
    assert sanitized["query_vector"] == "[REDACTED]"
    assert sanitized["content"] == "y" * 100 + "..."
    assert sanitized["k"] == 5


def test_sanitize_details_custom_fields():
    sanitized = sanitize_details({"content": "secret", "k": 1}, sensitive_fields=["content"])
    assert sanitized == {"content": "[REDACTED]", "k": 1}


def test_logger_level_follows_config(monkeypatch):
    from semstore.core import config

    monkeypatch.delenv("DEBUG", raising=False)
    monkeypatch.setattr(config, "LOG_LEVEL", "WARNING")
    assert StructuredLogger("semstore.test.level").logger.level == logging.WARNING

    monkeypatch.setenv("DEBUG", "true")
    assert StructuredLogger("semstore.test.debug").logger.level == logging.DEBUG
