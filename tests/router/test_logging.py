"""Tests for logging configuration."""

import sys

from loguru import logger

from intent_router.complexity import score_query_complexity
from intent_router.utils.logging import configure_logging


def test_file_sink_records_routing_decisions(tmp_path):
    """Test the file sink keeps DEBUG routing logs."""
    log_file = tmp_path / "logs" / "router.log"
    try:
        configure_logging(level="ERROR", log_file=log_file)
        score_query_complexity("Hello!")
    finally:
        # Flushes the enqueued file sink
        logger.remove()
        logger.add(sys.stderr)

    content = log_file.read_text()
    assert "Logging initialized. Console level: ERROR" in content
    assert "Complexity" in content
