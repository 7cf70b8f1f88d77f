"""
Tests for rangeread/core/audit_logger.py
"""

import json
import sys

import pytest
from loguru import logger

from rangeread.core.audit_logger import audit_logger, configure_logging
from rangeread.core.config import Settings


@pytest.fixture
def audit_file(tmp_path):
    path = tmp_path / "logs" / "audit.log"
    configure_logging(Settings(audit_log=str(path)))
    yield path
    logger.remove()
    logger.add(sys.stderr)


def test_audit_entry_is_serialized(audit_file):
    audit_logger.log(cycle_id="c-1", event="ACCEPTED", data={"pair": ["1", "2"]})

    records = [json.loads(line) for line in audit_file.read_text(encoding="utf-8").splitlines()]
    message = records[-1]["record"]["message"]
    assert message.startswith("AUDIT | ")

    entry = json.loads(message[len("AUDIT | "):])
    assert entry["cycle_id"] == "c-1"
    assert entry["event"] == "ACCEPTED"
    assert entry["data"] == {"pair": ["1", "2"]}
