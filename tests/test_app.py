import sys
import logging
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

import pytest
from flask import Flask

from app import main


@pytest.fixture
def restore_root_level():
    root = logging.getLogger()
    level = root.level
    try:
        yield root
    finally:
        root.setLevel(level)


def test_log_level_flag_reaches_root_logger(monkeypatch, restore_root_level):
    served = {}

    def fake_run(self, host=None, port=None, **kwargs):
        served["host"], served["port"] = host, port

    monkeypatch.setattr(Flask, "run", fake_run)

    main(["--log-level", "DEBUG", "--http-addr", ":9999"])

    assert restore_root_level.level == logging.DEBUG
    assert served == {"host": "0.0.0.0", "port": 9999}
