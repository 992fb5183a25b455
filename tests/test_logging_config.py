import logging
import sys

import pytest

from mip_benders.logging_config import _DebugFileHandler, _StdoutTee, setup_logging


@pytest.fixture
def clean_root(monkeypatch):
    root = logging.getLogger()
    level = root.level
    monkeypatch.setattr(sys, "stdout", sys.stdout)
    yield root
    for h in list(root.handlers):
        if isinstance(h, _DebugFileHandler):
            root.removeHandler(h)
            h.close()
    root.setLevel(level)


def test_info_level_writes_no_file(tmp_path, clean_root):
    assert setup_logging("INFO", tmp_path / "logs") is None
    assert not (tmp_path / "logs").exists()


def test_debug_file_is_installed_once(tmp_path, clean_root):
    first = setup_logging("DEBUG", tmp_path)
    stdout = sys.stdout
    second = setup_logging("DEBUG", tmp_path / "elsewhere")
    assert first is not None and first.exists()
    assert second == first
    assert sys.stdout is stdout
    assert isinstance(sys.stdout, _StdoutTee)
    handlers = [h for h in clean_root.handlers if isinstance(h, _DebugFileHandler)]
    assert len(handlers) == 1

    logging.getLogger("mip_benders.test").debug("hello from the loop")
    print("printed line")
    handlers[0].flush()
    text = first.read_text(encoding="utf-8")
    assert "hello from the loop" in text
    assert "printed line" in text


def test_tee_survives_closed_log_file(tmp_path, clean_root):
    setup_logging("DEBUG", tmp_path)
    handler = next(h for h in clean_root.handlers if isinstance(h, _DebugFileHandler))
    handler.close()
    print("after close")
