from __future__ import annotations

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional, TextIO

LOG_FORMAT = "%(asctime)s %(levelname)s | %(name)s | %(message)s"


class _StdoutTee:
    """Write-through of stdout into the DEBUG log file."""

    def __init__(self, primary: TextIO, handler: logging.FileHandler):
        self.primary = primary
        self.handler = handler

    def write(self, s: str) -> int:
        self.primary.write(s)
        # stream is None once logging.shutdown has closed the file
        if self.handler.stream is not None:
            self.handler.stream.write(s)
        return len(s)

    def flush(self) -> None:
        self.primary.flush()
        if self.handler.stream is not None:
            self.handler.stream.flush()

    def __getattr__(self, name: str):
        return getattr(self.primary, name)


class _DebugFileHandler(logging.FileHandler):
    """File handler of the DEBUG log; closed by `logging.shutdown` at exit."""


def _debug_handler() -> Optional[_DebugFileHandler]:
    for h in logging.getLogger().handlers:
        if isinstance(h, _DebugFileHandler):
            return h
    return None


def setup_logging(level: str = "INFO", log_dir: str | Path = "Report") -> Optional[Path]:
    """Configure root logging; at DEBUG also tee logs and prints into a file.

    Returns the path of the DEBUG file, if one is open. Repeated calls reuse
    the file and the stdout tee installed by the first DEBUG call.
    """
    lvl = getattr(logging, str(level).upper(), logging.INFO)
    logging.basicConfig(level=lvl, format=LOG_FORMAT)
    logging.getLogger().setLevel(lvl)
    # Pyomo is chatty at DEBUG; keep it at INFO
    logging.getLogger("pyomo").setLevel(max(lvl, logging.INFO))

    if lvl != logging.DEBUG:
        return None

    fh = _debug_handler()
    if fh is not None:
        return Path(fh.baseFilename)

    out_dir = Path(log_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_path = out_dir / f"benders_debug_{ts}.txt"
    fh = _DebugFileHandler(log_path, mode="w", encoding="utf-8")
    fh.setLevel(logging.DEBUG)
    fh.setFormatter(logging.Formatter(LOG_FORMAT))
    logging.getLogger().addHandler(fh)
    if not isinstance(sys.stdout, _StdoutTee):
        sys.stdout = _StdoutTee(sys.stdout, fh)
    print(f"[LOG] Writing DEBUG logs and prints to {log_path}")
    return log_path


__all__ = ["setup_logging"]
