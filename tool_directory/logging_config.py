"""Logging configuration for the tool directory."""

import logging
import sys
from pathlib import Path

_configured = False


def setup_logging(log_level: str = "INFO", log_dir: str = "logs") -> None:
    """Attach file and stdout handlers to the root logger once per process."""
    global _configured
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    if _configured:
        return

    log_path = Path(log_dir)
    log_path.mkdir(exist_ok=True)

    # File handler for all logs
    file_handler = logging.FileHandler(log_path / "tool_directory.log")
    file_handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
    root_logger.addHandler(file_handler)

    # Stream handler for INFO and above
    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(logging.Formatter("%(name)s - %(levelname)s - %(message)s"))
    stream_handler.setLevel(logging.INFO)
    root_logger.addHandler(stream_handler)

    # Request headers go through our own reporter; keep the transport quiet
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    _configured = True
