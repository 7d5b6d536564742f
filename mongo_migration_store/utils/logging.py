import logging
import os
import sys
from pathlib import Path

_logging_configured = False
_log_file_path: Path | None = None


def setup_logging(log_file: str | Path | None = None):
    """
    Setup logging for scripts embedding the migration store.

    The level comes from ``LOG_LEVEL`` (default INFO). Records always go to stderr;
    when ``log_file`` (or ``LOG_FILE``) is given they are appended there as well.
    """
    global _logging_configured, _log_file_path

    file_name = log_file if log_file else os.getenv('LOG_FILE')
    log_path = Path(file_name) if file_name else None

    # If already configured and path matches, skip reconfiguration
    if _logging_configured and _log_file_path == log_path:
        return

    root_logger = logging.getLogger()
    root_logger.setLevel(os.getenv('LOG_LEVEL', 'INFO').upper())

    # Clear any existing handlers to avoid duplicates
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(logging.Formatter('%(levelname)s - %(name)s - %(message)s'))
    root_logger.addHandler(console_handler)

    if log_path is not None:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(str(log_path), mode='a')
        file_handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
        root_logger.addHandler(file_handler)

    _log_file_path = log_path
    _logging_configured = True
    logging.debug("Logging configured")


def get_log_file_path() -> Path | None:
    return _log_file_path
