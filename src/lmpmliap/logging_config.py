"""Centralized logging configuration for the LAMMPS-MLIAP installer."""
import logging
from pathlib import Path
import sys

FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILENAME = "lmpmliap.log"


class LogFilter(logging.Filter):
    """Drop records that were already shown to the user as a status line."""
    def filter(self, record):
        if getattr(record, "echoed", False):
            return False
        return True


def configure_logging(log_dir: Path = Path("runlogs")) -> Path:
    """Set up logging with file and console handlers.

    Returns the path of the main log file.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / LOG_FILENAME

    # Main handler - writes everything to file
    main_handler = logging.FileHandler(filename=log_path, mode="a")
    main_handler.setFormatter(logging.Formatter(FORMAT, DATE_FORMAT))

    # Console handler - only warnings+ not already printed by utils.console
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(logging.Formatter(FORMAT, DATE_FORMAT))
    console_handler.addFilter(LogFilter())

    logging.basicConfig(
        level=logging.INFO,
        handlers=[main_handler, console_handler],
        force=True
    )

    logging.getLogger("urllib3").setLevel(logging.WARNING)
    return log_path
