"""
Logging setup for the Bid to Impression Share automation.

Usage:
    from act_bidshare.logging_config import setup_logging

    logger = setup_logging(__name__)
    logger.info("Raised keyword bid")
    logger.warning("Skipped keyword (0 impressions)")
    logger.error("Google Ads API failure")
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

from .settings import get_settings

LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    module_name: str,
    log_level: Optional[str] = None,
    log_dir: Optional[str] = None,
    console_output: bool = True,
) -> logging.Logger:
    """
    Set up a module logger writing to a daily file and (optionally) stdout.

    Args:
        module_name: Name of the module (use __name__)
        log_level: DEBUG, INFO, WARNING or ERROR. Defaults to BIDSHARE_LOG_LEVEL (environment or .env) or INFO.
        log_dir: Directory for log files. Defaults to BIDSHARE_LOG_DIR (environment or .env) or logs/.
        console_output: Whether to also log to stdout

    Returns:
        Configured logger instance

    Log Levels:
        INFO: fetched keyword sets, every bid change, run summary
        WARNING: skipped keywords (no impressions, already adjusted)
        ERROR: API failures, invalid configs

    Log Files:
        Format: logs/{module}_{date}.log
        Example: logs/adjuster_2026-10-17.log
    """
    settings = get_settings()
    level_name = (log_level or settings.log_level).upper()
    level = getattr(logging, level_name, logging.INFO)

    logger = logging.getLogger(module_name)
    logger.setLevel(level)

    # setup_logging is called at import time by every module
    if logger.handlers:
        return logger

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    log_path = Path(log_dir or settings.log_dir)
    log_path.mkdir(parents=True, exist_ok=True)

    today = datetime.now().strftime("%Y-%m-%d")
    simple_module = module_name.split(".")[-1]
    log_file = log_path / f"{simple_module}_{today}.log"

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    if console_output:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    return logger
