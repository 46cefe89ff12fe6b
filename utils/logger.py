"""Logging setup for the dashboard."""

import logging
import sys

# Libraries whose DEBUG output drowns out the pipeline's own messages
NOISY_LOGGERS = ("urllib3", "asyncio", "httpcore", "httpx")


def setup_logger(log_level: str = "INFO", name: str = "pr_dashboard") -> logging.Logger:
    """
    Set up and configure a dashboard logger.

    Configures the root handler with a compact format for terminal output and
    keeps HTTP client libraries at WARNING so that DEBUG shows the pipeline
    (rate-limit counters, per-PR enrichment) rather than connection pools.

    Args:
        log_level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL),
            case insensitive; unknown names fall back to INFO
        name: Logger name (default: pr_dashboard)

    Returns:
        logging.Logger: Configured logger instance
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=numeric_level,
        format='%(asctime)s %(levelname)-7s [%(name)s] %(message)s',
        datefmt='%H:%M:%S',
        stream=sys.stdout,
        force=True,
    )

    for noisy in NOISY_LOGGERS:
        logging.getLogger(noisy).setLevel(max(numeric_level, logging.WARNING))

    logger = logging.getLogger(name)
    logger.setLevel(numeric_level)

    return logger
