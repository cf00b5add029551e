"""Logging bootstrap and structured log helpers."""
from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from t800.types import Threat

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: int | str = logging.INFO) -> None:
    """Install the t800 log format on stdout. Call once from the entry point."""
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def log_threat(logger: logging.Logger, threat: Threat) -> None:
    logger.warning(
        "Threat detected - ID: %s, Severity: %d, Location: %s",
        threat.id, threat.severity, threat.location,
    )


def log_action(logger: logging.Logger, action: str, target: str, success: bool) -> None:
    logger.info(
        "Action - %s on %s: %s", action, target, "SUCCESS" if success else "FAILED",
    )


def log_health_status(
    logger: logging.Logger, part_name: str, health: float, is_critical: bool,
) -> None:
    logger.debug(
        "Health Status - %s: %.2f%%%s",
        part_name, health, " (CRITICAL)" if is_critical else "",
    )


def log_error(logger: logging.Logger, exc: BaseException, context: str) -> None:
    logger.error("%s - %s", context, exc)
