import os
import sys

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - "
    "<level>{message}</level>"
)


def _is_alert(record) -> bool:
    return record["message"].startswith("[ALERT]")


def setup_logger(*, json_logs: bool = False, level: str = "INFO", log_dir: str = "logs") -> None:
    """Configure loguru sinks for the scanner.

    - stdout at ``level`` (LOG_LEVEL env wins), JSON lines when ``json_logs``
    - ``scanner_*.log``: everything at DEBUG, so rejected and dropped ticks
      can be traced afterwards
    - ``alerts_*.log``: only ``[ALERT]`` lines, one per accepted token
    """
    console_level = os.getenv("LOG_LEVEL", level).upper()
    logger.remove()

    if json_logs:
        logger.add(sys.stdout, serialize=True, level=console_level)
    else:
        logger.add(sys.stdout, format=CONSOLE_FORMAT, level=console_level, colorize=True)

    logger.add(
        f"{log_dir}/scanner_{{time:YYYY-MM-DD}}.log",
        rotation="50 MB",
        retention="3 days",
        compression="gz",
        level="DEBUG",
        serialize=json_logs,
    )
    logger.add(
        f"{log_dir}/alerts_{{time:YYYY-MM-DD}}.log",
        rotation="10 MB",
        retention="14 days",
        level="INFO",
        filter=_is_alert,
        format="{time:YYYY-MM-DD HH:mm:ss} | {message}",
    )
