# utils/logger.py
import logging
import logging.handlers
import os
import sys
from pathlib import Path


def setup_logger(
    name: str,
    log_file: str = "",
    level: str = "",
    enable_rotation: bool = True,
    max_bytes: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5,
) -> logging.Logger:
    """Setup logger with console output and an optional rotating log file.

    The level defaults to the LOG_LEVEL environment variable, then INFO.
    Calling again for an existing logger only updates its level.
    """
    level = level or os.environ.get("LOG_LEVEL", "INFO")
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Prevent duplicate handlers
    if not logger.handlers:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

        stream_handler = logging.StreamHandler(sys.stdout)
        stream_handler.setFormatter(formatter)
        stream_handler.setLevel(logging.INFO)
        logger.addHandler(stream_handler)

        if log_file:
            logs_dir = Path(os.environ.get("IMAGEBUILDER_LOG_DIR", "logs"))
            log_path = logs_dir / log_file

            try:
                logs_dir.mkdir(parents=True, exist_ok=True)
                if enable_rotation:
                    file_handler = logging.handlers.RotatingFileHandler(
                        log_path,
                        maxBytes=max_bytes,
                        backupCount=backup_count,
                        encoding="utf-8",
                    )
                else:
                    file_handler = logging.FileHandler(log_path, encoding="utf-8")

                file_handler.setFormatter(formatter)
                file_handler.setLevel(logging.DEBUG)  # All levels to file
                logger.addHandler(file_handler)

            except (OSError, PermissionError) as e:
                logger.warning(
                    f"Failed to create log file {log_path}: {e}. Logging to console only."
                )

        # Prevent propagation to root logger to avoid duplicate messages
        logger.propagate = False

    return logger


def set_console_level(level: str, prefix: str = "imagebuilder") -> None:
    """Apply ``level`` to every configured logger under ``prefix`` and its console handler."""
    for name in list(logging.Logger.manager.loggerDict):
        if name.startswith(prefix):
            _apply_level(logging.getLogger(name), level)


def _apply_level(logger: logging.Logger, level: str) -> None:
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    for handler in logger.handlers:
        if isinstance(handler, logging.StreamHandler) and not isinstance(
            handler, logging.FileHandler
        ):
            handler.setLevel(getattr(logging, level.upper(), logging.INFO))
