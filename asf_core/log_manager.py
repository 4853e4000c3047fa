# asf_core/log_manager.py
"""
Log management component.

Handles logger setup, file handlers, and log output routing.
"""

import logging
from collections.abc import Callable
from pathlib import Path


class LogManager:
    """Manages logging setup and cleanup for a query session."""

    @staticmethod
    def setup_session_log(
        name: str,
        level: str = "INFO",
        log_path: Path | None = None,
        echo_callback: Callable[[str], None] | None = None,
    ) -> tuple[logging.Logger, logging.Handler | None, Callable[[str], None]]:
        """
        Sets up logging for a session.

        The package logger ('asf_core') gets the requested level so module
        loggers (parser, sampler, loader) report through the same handler.

        Args:
            name: Logger name for session messages
            level: Level name ("DEBUG", "INFO", ...)
            log_path: Optional file to write the log to
            echo_callback: Optional callback receiving every session message

        Returns:
            Tuple of (logger, handler, log_to_all_function)
            - logger: Logger instance for this session
            - handler: File handler (needed for cleanup), None without a file
            - log_to_all: Function to log to both file and callback
        """
        numeric_level = logging.getLevelName(level.upper()) if level else logging.INFO
        if not isinstance(numeric_level, int):
            numeric_level = logging.INFO

        package_logger = logging.getLogger("asf_core")
        package_logger.setLevel(numeric_level)

        logger = logging.getLogger(name)
        logger.setLevel(numeric_level)

        # Remove any existing handlers
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)

        handler = None
        if log_path is not None:
            handler = logging.FileHandler(log_path, mode="w", encoding="utf-8")
            handler.setFormatter(logging.Formatter("%(message)s"))
            logger.addHandler(handler)
            package_logger.addHandler(handler)
        logger.propagate = False

        # Create unified log function
        def log_to_all(message: str):
            logger.info(message.strip())
            if echo_callback is not None:
                echo_callback(message)

        return logger, handler, log_to_all

    @staticmethod
    def cleanup_log(logger: logging.Logger, handler: logging.Handler | None):
        """
        Cleans up logger and handler resources.

        Args:
            logger: Logger instance to clean up
            handler: File handler to close (None is a no-op)
        """
        if handler is None:
            return
        handler.close()
        logger.removeHandler(handler)
        logging.getLogger("asf_core").removeHandler(handler)
