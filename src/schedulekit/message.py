import logging
import os
import sys
from datetime import datetime
from logging import Logger
from typing import Optional, TYPE_CHECKING

from colorama import init, Fore, Style

if TYPE_CHECKING:
    from schedulekit.settings import ScheduleSettings

init(autoreset=True)

LOGGER_NAME = "ScheduleKitLogger"
LOG_FILE_PREFIX = "schedulekit_"


def create_log_directory(log_folder: Optional[str] = None) -> str:
    """
    Ensures that the log directory exists. If not, it creates it.

    Args:
        log_folder: Optional path to log folder. If None, uses platform-specific location.
    """
    if log_folder is None:
        from schedulekit.paths import get_logs_dir
        log_folder = str(get_logs_dir())

    os.makedirs(log_folder, exist_ok=True)
    return log_folder


def get_log_file_path(log_folder: str) -> str:
    """
    Returns a log file path with a timestamp in the name.
    Format: <log_folder>/schedulekit_YYYY-mm-dd_HHMMSS.log
    """
    timestamp = datetime.now().strftime("%Y-%m-%d_%H%M%S")
    return os.path.join(log_folder, f"{LOG_FILE_PREFIX}{timestamp}.log")


def purge_old_logs(log_folder: str, keep: int = 10) -> None:
    """
    Removes older log files, keeping only the most recent 'keep' files.
    File names embed a sortable timestamp, so lexicographical order is
    chronological order.
    """
    all_logs = [f for f in os.listdir(log_folder)
                if f.startswith(LOG_FILE_PREFIX) and f.endswith(".log")]
    all_logs.sort()

    if keep <= 0:
        logs_to_remove = all_logs
    else:
        logs_to_remove = all_logs[:-keep]
    for old_file in logs_to_remove:
        os.remove(os.path.join(log_folder, old_file))


class ColorFormatter(logging.Formatter):
    """
    A formatter that colorizes log level names using colorama.
    """
    color_map = {
        logging.DEBUG: Fore.BLUE,
        logging.INFO: Fore.GREEN,
        logging.WARNING: Fore.YELLOW,
        logging.ERROR: Fore.RED,
        logging.CRITICAL: Fore.LIGHTRED_EX,
    }

    def format(self, record):
        color = self.color_map.get(record.levelno, Fore.WHITE)
        # Copy so other handlers keep the plain level name
        record = logging.makeLogRecord(record.__dict__)
        record.levelname = f"{color}{record.levelname}{Style.RESET_ALL}"
        return super().format(record)


def init_logger(
    name: str = LOGGER_NAME,
    log_folder: Optional[str] = None,
    console_logging: bool = True,
    file_logging: bool = False,
    level: int = logging.INFO
) -> Logger:
    """
    Initializes and configures the logger with the specified settings.
    :param name: The logger's name.
    :param log_folder: The folder where log files should go. If None, uses platform-specific location.
    :param console_logging: Whether to log to the console.
    :param file_logging: Whether to log to a file.
    :param level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    :return: A configured logger instance.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False

    # Re-initialising replaces the handlers instead of stacking duplicates
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if file_logging:
        log_folder = create_log_directory(log_folder)
        purge_old_logs(log_folder, keep=10)
        file_handler = logging.FileHandler(get_log_file_path(log_folder), encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(
            fmt="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        ))
        logger.addHandler(file_handler)

    if console_logging:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(ColorFormatter(
            fmt="%(asctime)s | %(levelname)s | %(message)s",
            datefmt="%H:%M:%S"
        ))
        logger.addHandler(console_handler)

    return logger


LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


class Log:
    """
    Class-level logging facade (Log.info(...), Log.warning(...)) backed by
    Python's logging module.
    """
    _logger: Logger = init_logger()

    @classmethod
    def set_level(cls, level: str | int):
        """
        Set the logging level dynamically.

        Args:
            level: Log level as string ("DEBUG", "INFO", "WARNING", "ERROR") or int
        """
        if isinstance(level, str):
            level = LEVEL_MAP.get(level.upper(), logging.INFO)

        cls._logger.setLevel(level)
        for handler in cls._logger.handlers:
            handler.setLevel(level)

    @classmethod
    def configure(cls, settings: "ScheduleSettings") -> Logger:
        """Rebuild the logger from a ScheduleSettings instance."""
        cls._logger = init_logger(
            name=cls._logger.name,
            log_folder=settings.log_folder,
            console_logging=settings.console_logging,
            file_logging=settings.file_logging,
            level=LEVEL_MAP.get(settings.log_level.upper(), logging.INFO),
        )
        return cls._logger

    @classmethod
    def debug(cls, text: str):
        cls._logger.debug(text)

    @classmethod
    def info(cls, text: str):
        cls._logger.info(text)

    @classmethod
    def warning(cls, text: str, exc_info: bool = False):
        if exc_info:
            cls._logger.warning(text, exc_info=True)
        else:
            cls._logger.warning(text)

    @classmethod
    def error(cls, text: str):
        cls._logger.error(text)
