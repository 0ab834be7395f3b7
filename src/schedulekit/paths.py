"""
Path management for ScheduleKit

Platform-specific user directories for settings and log files:
- macOS: ~/Library/Application Support/ScheduleKit/
- Linux: ~/.local/share/schedulekit/ (data), ~/.config/schedulekit/ (config)
- Windows: %APPDATA%/ScheduleKit/

Directories are created lazily by the callers that write into them.
"""
import os
import sys
from pathlib import Path


APP_NAME = "ScheduleKit"


def get_user_data_dir() -> Path:
    """
    Get platform-specific user data directory.

    Returns:
        Path to the directory where log files and other user data live.
    """
    system = sys.platform

    if system == "darwin":
        return Path.home() / "Library" / "Application Support" / APP_NAME
    if system == "win32":
        return Path(os.getenv("APPDATA", Path.home() / "AppData" / "Roaming")) / APP_NAME
    return Path.home() / ".local" / "share" / APP_NAME.lower()


def get_user_config_dir() -> Path:
    """
    Get platform-specific user config directory.

    Same as the data directory on macOS/Windows, ~/.config/schedulekit/ on Linux.
    """
    if sys.platform in ("darwin", "win32"):
        return get_user_data_dir()
    base = os.getenv("XDG_CONFIG_HOME")
    root = Path(base) if base else Path.home() / ".config"
    return root / APP_NAME.lower()


def get_logs_dir() -> Path:
    """Directory for timestamped log files."""
    return get_user_data_dir() / "logs"


def get_settings_path() -> Path:
    """Default location of the settings JSON file."""
    return get_user_config_dir() / "settings.json"
