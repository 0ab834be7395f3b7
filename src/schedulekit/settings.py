"""
Schedule View Settings

Configuration for the schedule view coordinator and its logging.

Settings are:
- A dataclass schema with per-field validation metadata
- Loaded from / saved to a JSON file
- Backwards compatible (unknown keys ignored, missing keys defaulted)

Usage:
    settings = load_settings()                 # platform default path
    settings = load_settings("view.json")
    result = settings.validate()
    if not result.valid:
        ...
    save_settings(settings, "view.json")
"""
import json
import os
import re
from dataclasses import dataclass, asdict, fields, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from .constants import DEFAULT_RELAYOUT_ANIMATION_DURATION, DEFAULT_EVENT_COLOR
from .message import Log
from .types import EventColorMode


# =============================================================================
# Validation Framework
# =============================================================================

@dataclass
class ValidationResult:
    """
    Result of validating settings.

    Attributes:
        valid: True if all validations passed
        errors: List of error messages (validation failures)
        warnings: List of warning messages (non-blocking issues)
    """
    valid: bool = True
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def add_error(self, message: str):
        self.errors.append(message)
        self.valid = False

    def add_warning(self, message: str):
        self.warnings.append(message)

    def merge(self, other: 'ValidationResult'):
        if not other.valid:
            self.valid = False
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)

    def __bool__(self) -> bool:
        return self.valid


@dataclass
class FieldValidator:
    """
    Validation rules for a settings field, stored in field metadata.

    Example:
        duration: float = validated_field(1.0, min_value=0.0)
        mode: str = validated_field('a', choices=['a', 'b'])
    """
    min_value: Optional[Union[int, float]] = None
    max_value: Optional[Union[int, float]] = None
    choices: Optional[List[Any]] = None
    pattern: Optional[str] = None
    pattern_message: Optional[str] = None
    allow_none: bool = True
    custom: Optional[Callable[[Any, str], Optional[str]]] = None

    def validate(self, value: Any, field_name: str) -> ValidationResult:
        result = ValidationResult()

        if value is None:
            if not self.allow_none:
                result.add_error(f"{field_name}: Cannot be None")
            return result

        if isinstance(value, (int, float)) and not isinstance(value, bool):
            if self.min_value is not None and value < self.min_value:
                result.add_error(f"{field_name}: Value {value} is below minimum {self.min_value}")
            if self.max_value is not None and value > self.max_value:
                result.add_error(f"{field_name}: Value {value} is above maximum {self.max_value}")

        if self.choices is not None:
            check_value = value.value if isinstance(value, Enum) else value
            valid_choices = [c.value if isinstance(c, Enum) else c for c in self.choices]
            if check_value not in valid_choices:
                result.add_error(f"{field_name}: Value '{value}' not in allowed choices: {valid_choices}")

        if self.pattern is not None and isinstance(value, str):
            if not re.match(self.pattern, value):
                msg = self.pattern_message or "Value does not match required pattern"
                result.add_error(f"{field_name}: {msg}")

        if self.custom is not None:
            error = self.custom(value, field_name)
            if error:
                result.add_error(error)

        return result


def validated_field(default: Any = None, **rules):
    """Dataclass field carrying a FieldValidator in its metadata."""
    return field(default=default, metadata={'validator': FieldValidator(**rules)})


# =============================================================================
# Settings Schema
# =============================================================================

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


@dataclass
class ScheduleSettings:
    """
    Schedule view settings schema.

    All fields have defaults so older settings files keep loading.
    """

    # Layout
    relayout_animation_duration: float = validated_field(
        DEFAULT_RELAYOUT_ANIMATION_DURATION, min_value=0.0, max_value=10.0, allow_none=False
    )

    # Event coloring
    color_mode: str = validated_field(
        EventColorMode.BY_EVENT_KIND.value, choices=list(EventColorMode), allow_none=False
    )
    default_event_color: str = validated_field(
        DEFAULT_EVENT_COLOR,
        pattern=r'^#[0-9A-Fa-f]{6}$',
        pattern_message="Expected a #RRGGBB hex color",
        allow_none=False,
    )

    # Logging
    log_level: str = validated_field("INFO", choices=LOG_LEVELS, allow_none=False)
    console_logging: bool = True
    file_logging: bool = False
    log_folder: Optional[str] = None

    @property
    def event_color_mode(self) -> EventColorMode:
        """color_mode as an enum; unknown values fall back to BY_EVENT_KIND."""
        try:
            return EventColorMode(self.color_mode)
        except ValueError:
            Log.warning(f"Settings: unknown color_mode '{self.color_mode}', using {EventColorMode.BY_EVENT_KIND.value}")
            return EventColorMode.BY_EVENT_KIND

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ScheduleSettings':
        """
        Create settings from a dictionary.

        Keys that are not fields are ignored; missing keys keep their defaults.
        """
        valid_keys = {f.name for f in fields(cls)}
        merged = asdict(cls())
        merged.update({k: v for k, v in data.items() if k in valid_keys})
        return cls(**merged)

    def validate(self) -> ValidationResult:
        result = ValidationResult()
        for f in fields(self):
            validator = f.metadata.get('validator') if f.metadata else None
            if isinstance(validator, FieldValidator):
                result.merge(validator.validate(getattr(self, f.name), f.name))
        return result

    def is_valid(self) -> bool:
        return self.validate().valid


# =============================================================================
# Persistence
# =============================================================================

def _resolve_path(path: Optional[Union[str, Path]]) -> Path:
    if path is None:
        from .paths import get_settings_path
        return get_settings_path()
    return Path(path)


def load_settings(path: Optional[Union[str, Path]] = None) -> ScheduleSettings:
    """
    Load settings from a JSON file.

    A missing, unreadable or invalid file falls back to the defaults; the
    reason is logged.
    """
    settings_path = _resolve_path(path)
    if not settings_path.exists():
        Log.info(f"Settings: no file at {settings_path}, using defaults")
        return ScheduleSettings()

    try:
        with open(settings_path, 'r', encoding='utf-8') as file:
            data = json.load(file)
    except (OSError, json.JSONDecodeError) as e:
        Log.error(f"Settings: failed to load {settings_path}: {e}")
        return ScheduleSettings()

    if not isinstance(data, dict):
        Log.error(f"Settings: {settings_path} does not contain a JSON object")
        return ScheduleSettings()

    settings = ScheduleSettings.from_dict(data)
    result = settings.validate()
    if not result.valid:
        for error in result.errors:
            Log.warning(f"Settings: {error}")
        Log.warning("Settings: invalid values, using defaults")
        return ScheduleSettings()

    Log.info("Settings loaded successfully")
    return settings


def save_settings(settings: ScheduleSettings, path: Optional[Union[str, Path]] = None) -> bool:
    """Write settings as JSON. Returns False (and logs) on failure."""
    settings_path = _resolve_path(path)
    try:
        os.makedirs(settings_path.parent, exist_ok=True)
        with open(settings_path, 'w', encoding='utf-8') as file:
            json.dump(settings.to_dict(), file, indent=4)
    except OSError as e:
        Log.error(f"Settings: failed to save {settings_path}: {e}")
        return False
    Log.info("Settings saved successfully")
    return True
