"""Settings with JSON persistence and logging setup.

Settings live in ``<config_dir>/settings.json`` with camelCase keys and are
deep-merged over the defaults. A missing or unreadable file never fails
startup: the error is kept on the manager and the defaults apply.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from yeet.buffer.model import LineNumber, ViewPort

logger = logging.getLogger(__name__)

CONFIG_DIR_NAME = "yeet"

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


# --- Settings schema ---


@dataclass
class Settings:
    """Resolved application settings."""

    sign_column_width: int = 2
    line_number: LineNumber = "relative"
    line_number_width: int = 3
    show_border: bool = True
    hidden_sign_ids: list[str] = field(default_factory=list)
    keymap: dict[str, dict[str, str | None]] = field(default_factory=dict)
    log_level: str = "WARNING"
    log_file: str | None = None

    def apply_to(self, viewport: ViewPort) -> None:
        """Copy the gutter configuration onto *viewport*."""
        viewport.sign_column_width = self.sign_column_width
        viewport.line_number = self.line_number
        viewport.line_number_width = self.line_number_width
        viewport.show_border = self.show_border
        viewport.hidden_sign_ids = set(self.hidden_sign_ids)


def _settings_defaults() -> dict[str, Any]:
    """Default settings values."""
    return {
        "signColumnWidth": 2,
        "lineNumber": "relative",
        "lineNumberWidth": 3,
        "showBorder": True,
        "hiddenSignIds": [],
        "keymap": {},
        "logLevel": "WARNING",
        "logFile": None,
    }


_VALID_LINE_NUMBERS = ("none", "absolute", "relative")


# --- Deep merge ---


def deep_merge_settings(
    base: dict[str, Any], overrides: dict[str, Any], keep_none: bool = False
) -> dict[str, Any]:
    """Recursively merge overrides into base settings.

    For nested dicts, merge recursively. For primitives and arrays, the
    override value wins completely. ``None`` values are skipped at the top
    level but kept in nested dicts, where they unbind keymap entries.
    """
    result = dict(base)
    for key, value in overrides.items():
        if value is None and not keep_none:
            continue
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge_settings(result[key], value, keep_none=True)
        else:
            result[key] = value
    return result


# --- SettingsManager ---


class SettingsManager:
    """Manages settings with JSON file persistence.

    Use factory methods (create, in_memory) instead of calling constructor directly.
    """

    def __init__(
        self,
        *,
        settings_path: str | None,
        initial_settings: dict[str, Any],
        persist: bool = True,
        load_error: Exception | None = None,
    ) -> None:
        self._settings_path = settings_path
        self._file_settings = dict(initial_settings)
        self._persist = persist
        self._load_error = load_error
        self._settings = deep_merge_settings(_settings_defaults(), self._file_settings)

        if load_error is not None:
            logger.error("Failed to load settings from %s: %s", settings_path, load_error)

    # --- Factory methods ---

    @classmethod
    def create(cls, config_dir: str | None = None) -> SettingsManager:
        """Create a settings manager backed by ``<config_dir>/settings.json``."""
        cdir = config_dir or _default_config_dir()
        settings_path = os.path.join(cdir, "settings.json")

        settings, error = _load_from_file(settings_path)
        return cls(
            settings_path=settings_path,
            initial_settings=settings,
            persist=True,
            load_error=error,
        )

    @classmethod
    def in_memory(cls, settings: dict[str, Any] | None = None) -> SettingsManager:
        """Create an in-memory settings manager for testing."""
        return cls(
            settings_path=None,
            initial_settings=settings or {},
            persist=False,
        )

    # --- Core operations ---

    def reload(self) -> None:
        """Reload settings from disk."""
        if self._settings_path:
            self._file_settings, self._load_error = _load_from_file(self._settings_path)
        self._settings = deep_merge_settings(_settings_defaults(), self._file_settings)

    @property
    def settings(self) -> dict[str, Any]:
        """Current merged settings (read-only view)."""
        return self._settings

    @property
    def load_error(self) -> Exception | None:
        return self._load_error

    def get_settings(self) -> Settings:
        """Resolve the merged JSON into a :class:`Settings` value."""
        s = self._settings
        line_number = s.get("lineNumber")
        if line_number not in _VALID_LINE_NUMBERS:
            logger.warning("Invalid lineNumber %r, using 'relative'", line_number)
            line_number = "relative"

        return Settings(
            sign_column_width=max(0, int(s.get("signColumnWidth") or 0)),
            line_number=line_number,
            line_number_width=max(0, int(s.get("lineNumberWidth") or 0)),
            show_border=bool(s.get("showBorder", True)),
            hidden_sign_ids=list(s.get("hiddenSignIds") or []),
            keymap=dict(s.get("keymap") or {}),
            log_level=str(s.get("logLevel") or "WARNING"),
            log_file=s.get("logFile"),
        )

    # --- Getters ---

    def get_keymap(self) -> dict[str, dict[str, str | None]]:
        return dict(self._settings.get("keymap") or {})

    def get_log_file(self) -> str | None:
        return self._settings.get("logFile")

    # --- Setters ---

    def set_line_number(self, line_number: LineNumber) -> None:
        self._file_settings["lineNumber"] = line_number
        self._save()

    def set_key_binding(self, mode: str, sequence: str, action: str | None) -> None:
        """Bind *sequence* to *action* in *mode*; ``None`` unbinds the default."""
        keymap = self._file_settings.setdefault("keymap", {})
        keymap.setdefault(mode, {})[sequence] = action
        self._save()

    # --- Persistence ---

    def _save(self) -> None:
        """Write the file-level settings, preserving a corrupted file as-is."""
        if self._persist and self._settings_path and not self._load_error:
            os.makedirs(os.path.dirname(self._settings_path), exist_ok=True)
            Path(self._settings_path).write_text(
                json.dumps(self._file_settings, indent=2, ensure_ascii=False) + "\n",
                encoding="utf-8",
            )

        self._settings = deep_merge_settings(_settings_defaults(), self._file_settings)


# --- File I/O helpers ---


def _load_from_file(path: str) -> tuple[dict[str, Any], Exception | None]:
    """Load settings from a JSON file. Returns (settings, error)."""
    if not os.path.exists(path):
        return {}, None
    try:
        content = Path(path).read_text(encoding="utf-8")
        settings = json.loads(content)
        if not isinstance(settings, dict):
            raise ValueError(f"Expected a JSON object in {path}")
        return settings, None
    except (OSError, ValueError) as e:
        return {}, e


def _default_config_dir() -> str:
    """Default config directory (``$XDG_CONFIG_HOME/yeet`` or ``~/.config/yeet``)."""
    base = os.environ.get("XDG_CONFIG_HOME") or os.path.join(os.path.expanduser("~"), ".config")
    return os.path.join(base, CONFIG_DIR_NAME)


# --- Logging ---


def configure_logging(settings: Settings) -> None:
    """Configure root logging from *settings*.

    The terminal is owned by the UI, so records go to ``log_file`` or are
    discarded when none is configured.
    """
    level = getattr(logging, settings.log_level.upper(), logging.WARNING)
    if settings.log_file:
        log_dir = os.path.dirname(settings.log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        logging.basicConfig(level=level, format=LOG_FORMAT, filename=settings.log_file)
    else:
        logging.basicConfig(level=level, format=LOG_FORMAT, handlers=[logging.NullHandler()])
