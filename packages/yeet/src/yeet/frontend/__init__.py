"""yeet.frontend: settings, panes, background tasks and application state."""

# Application
from yeet.frontend.app import App, BufferSaved, Effect

# History
from yeet.frontend.history import History

# Panes
from yeet.frontend.pane import (
    ContentReplaced,
    Entry,
    LoadFailed,
    Pane,
    PaneKind,
    PaneMessage,
    Resized,
    RestoreSelection,
    apply,
)

# Settings
from yeet.frontend.settings import Settings, SettingsManager, configure_logging

# Tasks
from yeet.frontend.task import TaskError, TaskFailed, TaskFinished, TaskManager, TaskMessage

__all__ = [
    # Application
    "App",
    "BufferSaved",
    "Effect",
    # History
    "History",
    # Panes
    "ContentReplaced",
    "Entry",
    "LoadFailed",
    "Pane",
    "PaneKind",
    "PaneMessage",
    "Resized",
    "RestoreSelection",
    "apply",
    # Settings
    "Settings",
    "SettingsManager",
    "configure_logging",
    # Tasks
    "TaskError",
    "TaskFailed",
    "TaskFinished",
    "TaskManager",
    "TaskMessage",
]
