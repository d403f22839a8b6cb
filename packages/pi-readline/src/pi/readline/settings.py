"""Line reader settings with JSON loading.

Settings files use camelCase keys, like the rest of the pi settings files:

    {
        "historyEnabled": true,
        "historyMaxSize": 500,
        "autoCompletionEnabled": true,
        "killBufferEnabled": true,
        "undoEnabled": true,
        "ctrlCEnabled": false,
        "interruptible": false,
        "pollInterval": 0.05
    }
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


@dataclass
class ReadLineSettings:
    """Subsystem toggles and limits for a ``LineReader``."""

    history_enabled: bool = False
    history_max_size: int | None = None
    auto_completion_enabled: bool = True
    kill_buffer_enabled: bool = True
    undo_enabled: bool = True
    ctrl_c_enabled: bool = False
    interruptible: bool = False
    poll_interval: float = 0.05

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ReadLineSettings:
        """Build settings from a camelCase mapping, validating keys and types."""
        known = {_camel(f.name): f.name for f in fields(cls)}
        values: dict[str, Any] = {}
        for key, value in data.items():
            name = known.get(key)
            if name is None:
                raise ValueError(f"Unknown setting: {key}")
            if value is None:
                continue
            values[name] = _check_type(key, name, value)
        return cls(**values)

    def to_dict(self) -> dict[str, Any]:
        return {_camel(f.name): getattr(self, f.name) for f in fields(self)}

    def merged(self, overrides: dict[str, Any]) -> ReadLineSettings:
        """Return a copy with the non-``None`` camelCase *overrides* applied."""
        base = self.to_dict()
        base.update({k: v for k, v in overrides.items() if v is not None})
        return ReadLineSettings.from_dict(base)


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    # "ctrl_c_enabled" -> "ctrlCEnabled"
    return head + "".join(part.capitalize() for part in rest)


def _check_type(key: str, name: str, value: Any) -> Any:
    if name == "history_max_size":
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise ValueError(f"{key} must be a non-negative integer")
        return value
    if name == "poll_interval":
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
            raise ValueError(f"{key} must be a non-negative number")
        return float(value)
    if not isinstance(value, bool):
        raise ValueError(f"{key} must be a boolean")
    return value


def load_settings(path: str | Path) -> ReadLineSettings:
    """Load settings from a JSON file. A missing file yields the defaults."""
    path = Path(path)
    if not path.exists():
        logger.debug("No settings file at %s, using defaults", path)
        return ReadLineSettings()
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"Settings file {path} must contain a JSON object")
    logger.info("Loaded line reader settings from %s", path)
    return ReadLineSettings.from_dict(data)
