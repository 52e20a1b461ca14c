"""JSON persistence for the channels already notified.

The state file looks like::

    {"notifiedChannelIds": {"12345": "2024-03-05T09:00:00.000Z"}}

A missing or unreadable file is treated as an empty state so a fresh
checkout (or a corrupted file) simply starts over.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict

logger = logging.getLogger(__name__)

STATE_KEY = "notifiedChannelIds"


@dataclass
class NotificationState:
    notified_channel_ids: Dict[str, str] = field(default_factory=dict)

    def has_notified(self, channel_id: str) -> bool:
        return channel_id in self.notified_channel_ids

    def record(self, channel_id: str, notified_at: str) -> None:
        self.notified_channel_ids[str(channel_id)] = notified_at

    def to_dict(self) -> dict:
        return {STATE_KEY: dict(self.notified_channel_ids)}


def load_state(path: str | Path) -> NotificationState:
    """Read the state file, falling back to an empty state on any problem."""
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.debug("No state file at %s; starting empty.", path)
        return NotificationState()
    except (OSError, ValueError) as exc:
        logger.warning("Could not read state file %s: %s", path, exc)
        return NotificationState()

    try:
        data = json.loads(raw)
    except ValueError as exc:
        logger.warning("Could not parse state file %s: %s", path, exc)
        return NotificationState()

    ids = data.get(STATE_KEY) if isinstance(data, dict) else None
    if not isinstance(ids, dict):
        logger.warning("State file %s has no %s mapping; starting empty.", path, STATE_KEY)
        return NotificationState()

    return NotificationState({str(k): str(v) for k, v in ids.items()})


def save_state(state: NotificationState, path: str | Path) -> None:
    """Write the state via a temp file in the same directory, then replace.

    Readers see either the previous file or the new one, never a partial
    write.  Errors propagate to the caller.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(state.to_dict(), f, ensure_ascii=False, indent=2)
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise
    logger.debug("Saved %d notified channel(s) to %s", len(state.notified_channel_ids), path)


__all__ = ["NotificationState", "load_state", "save_state", "STATE_KEY"]
