"""
Persistent session storage.

Keeps the learner's SessionState as a single JSON blob under a per-learner
session key so an attempt survives restarts until the learner logs out.
"""

import json
from pathlib import Path
from typing import Optional
from urllib.parse import quote

from .models import SessionState


def session_file_key(session_key: str) -> str:
    """
    File-name-safe form of a session key.

    Percent-encoding keeps distinct keys distinct; dots are encoded too so a
    key can never name a parent directory.
    """
    return quote(session_key, safe='').replace('.', '%2E')


class PersistentSession:
    """Load/save/clear pair for one learner's SessionState."""

    def __init__(self, session_dir: Path, session_key: str):
        self.session_dir = Path(session_dir)
        self.path = self.session_dir / f"{session_file_key(session_key)}.session.json"

    def load(self) -> Optional[SessionState]:
        """
        Load the cached session if it exists.

        Returns:
            The stored SessionState, or None when there is no usable prior session
        """
        if not self.path.exists():
            return None

        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            return SessionState.from_dict(data)
        except (OSError, ValueError, KeyError, TypeError, AttributeError):
            # Unreadable blob: start over rather than crash the session
            return None

    def save(self, state: SessionState) -> None:
        """Write the session synchronously, replacing the previous blob."""
        self.session_dir.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix('.tmp')
        with open(tmp_path, 'w', encoding='utf-8') as f:
            json.dump(state.to_dict(), f, indent=2)
        tmp_path.replace(self.path)

    def clear(self) -> None:
        """Remove the cached session (logout)."""
        if self.path.exists():
            self.path.unlink()
