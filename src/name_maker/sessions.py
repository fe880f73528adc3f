"""
Session persistence

One JSON document per session under ~/.name-maker/sessions/, holding the
brief, every generated name and every availability result in the order
they were produced. Unreadable files are skipped, never fatal.
"""

import json
import logging
import random
import string
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from .config import config
from .models import NameBrief, NameCheckResult

logger = logging.getLogger(__name__)

SESSION_NAME_LENGTH = 40


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def generate_session_id(now: Optional[datetime] = None) -> str:
    """Sortable id like 2026-01-31T09-15-02-k3x9."""
    now = now or datetime.now(timezone.utc)
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=4))
    return f"{now.strftime('%Y-%m-%dT%H-%M-%S')}-{suffix}"


def session_name(description: str) -> str:
    """Friendly session name from the product description."""
    if len(description) > SESSION_NAME_LENGTH:
        return description[:SESSION_NAME_LENGTH] + "..."
    return description


@dataclass
class Session:
    """A naming session: the brief plus everything generated and checked."""
    id: str
    name: str
    brief: NameBrief
    generated_names: list[str] = field(default_factory=list)
    results: list[NameCheckResult] = field(default_factory=list)
    created_at: str = field(default_factory=_now)
    updated_at: str = field(default_factory=_now)

    def add_names(self, names: list[str]) -> None:
        self.generated_names.extend(names)

    def add_result(self, result: NameCheckResult) -> None:
        self.results.append(result)

    def has_result(self, name: str) -> bool:
        """Whether a name was already checked (case-insensitive)."""
        target = name.strip().lower()
        return any(r.name.lower() == target for r in self.results)

    def seen_names(self) -> list[str]:
        """Generated and checked names, deduplicated, first occurrence first."""
        names = self.generated_names + [r.name for r in self.results]
        return list(dict.fromkeys(names))

    def update_timestamp(self):
        self.updated_at = _now()

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "brief": self.brief.to_dict(),
            "generated_names": list(self.generated_names),
            "results": [r.to_dict() for r in self.results],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Session":
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            brief=NameBrief.from_dict(data["brief"]),
            generated_names=list(data.get("generated_names", [])),
            results=[NameCheckResult.from_dict(r) for r in data.get("results", [])],
            created_at=data.get("created_at", ""),
            updated_at=data.get("updated_at", ""),
        )


class SessionStore:
    """
    Reads and writes session files.

    Args:
        directory: Where session files live (defaults to the configured sessions dir)
    """

    def __init__(self, directory: Optional[Path] = None):
        self.directory = Path(directory) if directory else config.storage.sessions_dir

    def _path(self, session_id: str) -> Path:
        return self.directory / f"{session_id}.json"

    def create(self, brief: NameBrief) -> Session:
        """Start and save a new session for a brief."""
        session = Session(
            id=generate_session_id(),
            name=session_name(brief.description),
            brief=brief,
        )
        self.save(session)
        return session

    def save(self, session: Session) -> None:
        """Write a session, bumping its updated_at."""
        self.directory.mkdir(parents=True, exist_ok=True)
        session.update_timestamp()
        with open(self._path(session.id), "w", encoding="utf-8") as f:
            json.dump(session.to_dict(), f, indent=2, ensure_ascii=False)

    def _read(self, path: Path) -> Optional[Session]:
        try:
            with open(path, "r", encoding="utf-8") as f:
                return Session.from_dict(json.load(f))
        except FileNotFoundError:
            return None
        except (OSError, json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            logger.warning(f"Skipping unreadable session file {path.name}: {e}")
            return None

    def load(self, session_id: str) -> Optional[Session]:
        """Load a session by id; None if missing or corrupt."""
        return self._read(self._path(session_id))

    def list_sessions(self, limit: Optional[int] = None) -> list[Session]:
        """Most recently modified sessions first, corrupt files skipped."""
        limit = limit if limit is not None else config.storage.max_listed_sessions
        if not self.directory.is_dir():
            return []

        paths = sorted(
            self.directory.glob("*.json"),
            key=lambda p: (p.stat().st_mtime, p.name),
            reverse=True,
        )
        sessions = []
        for path in paths:
            if len(sessions) >= limit:
                break
            session = self._read(path)
            if session is not None:
                sessions.append(session)
        return sessions

    def delete(self, session_id: str) -> bool:
        """Remove a session file. False if it didn't exist or couldn't be removed."""
        try:
            self._path(session_id).unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.warning(f"Could not delete session {session_id}: {e}")
            return False
        return True


def format_session_date(iso_string: str, now: Optional[datetime] = None) -> str:
    """Relative age for recent timestamps, a date for older ones."""
    try:
        then = datetime.fromisoformat(iso_string)
    except ValueError:
        return iso_string
    if then.tzinfo is None:
        then = then.replace(tzinfo=timezone.utc)

    now = now or datetime.now(timezone.utc)
    minutes = int((now - then).total_seconds() // 60)
    if minutes < 1:
        return "just now"
    if minutes < 60:
        return f"{minutes}m ago"
    if minutes < 60 * 24:
        return f"{minutes // 60}h ago"
    if minutes < 60 * 24 * 7:
        return f"{minutes // (60 * 24)}d ago"
    return then.strftime("%Y-%m-%d")
