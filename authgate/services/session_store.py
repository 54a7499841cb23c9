"""
Server-side session storage with CSV persistence.

Sessions are indexed by session id (cookie lookups) and by user id (one live
session per user). Both indices change together under the write lock, and the
full table is rewritten to disk before a mutating call returns.

The full rewrite costs O(n) per login/logout. That is fine for a small number
of concurrent sessions; an append log with compaction would be the next step
if session volume grows.
"""

import csv
import os
import tempfile
import time
from pathlib import Path
from typing import Callable, Dict, List, Optional

from ..core.locks import ReadWriteLock
from ..models.session import Session, SESSION_FIELDS
from ..models.user import User
from ..utils.logger import get_logger

logger = get_logger(__name__)

DATA_DIR = Path("data")
SESSIONS_FILE = DATA_DIR / "sessions.csv"


class SessionStore:
    """In-memory session index persisted to a flat CSV file"""

    def __init__(
        self,
        path: Optional[Path] = None,
        enforce_expiry: bool = False,
        clock: Callable[[], float] = time.time,
    ):
        self.path = Path(path) if path is not None else SESSIONS_FILE
        self.enforce_expiry = enforce_expiry
        self._clock = clock
        self._lock = ReadWriteLock()
        # session_id -> Session
        self._by_session: Dict[str, Session] = {}
        # user_id -> session_id
        self._user_to_session: Dict[str, str] = {}
        self.reload()

    def create_session(self, user: User) -> str:
        """Create a session for user, replacing any session the user already has"""
        session = Session.new(user)
        user_id = session.user.id

        with self._lock.write_locked():
            old_session_id = self._user_to_session.get(user_id)
            if old_session_id is not None:
                self._by_session.pop(old_session_id, None)

            # Regenerate on the (practically impossible) id collision
            while session.id in self._by_session:
                session = Session.new(user)

            self._user_to_session[user_id] = session.id
            self._by_session[session.id] = session
            self._save()

        logger.info(
            "Session created",
            user_id=user_id,
            replaced_previous=old_session_id is not None,
        )
        return session.id

    def get_user(self, session_id: str) -> Optional[User]:
        """Look up the user for a session id (cookie value); None when unknown"""
        if not session_id:
            return None
        with self._lock.read_locked():
            session = self._by_session.get(session_id)
        if session is None:
            return None
        if self.enforce_expiry and session.user.is_expired(self._clock()):
            return None
        return session.user

    def delete_session(self, session_id: str) -> Optional[User]:
        """Remove a session; returns its user so the caller can revoke the provider token"""
        if not session_id:
            return None
        with self._lock.write_locked():
            session = self._by_session.pop(session_id, None)
            if session is None:
                return None
            if self._user_to_session.get(session.user.id) == session_id:
                del self._user_to_session[session.user.id]
            self._save()

        logger.info("Session deleted", user_id=session.user.id)
        return session.user

    def get_session_id_for_user(self, user_id: str) -> Optional[str]:
        with self._lock.read_locked():
            return self._user_to_session.get(user_id)

    def count(self) -> int:
        with self._lock.read_locked():
            return len(self._by_session)

    def __len__(self) -> int:
        return self.count()

    def reload(self) -> int:
        """Replace the in-memory indices with the contents of the session file"""
        sessions = self._load()
        with self._lock.write_locked():
            self._by_session = {}
            self._user_to_session = {}
            for session in sessions:
                old_session_id = self._user_to_session.get(session.user.id)
                if old_session_id is not None:
                    # Later rows win so a user never ends up with two ids
                    self._by_session.pop(old_session_id, None)
                self._user_to_session[session.user.id] = session.id
                self._by_session[session.id] = session
            count = len(self._by_session)
        return count

    def _load(self) -> List[Session]:
        if not self.path.exists():
            logger.info("No session file found, starting fresh", path=str(self.path))
            return []

        sessions: List[Session] = []
        skipped = 0
        try:
            with open(self.path, "r", encoding="utf-8", newline="") as f:
                for i, line in enumerate(f):
                    if i == 0:
                        continue  # header
                    line = line.rstrip("\r\n")
                    if not line:
                        continue
                    # One physical line per record: a stray quote cannot swallow later rows
                    try:
                        row = next(csv.reader([line]), [])
                    except csv.Error:
                        skipped += 1
                        continue
                    if len(row) < len(SESSION_FIELDS):
                        skipped += 1
                        continue
                    sessions.append(Session.from_row(row))
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Failed to read session file", path=str(self.path), error=str(e))
            return []

        logger.info("Loaded sessions from file", count=len(sessions), skipped=skipped)
        return sessions

    def _save(self) -> None:
        """Rewrite the whole session file; caller holds the write lock.

        Failures are logged and swallowed: memory stays authoritative.
        """
        temp_path: Optional[Path] = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                mode="w",
                dir=str(self.path.parent),
                prefix=".sessions-",
                suffix=".tmp",
                delete=False,
                encoding="utf-8",
                newline="",
            ) as tf:
                temp_path = Path(tf.name)
                writer = csv.writer(tf, lineterminator="\n")
                writer.writerow(SESSION_FIELDS)
                for session in self._by_session.values():
                    writer.writerow(session.to_row())
                tf.flush()
                os.fsync(tf.fileno())
            os.replace(temp_path, self.path)
        except OSError as e:
            logger.warning("Failed to save session file", path=str(self.path), error=str(e))
            if temp_path is not None and temp_path.exists():
                try:
                    temp_path.unlink()
                except OSError:
                    pass
            return

        logger.debug("Saved sessions to file", count=len(self._by_session))
