# sessions.py
"""Server-side sessions keyed by an opaque cookie token.

The manager is built once per application and lives on ``app.state``. Expired
sessions are purged whenever a new one starts. The default storage is process
memory, so every session is dropped on restart.
"""
import secrets
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Optional

DEFAULT_TTL = timedelta(days=7)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Session:
    token: str
    user_id: int
    created_at: datetime
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at


class SessionStorage(ABC):
    @abstractmethod
    def get(self, token: str) -> Optional[Session]:
        pass

    @abstractmethod
    def put(self, session: Session):
        pass

    @abstractmethod
    def delete(self, token: str):
        pass

    @abstractmethod
    def all(self) -> list:
        pass


class InMemorySessionStorage(SessionStorage):
    def __init__(self):
        self._sessions: Dict[str, Session] = {}
        self._lock = threading.Lock()

    def get(self, token):
        with self._lock:
            return self._sessions.get(token)

    def put(self, session):
        with self._lock:
            self._sessions[session.token] = session

    def delete(self, token):
        with self._lock:
            self._sessions.pop(token, None)

    def all(self):
        with self._lock:
            return list(self._sessions.values())


class SessionManager:
    def __init__(
        self,
        storage: SessionStorage = None,
        ttl: timedelta = DEFAULT_TTL,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.storage = storage if storage is not None else InMemorySessionStorage()
        self.ttl = ttl
        self._clock = clock

    def start(self, user_id: int) -> Session:
        # sessions whose cookie never comes back are only dropped here
        self.purge_expired()
        now = self._clock()
        session = Session(
            token=secrets.token_urlsafe(32),
            user_id=user_id,
            created_at=now,
            expires_at=now + self.ttl,
        )
        self.storage.put(session)
        return session

    def resolve(self, token: Optional[str]) -> Optional[int]:
        """Return the user id bound to ``token``, or None if unknown or expired."""
        if not token:
            return None
        session = self.storage.get(token)
        if session is None:
            return None
        if session.is_expired(self._clock()):
            self.storage.delete(token)
            return None
        return session.user_id

    def end(self, token: Optional[str]):
        if token:
            self.storage.delete(token)

    def purge_expired(self) -> int:
        now = self._clock()
        expired = [s for s in self.storage.all() if s.is_expired(now)]
        for session in expired:
            self.storage.delete(session.token)
        return len(expired)
