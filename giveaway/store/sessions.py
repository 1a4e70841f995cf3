"""
In-process registry of entry sessions.

Form state is never written anywhere: a session lives here until it is
deleted, goes idle past SESSION_IDLE_TIMEOUT_SEC, or is evicted to stay under
MAX_SESSIONS. Expiry is checked lazily on access; there are no timers.
"""
import threading
import time
import uuid
from typing import Dict, Optional

from giveaway.core.controller import EntryController
from giveaway.observability.logging import log
from giveaway.settings import settings


class SessionNotFound(KeyError):
    pass


class SessionRegistry:
    def __init__(self, idle_timeout_sec: Optional[int] = None, max_sessions: Optional[int] = None):
        self.idle_timeout_sec = int(idle_timeout_sec if idle_timeout_sec is not None else settings.SESSION_IDLE_TIMEOUT_SEC)
        self.max_sessions = int(max_sessions if max_sessions is not None else settings.MAX_SESSIONS)
        self._sessions: Dict[str, EntryController] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._sessions)

    def _expired(self, ctrl: EntryController, now: float) -> bool:
        return self.idle_timeout_sec > 0 and ctrl.idle_seconds(now) > self.idle_timeout_sec

    def _evict_oldest(self) -> None:
        oldest = min(self._sessions.values(), key=lambda c: c.lastSeenAt)
        del self._sessions[oldest.sessionId]
        log(event="session_evicted", sessionId=oldest.sessionId, stage=oldest.state.stage)

    def create(self) -> EntryController:
        sid = str(uuid.uuid4())
        ctrl = EntryController(sid)
        with self._lock:
            while self.max_sessions > 0 and len(self._sessions) >= self.max_sessions:
                self._evict_oldest()
            self._sessions[sid] = ctrl
        log(event="session_created", sessionId=sid)
        return ctrl

    def get(self, session_id: str) -> EntryController:
        now = time.time()
        with self._lock:
            ctrl = self._sessions.get(session_id)
            if ctrl is None:
                raise SessionNotFound(session_id)
            if self._expired(ctrl, now):
                del self._sessions[session_id]
                log(event="session_expired", sessionId=session_id, stage=ctrl.state.stage)
                raise SessionNotFound(session_id)
            return ctrl

    def drop(self, session_id: str) -> bool:
        with self._lock:
            ctrl = self._sessions.pop(session_id, None)
        if ctrl is not None:
            log(event="session_dropped", sessionId=session_id, stage=ctrl.state.stage)
        return ctrl is not None


registry = SessionRegistry()

def get_registry() -> SessionRegistry:
    return registry
