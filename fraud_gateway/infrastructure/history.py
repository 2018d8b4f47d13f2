"""In-memory evaluation history, one bounded log per caller session"""

import threading
from collections import OrderedDict, deque
from typing import Deque, List, Optional

from fraud_gateway.domain.models import Verdict

DEFAULT_CAPACITY = 10
DEFAULT_MAX_SESSIONS = 1000


class EvaluationHistory:
    """Most-recent-first log of verdicts; the oldest entry is evicted past capacity"""

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if capacity < 1:
            raise ValueError("History capacity must be at least 1")
        self.capacity = capacity
        self._verdicts: Deque[Verdict] = deque(maxlen=capacity)
        self._lock = threading.Lock()

    def append(self, verdict: Verdict) -> None:
        """Record a verdict as the newest entry"""
        with self._lock:
            self._verdicts.appendleft(verdict)

    def recent(self, limit: Optional[int] = None) -> List[Verdict]:
        """Return up to `limit` verdicts, newest first"""
        with self._lock:
            verdicts = list(self._verdicts)
        if limit is None:
            return verdicts
        return verdicts[: max(limit, 0)]

    def clear(self) -> None:
        with self._lock:
            self._verdicts.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._verdicts)


class HistoryRegistry:
    """
    Session id -> EvaluationHistory.

    Only writes create a session. Past `max_sessions`, the least recently
    written session is dropped.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY, max_sessions: int = DEFAULT_MAX_SESSIONS):
        if max_sessions < 1:
            raise ValueError("Session limit must be at least 1")
        self.capacity = capacity
        self.max_sessions = max_sessions
        self._sessions: "OrderedDict[str, EvaluationHistory]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, session_id: str) -> Optional[EvaluationHistory]:
        """Look up a session without registering it"""
        with self._lock:
            return self._sessions.get(session_id)

    def for_session(self, session_id: str) -> EvaluationHistory:
        """Return the session's history, creating it if needed"""
        with self._lock:
            history = self._sessions.get(session_id)
            if history is None:
                history = EvaluationHistory(self.capacity)
                self._sessions[session_id] = history
                while len(self._sessions) > self.max_sessions:
                    self._sessions.popitem(last=False)
            else:
                self._sessions.move_to_end(session_id)
            return history

    def end_session(self, session_id: str) -> bool:
        """Discard a session's history; returns False when the session was unknown"""
        with self._lock:
            return self._sessions.pop(session_id, None) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
