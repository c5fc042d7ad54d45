"""
In-memory session store.

Each session owns one MedicalRecord, its own random generator and a lock
that serializes upload batches. Nothing is persisted; sessions disappear
on restart or when evicted.
"""
import asyncio
import logging
import random
import uuid
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from medpanel.core.config import settings
from medpanel.core.datetime_utils import utc_now
from medpanel.core.exceptions import SessionNotFoundError
from medpanel.models import MedicalRecord
from medpanel.schemas.upload import UserNotice

logger = logging.getLogger(__name__)


@dataclass
class MedicalSession:
    """One user's working set: the record plus the state needed to update it."""
    session_id: str
    created_at: datetime
    record: MedicalRecord = field(default_factory=MedicalRecord)
    rng: random.Random = field(default_factory=random.Random)
    lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)
    notices: List[UserNotice] = field(default_factory=list)


class SessionStore:
    """Bounded, insertion-ordered map of live sessions."""

    def __init__(self, max_sessions: Optional[int] = None, seed: Optional[int] = None):
        """
        Args:
            max_sessions: Maximum live sessions; the oldest is evicted when full.
                Defaults to settings.max_sessions.
            seed: Seed for every new session's random generator. Defaults to
                settings.random_seed (None means unseeded).

        Raises:
            ValueError: If max_sessions is less than 1.
        """
        self.max_sessions = max_sessions if max_sessions is not None else settings.max_sessions
        if self.max_sessions < 1:
            raise ValueError(f"max_sessions must be at least 1, got {self.max_sessions}")
        self.seed = seed if seed is not None else settings.random_seed
        self._sessions: "OrderedDict[str, MedicalSession]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    def create(self) -> MedicalSession:
        """Create an empty session, evicting the oldest ones if the store is full."""
        while len(self._sessions) >= self.max_sessions:
            evicted_id, _ = self._sessions.popitem(last=False)
            logger.info("Evicted oldest session", extra={"session_id": evicted_id})

        session = MedicalSession(
            session_id=uuid.uuid4().hex,
            created_at=utc_now(),
            rng=random.Random(self.seed),
        )
        self._sessions[session.session_id] = session
        logger.info(
            "Session created",
            extra={"session_id": session.session_id, "live_sessions": len(self._sessions)},
        )
        return session

    def get(self, session_id: str) -> MedicalSession:
        """
        Raises:
            SessionNotFoundError: If the session does not exist or was evicted.
        """
        try:
            return self._sessions[session_id]
        except KeyError:
            raise SessionNotFoundError(session_id=session_id)

    def delete(self, session_id: str) -> None:
        """
        Raises:
            SessionNotFoundError: If the session does not exist or was evicted.
        """
        if self._sessions.pop(session_id, None) is None:
            raise SessionNotFoundError(session_id=session_id)
        logger.info("Session deleted", extra={"session_id": session_id})

    def clear(self) -> None:
        self._sessions.clear()
