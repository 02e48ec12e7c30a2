"""Token-addressed sessions for WebSocket clients.

Every session owns its language preference over a private in-memory store,
so two clients connected to the same process never see each other's choice.
Sessions that stay idle longer than ``TEC_SESSION_IDLE_TIMEOUT`` seconds are
swept by a background task started from the app lifespan.
"""

import asyncio
import logging
import time
import uuid
from dataclasses import dataclass, field

from tec_lms.config import settings
from tec_lms.language import Language, parse_language
from tec_lms.preferences import LanguagePreferences, MemoryPreferenceStore

logger = logging.getLogger("tec_lms.session")

SWEEP_INTERVAL = 60


@dataclass
class Session:
    token: str
    preferences: LanguagePreferences = field(
        default_factory=lambda: LanguagePreferences(MemoryPreferenceStore())
    )
    last_active: float = field(default_factory=time.time)

    @property
    def language(self) -> Language:
        return self.preferences.resolve_active_language()

    def idle_for(self, now: float) -> float:
        return now - self.last_active


class SessionRegistry:
    def __init__(self, idle_timeout: int | None = None) -> None:
        self.idle_timeout = idle_timeout if idle_timeout is not None else settings.session_idle_timeout
        self._sessions: dict[str, Session] = {}
        self._sweeper: asyncio.Task | None = None

    async def create_session(self, language: Language | str | None = None) -> Session:
        """Open a session; ``language`` seeds its preference when given."""
        session = Session(token=str(uuid.uuid4()))
        if language is not None:
            session.preferences.persist_language(language)
        self._sessions[session.token] = session
        logger.debug("Session %s opened (%s)", session.token, session.language.value)
        return session

    async def get_session(self, token: str) -> Session | None:
        session = self._sessions.get(token)
        if session is not None:
            session.last_active = time.time()
        return session

    async def get_language(self, token: str) -> Language | None:
        session = await self.get_session(token)
        return session.language if session else None

    async def set_language(self, token: str, language: Language | str) -> Language | None:
        """Change a session's language and notify its listeners.

        Returns ``None`` for an unknown token and raises ``ValueError`` for a
        code other than ``en``/``km``.
        """
        code = parse_language(language)
        if code is None:
            raise ValueError(f"Unsupported language: {language!r}")
        session = await self.get_session(token)
        if session is None:
            return None
        return session.preferences.change_language(code)

    async def remove_session(self, token: str) -> None:
        self._sessions.pop(token, None)

    async def cleanup_expired(self) -> int:
        now = time.time()
        idle = [token for token, s in self._sessions.items() if s.idle_for(now) > self.idle_timeout]
        for token in idle:
            del self._sessions[token]
        if idle:
            logger.info("Swept %d idle session(s)", len(idle))
        return len(idle)

    async def _sweep(self) -> None:
        while True:
            await asyncio.sleep(SWEEP_INTERVAL)
            await self.cleanup_expired()

    def start_cleanup(self) -> None:
        self._sweeper = asyncio.create_task(self._sweep())

    def stop_cleanup(self) -> None:
        if self._sweeper is not None:
            self._sweeper.cancel()
            self._sweeper = None

    @property
    def session_count(self) -> int:
        return len(self._sessions)


registry = SessionRegistry()
