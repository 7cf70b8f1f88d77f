import uuid
from collections import OrderedDict
from functools import lru_cache

from fastapi import HTTPException
from loguru import logger

from rangeread.core.pipeline import ExtractionPipeline
from rangeread.review.session import ReviewSession

MAX_SESSIONS = 1000


@lru_cache(maxsize=1)
def get_pipeline() -> ExtractionPipeline:
    return ExtractionPipeline.from_config()


class SessionStore:
    """In-memory review sessions keyed by id; the least recently used is evicted past ``max_sessions``."""

    def __init__(self, max_sessions: int = MAX_SESSIONS):
        self.max_sessions = max_sessions
        self._sessions: "OrderedDict[str, ReviewSession]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def create(self, pipeline) -> str:
        session_id = str(uuid.uuid4())

        def on_complete(pair):
            logger.info(f"Session {session_id} confirmed range {pair[0]} - {pair[1]}")

        self._sessions[session_id] = ReviewSession(pipeline, on_extraction_complete=on_complete)
        while len(self._sessions) > self.max_sessions:
            evicted, _ = self._sessions.popitem(last=False)
            logger.info(f"Evicted review session {evicted}")
        return session_id

    def get(self, session_id: str) -> ReviewSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise HTTPException(status_code=404, detail=f"Unknown session {session_id}")
        self._sessions.move_to_end(session_id)
        return session

    def delete(self, session_id: str) -> None:
        if self._sessions.pop(session_id, None) is None:
            raise HTTPException(status_code=404, detail=f"Unknown session {session_id}")


@lru_cache(maxsize=1)
def get_session_store() -> SessionStore:
    return SessionStore()
