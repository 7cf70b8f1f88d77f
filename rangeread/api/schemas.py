from typing import List, Optional

from pydantic import BaseModel

from rangeread.review.states import ReviewState


class ExtractResponse(BaseModel):
    file: str
    numbers: List[str]


class StateResponse(BaseModel):
    session_id: str
    state: str
    actions: List[str]
    generation: int
    pair: Optional[List[str]] = None
    drafts: Optional[List[str]] = None
    count: Optional[int] = None
    numbers: Optional[List[str]] = None
    error: Optional[str] = None

    @classmethod
    def from_state(cls, session_id: str, state: ReviewState, generation: int,
                   error: Optional[str] = None) -> "StateResponse":
        pair = getattr(state, "pair", None)
        drafts = None
        if hasattr(state, "draft1"):
            drafts = [state.draft1, state.draft2]
        numbers = getattr(state, "numbers", None)
        return cls(
            session_id=session_id,
            state=state.name,
            actions=list(state.actions),
            generation=generation,
            pair=list(pair.as_tuple()) if pair is not None else None,
            drafts=drafts,
            count=getattr(state, "count", None),
            numbers=list(numbers) if numbers is not None else None,
            error=error,
        )


class DraftsRequest(BaseModel):
    draft1: Optional[str] = None
    draft2: Optional[str] = None


class StartResponse(BaseModel):
    session_id: str
    pair: List[str]
