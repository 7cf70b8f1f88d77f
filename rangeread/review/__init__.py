from rangeread.review.session import ReviewSession
from rangeread.review.states import (
    AwaitingDecision,
    Completed,
    Confirmed,
    Idle,
    InsufficientResults,
    Modifying,
    Processing,
    Ready,
    Reset,
    ResetReason,
    ReviewState,
    available_actions,
)

__all__ = [
    "ReviewSession",
    "ReviewState",
    "Idle",
    "Processing",
    "InsufficientResults",
    "AwaitingDecision",
    "Modifying",
    "Ready",
    "Completed",
    "Confirmed",
    "Reset",
    "ResetReason",
    "available_actions",
]
