"""
Review workflow states and cycle outcomes.

Exactly one state is live per session. The presentation layer only reads the
state's data and ``available_actions``; it keeps no flags of its own.
"""

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Optional, Tuple, Union

from rangeread.domain.models import NumberPair

SUBMIT = "submit_image"


@dataclass(frozen=True)
class Idle:
    name: ClassVar[str] = "idle"
    actions: ClassVar[Tuple[str, ...]] = (SUBMIT,)


@dataclass(frozen=True)
class Processing:
    generation: int
    name: ClassVar[str] = "processing"
    actions: ClassVar[Tuple[str, ...]] = (SUBMIT,)


@dataclass(frozen=True)
class InsufficientResults:
    """Fewer than two numbers found. The user can retry the same image or abandon it."""
    count: int
    numbers: Tuple[str, ...] = ()
    name: ClassVar[str] = "insufficient_results"
    actions: ClassVar[Tuple[str, ...]] = (SUBMIT, "retry", "abandon")


@dataclass(frozen=True)
class AwaitingDecision:
    pair: NumberPair
    name: ClassVar[str] = "awaiting_decision"
    actions: ClassVar[Tuple[str, ...]] = (SUBMIT, "accept", "modify")


@dataclass(frozen=True)
class Modifying:
    pair: NumberPair
    draft1: str
    draft2: str
    name: ClassVar[str] = "modifying"
    actions: ClassVar[Tuple[str, ...]] = (SUBMIT, "edit", "save", "cancel")


@dataclass(frozen=True)
class Ready:
    pair: NumberPair
    name: ClassVar[str] = "ready"
    actions: ClassVar[Tuple[str, ...]] = (SUBMIT, "start")


@dataclass(frozen=True)
class Completed:
    # Pair already handed to the caller; inert until the next image
    pair: NumberPair
    name: ClassVar[str] = "completed"
    actions: ClassVar[Tuple[str, ...]] = (SUBMIT,)


ReviewState = Union[Idle, Processing, InsufficientResults, AwaitingDecision, Modifying, Ready, Completed]


def available_actions(state: ReviewState) -> Tuple[str, ...]:
    return state.actions


class ResetReason(str, Enum):
    PIPELINE_FAILURE = "pipeline_failure"
    INSUFFICIENT_RESULTS = "insufficient_results"
    SUPERSEDED = "superseded"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class Confirmed:
    pair: NumberPair


@dataclass(frozen=True)
class Reset:
    reason: ResetReason
    detail: Optional[str] = None


ReviewOutcome = Union[Confirmed, Reset]
