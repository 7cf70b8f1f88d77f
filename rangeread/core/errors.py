from enum import Enum
from typing import Optional


class Stage(str, Enum):
    CROP = "crop"
    RECOGNIZE = "recognize"


class RangeReadError(Exception):
    """Base class for every error raised by rangeread."""


class ConfigError(RangeReadError):
    pass


class StageFailure(RangeReadError):
    """A single pipeline stage failed; ``cause`` keeps the underlying exception."""
    stage: Stage

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause


class CropFailure(StageFailure):
    stage = Stage.CROP


class RecognitionFailure(StageFailure):
    stage = Stage.RECOGNIZE


class PipelineFailure(RangeReadError):
    """Wraps a stage failure; callers never see the stage's own exception type."""

    def __init__(self, stage: Stage, message: str):
        super().__init__(f"Processing pipeline failed at {stage.value}: {message}")
        self.stage = stage
        self.message = message


class ValidationFailure(RangeReadError):
    pass


class InvalidTransition(RangeReadError):
    def __init__(self, state: str, event: str):
        super().__init__(f"Cannot {event} while {state}")
        self.state = state
        self.event = event
