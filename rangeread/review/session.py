import asyncio
import uuid
from typing import Callable, Optional, Tuple

from loguru import logger

from rangeread.core.audit_logger import audit_logger
from rangeread.core.errors import InvalidTransition, PipelineFailure, ValidationFailure
from rangeread.domain.models import NumberPair, SourceImage
from rangeread.monitoring import metrics
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
)


class ReviewSession:
    """
    Drives one image at a time from extraction to a confirmed pair.

    Every submitted image starts a new cycle with a new generation number.
    Pipeline results are applied only if their generation is still current,
    so a late result from a superseded run never touches the live state.
    """

    def __init__(
        self,
        pipeline,
        on_extraction_complete: Optional[Callable[[Tuple[str, str]], None]] = None,
        on_process_reset: Optional[Callable[[], None]] = None,
    ):
        self.pipeline = pipeline
        self.on_extraction_complete = on_extraction_complete
        self.on_process_reset = on_process_reset

        self._state: ReviewState = Idle()
        self._generation = 0
        self._image: Optional[SourceImage] = None
        self._outcome: Optional[asyncio.Future] = None
        self._modified = False
        self.cycle_id: Optional[str] = None
        self.last_failure: Optional[PipelineFailure] = None

    @property
    def state(self) -> ReviewState:
        return self._state

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def outcome(self) -> Optional[asyncio.Future]:
        """Future of the current cycle, resolved with Confirmed or Reset."""
        return self._outcome

    def _require(self, state_type, event: str):
        if not isinstance(self._state, state_type):
            raise InvalidTransition(self._state.name, event)
        return self._state

    def _resolve(self, outcome) -> None:
        if self._outcome is not None and not self._outcome.done():
            self._outcome.set_result(outcome)

    def _reset(self, reason: ResetReason, detail: str) -> None:
        self._resolve(Reset(reason, detail))
        if self.on_process_reset:
            self.on_process_reset()

    async def submit_image(self, image: SourceImage) -> ReviewState:
        """
        Start a new cycle for ``image``, discarding whatever the previous cycle held.

        Returns the live state once this run's result has been applied. Raises
        PipelineFailure if this run fails and is still current; a superseded run
        returns quietly. Any other error or a cancellation of a current run
        resets to Idle before propagating.
        """
        self._resolve(Reset(ResetReason.SUPERSEDED, "A new image was submitted"))

        self._generation += 1
        generation = self._generation
        self._image = image
        self._modified = False
        self.last_failure = None
        self.cycle_id = str(uuid.uuid4())
        self._outcome = asyncio.get_running_loop().create_future()
        self._state = Processing(generation)
        cycle_id = self.cycle_id

        audit_logger.log(cycle_id=cycle_id, event="IMAGE_SUBMITTED",
                         data={"image": image.uri, "generation": generation})

        try:
            numbers = await self.pipeline.run(image)
        except PipelineFailure as e:
            if generation != self._generation:
                self._discard(cycle_id, generation)
                return self._state
            logger.error(f"Processing error for cycle {cycle_id}: {e}")
            self._state = Idle()
            self.last_failure = e
            audit_logger.log(cycle_id=cycle_id, event="PIPELINE_FAILED",
                             data={"stage": e.stage.value, "message": e.message})
            self._reset(ResetReason.PIPELINE_FAILURE, str(e))
            raise
        except asyncio.CancelledError:
            if generation == self._generation:
                logger.warning(f"Processing cancelled for cycle {cycle_id}")
                self._state = Idle()
                audit_logger.log(cycle_id=cycle_id, event="PROCESSING_CANCELLED",
                                 data={"generation": generation})
                self._reset(ResetReason.CANCELLED, "Processing was cancelled")
            raise
        except Exception as e:
            if generation != self._generation:
                self._discard(cycle_id, generation)
                return self._state
            logger.exception(f"Unexpected processing error for cycle {cycle_id}")
            self._state = Idle()
            audit_logger.log(cycle_id=cycle_id, event="PIPELINE_FAILED",
                             data={"stage": None, "message": str(e)})
            self._reset(ResetReason.PIPELINE_FAILURE, str(e))
            raise

        if generation != self._generation:
            self._discard(cycle_id, generation)
            return self._state

        if len(numbers) < 2:
            logger.warning(f"Could not find at least two numbers in the selected area (found {len(numbers)})")
            metrics.INSUFFICIENT_RESULTS_TOTAL.inc()
            self._state = InsufficientResults(count=len(numbers), numbers=tuple(numbers))
            audit_logger.log(cycle_id=cycle_id, event="INSUFFICIENT_RESULTS",
                             data={"numbers": list(numbers)})
            self._reset(ResetReason.INSUFFICIENT_RESULTS, f"Found {len(numbers)} number(s)")
            return self._state

        pair = NumberPair(numbers[0], numbers[1])
        self._state = AwaitingDecision(pair)
        audit_logger.log(cycle_id=cycle_id, event="AWAITING_DECISION", data={"pair": list(pair.as_tuple())})
        return self._state

    def _discard(self, cycle_id: str, generation: int) -> None:
        logger.info(f"Discarding result of superseded run {generation} (current {self._generation})")
        metrics.STALE_RESULTS_TOTAL.inc()
        audit_logger.log(cycle_id=cycle_id, event="STALE_RESULT_DISCARDED",
                         data={"generation": generation, "current": self._generation})

    async def retry(self) -> ReviewState:
        self._require(InsufficientResults, "retry")
        return await self.submit_image(self._image)

    def abandon(self) -> ReviewState:
        self._require(InsufficientResults, "abandon")
        self._state = Idle()
        return self._state

    def accept(self) -> ReviewState:
        state = self._require(AwaitingDecision, "accept")
        self._state = Ready(state.pair)
        audit_logger.log(cycle_id=self.cycle_id, event="ACCEPTED", data={"pair": list(state.pair.as_tuple())})
        return self._state

    def modify(self) -> ReviewState:
        state = self._require(AwaitingDecision, "modify")
        self._state = Modifying(state.pair, state.pair.first, state.pair.second)
        return self._state

    def edit(self, draft1: Optional[str] = None, draft2: Optional[str] = None) -> ReviewState:
        state = self._require(Modifying, "edit")
        self._state = Modifying(
            state.pair,
            state.draft1 if draft1 is None else draft1,
            state.draft2 if draft2 is None else draft2,
        )
        return self._state

    def save(self) -> ReviewState:
        state = self._require(Modifying, "save")
        first = state.draft1.strip()
        second = state.draft2.strip()
        if first == '' or second == '':
            raise ValidationFailure("Numbers cannot be empty.")

        pair = NumberPair(first, second)
        self._state = Ready(pair)
        self._modified = True
        audit_logger.log(cycle_id=self.cycle_id, event="SAVED", data={"pair": list(pair.as_tuple())})
        return self._state

    def cancel(self) -> ReviewState:
        state = self._require(Modifying, "cancel")
        self._state = AwaitingDecision(state.pair)
        return self._state

    def start(self) -> NumberPair:
        """Hand the confirmed pair to the caller. Only possible once per cycle."""
        state = self._require(Ready, "start")
        self._state = Completed(state.pair)
        metrics.REVIEW_OUTCOMES_TOTAL.labels(outcome="modified" if self._modified else "accepted").inc()
        audit_logger.log(cycle_id=self.cycle_id, event="STARTED", data={"pair": list(state.pair.as_tuple())})

        self._resolve(Confirmed(state.pair))
        if self.on_extraction_complete:
            self.on_extraction_complete(state.pair.as_tuple())
        return state.pair
