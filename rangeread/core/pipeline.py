import time
from functools import lru_cache
from typing import Awaitable, Callable, List, Optional, Union

from loguru import logger

from rangeread.core.config import CROP_REGION, load_settings
from rangeread.core.cropper import crop
from rangeread.core.errors import PipelineFailure, StageFailure
from rangeread.core.numbers import extract_numbers
from rangeread.core.recognizer import Recognizer, create_engine
from rangeread.domain.models import CroppedImage, CropRegion, SourceImage
from rangeread.monitoring import metrics

Cropper = Callable[[SourceImage, CropRegion], Awaitable[CroppedImage]]


class ExtractionPipeline:
    """Crop -> recognize -> extract numbers. Holds no per-run state."""

    def __init__(self, recognizer: Recognizer, region: CropRegion = CROP_REGION,
                 cropper: Cropper = crop):
        self.recognizer = recognizer
        self.region = region
        self.cropper = cropper

    @classmethod
    def from_config(cls, config_path: Optional[str] = None) -> "ExtractionPipeline":
        settings = load_settings(config_path)
        logger.info(f"Initializing pipeline with engine: {settings.engine}")
        engine = create_engine(settings)
        return cls(Recognizer(engine, timeout_s=settings.timeout_s))

    async def run(self, image: SourceImage) -> List[str]:
        metrics.PIPELINE_RUNS_TOTAL.inc()
        start = time.perf_counter()
        try:
            cropped = await self.cropper(image, self.region)
            text = await self.recognizer.recognize(cropped)
        except StageFailure as e:
            metrics.PIPELINE_FAILURES_TOTAL.labels(stage=e.stage.value).inc()
            logger.error(f"Process Pipeline Error ({e.stage.value}): {e.message}")
            raise PipelineFailure(e.stage, e.message) from e
        finally:
            metrics.PIPELINE_LATENCY_MS.observe((time.perf_counter() - start) * 1000)

        numbers = extract_numbers(text)
        metrics.NUMBERS_EXTRACTED.observe(len(numbers))
        logger.info(f"Extracted {len(numbers)} number(s) from {image.uri}")
        return numbers


@lru_cache(maxsize=1)
def default_pipeline() -> ExtractionPipeline:
    return ExtractionPipeline.from_config()


async def process_image_and_extract_numbers(
    image: Union[SourceImage, str],
    pipeline: Optional[ExtractionPipeline] = None,
) -> List[str]:
    """Run the full pipeline once for ``image``; raises PipelineFailure on any stage error."""
    if isinstance(image, str):
        image = SourceImage.from_path(image)
    return await (pipeline or default_pipeline()).run(image)
