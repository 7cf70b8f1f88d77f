import asyncio

from loguru import logger

from rangeread.core.engine_interface import OcrEngine
from rangeread.core.errors import RecognitionFailure
from rangeread.domain.models import CroppedImage


class Recognizer:
    """Runs the OCR engine on a cropped image, bounded by ``timeout_s``."""

    def __init__(self, engine: OcrEngine, timeout_s: float = 30.0):
        self.engine = engine
        self.timeout_s = timeout_s

    async def recognize(self, image: CroppedImage) -> str:
        try:
            result = await asyncio.wait_for(self.engine.recognize(image), timeout=self.timeout_s)
        except asyncio.TimeoutError as e:
            logger.error(f"OCR Error: {self.engine.name} timed out after {self.timeout_s}s")
            raise RecognitionFailure("Text recognition timed out.", cause=e) from e
        except Exception as e:
            logger.error(f"OCR Error: {e}")
            raise RecognitionFailure("Text recognition failed.", cause=e) from e
        return result.text


def create_engine(settings) -> OcrEngine:
    logger.info(f"Loading OCR engine: {settings.engine}")
    if settings.engine == "PaddleOCR":
        from rangeread.models.paddle_ocr import PaddleOcrEngine
        return PaddleOcrEngine(lang=settings.lang, use_angle_cls=settings.use_angle_cls)
    raise ValueError(f"Model {settings.engine} not supported")
