import asyncio
import io

import numpy as np
from PIL import Image
from loguru import logger

from rangeread.core.engine_interface import OcrEngine, OcrResult
from rangeread.domain.models import CroppedImage


class PaddleOcrEngine(OcrEngine):
    name = "PaddleOCR"

    def __init__(self, lang: str = 'en', use_angle_cls: bool = True):
        self.use_angle_cls = use_angle_cls
        self.ocr = None
        self.load_error = None
        try:
            logger.info("Initializing PaddleOCR...")
            from paddleocr import PaddleOCR
            self.ocr = PaddleOCR(use_angle_cls=use_angle_cls, lang=lang)
            logger.info("PaddleOCR initialized successfully.")
        except Exception as e:
            self.load_error = f"CRITICAL: Failed to load PaddleOCR: {str(e)}"
            logger.error(self.load_error)
            raise

    def _recognize_sync(self, image: CroppedImage) -> OcrResult:
        img_array = np.array(Image.open(io.BytesIO(image.content)).convert('RGB'))
        result = self.ocr.ocr(img_array, cls=self.use_angle_cls)

        # One entry per page; a page is None when nothing was detected
        if not result or not result[0]:
            return OcrResult(text="")

        lines = []
        confidences = []
        for _box, (text, confidence) in result[0]:
            lines.append(text)
            confidences.append(float(confidence))
        return OcrResult(text="\n".join(lines), lines=lines, confidences=confidences)

    async def recognize(self, image: CroppedImage) -> OcrResult:
        if self.ocr is None:
            raise RuntimeError(self.load_error or "Model not initialized")
        return await asyncio.to_thread(self._recognize_sync, image)
