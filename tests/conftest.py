import asyncio
from typing import Dict, List, Optional

import pytest
from PIL import Image

from rangeread.core.engine_interface import OcrEngine, OcrResult
from rangeread.core.errors import PipelineFailure, Stage
from rangeread.domain.models import CroppedImage


class FakeEngine(OcrEngine):
    """OCR engine returning canned text."""
    name = "fake"

    def __init__(self, text: str = "", error: Optional[Exception] = None, delay: float = 0.0):
        self.text = text
        self.error = error
        self.delay = delay
        self.seen: List[CroppedImage] = []

    async def recognize(self, image: CroppedImage) -> OcrResult:
        self.seen.append(image)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return OcrResult(text=self.text, lines=self.text.splitlines())


class ScriptedPipeline:
    """Returns (or raises) a scripted result per image uri."""

    def __init__(self, results: Dict[str, object]):
        self.results = results
        self.calls: List[str] = []

    async def run(self, image):
        self.calls.append(image.uri)
        result = self.results[image.uri]
        if isinstance(result, Exception):
            raise result
        return list(result)


class GatedPipeline:
    """Each run blocks until the test releases its image uri."""

    def __init__(self):
        self._gates: Dict[str, asyncio.Future] = {}

    def _gate(self, uri: str) -> asyncio.Future:
        if uri not in self._gates:
            self._gates[uri] = asyncio.get_running_loop().create_future()
        return self._gates[uri]

    async def run(self, image):
        return await self._gate(image.uri)

    def release(self, uri: str, numbers: List[str]):
        self._gate(uri).set_result(numbers)

    def fail(self, uri: str, error: Exception):
        self._gate(uri).set_exception(error)


def recognize_failure(message: str = "Text recognition failed.") -> PipelineFailure:
    return PipelineFailure(Stage.RECOGNIZE, message)


@pytest.fixture
def display_image(tmp_path):
    """A blank photo large enough to contain the fixed crop region."""
    path = tmp_path / "display.png"
    Image.new("RGB", (1200, 1100), color=(255, 255, 255)).save(path)
    return path
