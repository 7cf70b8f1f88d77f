from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List

from rangeread.domain.models import CroppedImage


@dataclass
class OcrResult:
    text: str
    lines: List[str] = field(default_factory=list)
    confidences: List[float] = field(default_factory=list)


class OcrEngine(ABC):
    name: str = "unknown"

    @abstractmethod
    async def recognize(self, image: CroppedImage) -> OcrResult:
        pass
