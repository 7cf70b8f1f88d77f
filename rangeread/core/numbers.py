import re
from typing import List

# Unsigned ASCII integer or decimal; no thousands separators, no exponent
NUMBER_PATTERN = re.compile(r"\d+(?:\.\d+)?", re.ASCII)


def extract_numbers(text: str) -> List[str]:
    """Numeric tokens of ``text`` in order of appearance, e.g. "36.6°C 101.2°C" -> ["36.6", "101.2"]."""
    return NUMBER_PATTERN.findall(text or "")
