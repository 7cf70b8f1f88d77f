# Domain models shared by the pipeline and the review workflow
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple, Union


@dataclass(frozen=True)
class SourceImage:
    """Handle to an input image: a path/URI, or raw bytes from an upload."""
    uri: str
    content: Optional[bytes] = None

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "SourceImage":
        return cls(uri=str(path))

    @classmethod
    def from_bytes(cls, content: bytes, name: str = "upload") -> "SourceImage":
        return cls(uri=name, content=content)


@dataclass(frozen=True)
class CropRegion:
    x: int
    y: int
    width: int
    height: int

    def __post_init__(self):
        for field_name in ("x", "y", "width", "height"):
            value = getattr(self, field_name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ValueError(f"CropRegion.{field_name} must be a non-negative integer, got {value!r}")
        if self.width == 0 or self.height == 0:
            raise ValueError("CropRegion width and height must be positive")

    def to_box(self) -> Tuple[int, int, int, int]:
        """(left, upper, right, lower) as Pillow expects it."""
        return (self.x, self.y, self.x + self.width, self.y + self.height)


@dataclass(frozen=True)
class CroppedImage:
    # PNG-encoded so engines receive plain bytes
    content: bytes
    width: int
    height: int


@dataclass(frozen=True)
class NumberPair:
    first: str
    second: str

    def as_tuple(self) -> Tuple[str, str]:
        return (self.first, self.second)
