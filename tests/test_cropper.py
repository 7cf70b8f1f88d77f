"""
Tests for rangeread/core/cropper.py
"""

import asyncio
import io

import pytest
from PIL import Image

from rangeread.core.cropper import crop, crop_sync
from rangeread.core.errors import CropFailure, Stage
from rangeread.domain.models import CropRegion, SourceImage


def _png_bytes(size=(200, 100), color=(0, 0, 0)):
    buf = io.BytesIO()
    Image.new("RGB", size, color=color).save(buf, format="PNG")
    return buf.getvalue()


class TestCropRegion:
    def test_box(self):
        assert CropRegion(900, 150, 158, 850).to_box() == (900, 150, 1058, 1000)

    def test_rejects_negative(self):
        with pytest.raises(ValueError):
            CropRegion(-1, 0, 10, 10)

    def test_rejects_empty(self):
        with pytest.raises(ValueError):
            CropRegion(0, 0, 0, 10)

    def test_rejects_bool(self):
        with pytest.raises(ValueError):
            CropRegion(True, 0, 1, 1)
        with pytest.raises(ValueError):
            CropRegion(0, 0, True, 1)


class TestCrop:
    def test_crop_from_path(self, tmp_path):
        path = tmp_path / "src.png"
        Image.new("RGB", (200, 100)).save(path)

        cropped = crop_sync(SourceImage.from_path(path), CropRegion(10, 20, 50, 30))

        assert (cropped.width, cropped.height) == (50, 30)
        assert Image.open(io.BytesIO(cropped.content)).size == (50, 30)

    def test_crop_keeps_pixels(self):
        """The cropped artifact holds the selected area, not a resized copy"""
        image = Image.new("RGB", (100, 100), color=(255, 255, 255))
        image.paste((255, 0, 0), (40, 40, 60, 60))
        buf = io.BytesIO()
        image.save(buf, format="PNG")

        cropped = crop_sync(SourceImage.from_bytes(buf.getvalue()), CropRegion(40, 40, 20, 20))

        out = Image.open(io.BytesIO(cropped.content)).convert("RGB")
        assert out.getpixel((0, 0)) == (255, 0, 0)
        assert out.getpixel((19, 19)) == (255, 0, 0)

    def test_source_not_modified(self):
        content = _png_bytes()
        image = SourceImage.from_bytes(content)
        crop_sync(image, CropRegion(0, 0, 10, 10))
        assert image.content == content

    def test_out_of_bounds(self):
        """Regions past the image edge fail instead of being padded"""
        with pytest.raises(CropFailure) as exc_info:
            crop_sync(SourceImage.from_bytes(_png_bytes((200, 100))), CropRegion(150, 0, 100, 50))
        assert exc_info.value.stage == Stage.CROP

    def test_undecodable(self):
        with pytest.raises(CropFailure) as exc_info:
            crop_sync(SourceImage.from_bytes(b"not an image"), CropRegion(0, 0, 10, 10))
        assert exc_info.value.cause is not None

    def test_missing_file(self, tmp_path):
        with pytest.raises(CropFailure):
            crop_sync(SourceImage.from_path(tmp_path / "missing.png"), CropRegion(0, 0, 10, 10))

    def test_async_crop(self):
        cropped = asyncio.run(crop(SourceImage.from_bytes(_png_bytes()), CropRegion(0, 0, 20, 10)))
        assert (cropped.width, cropped.height) == (20, 10)

    def test_decompression_bomb(self, monkeypatch):
        """Pillow's size guard surfaces as a crop failure"""
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 1000)
        with pytest.raises(CropFailure) as exc_info:
            crop_sync(SourceImage.from_bytes(_png_bytes((1200, 1100))), CropRegion(0, 0, 10, 10))
        assert isinstance(exc_info.value.cause, Image.DecompressionBombError)
