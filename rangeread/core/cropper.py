import asyncio
import io

from PIL import Image
from loguru import logger

from rangeread.core.errors import CropFailure
from rangeread.domain.models import CroppedImage, CropRegion, SourceImage


def _open(image: SourceImage) -> Image.Image:
    if image.content is not None:
        return Image.open(io.BytesIO(image.content))
    return Image.open(image.uri)


def crop_sync(image: SourceImage, region: CropRegion) -> CroppedImage:
    """Cut ``region`` out of ``image`` and return it PNG-encoded."""
    try:
        with _open(image) as source:
            source.load()
            width, height = source.size
            left, upper, right, lower = region.to_box()
            # Pillow pads out-of-range boxes with black instead of failing
            if right > width or lower > height:
                raise CropFailure(
                    f"Crop region {region} exceeds image bounds {width}x{height}"
                )
            cropped = source.crop((left, upper, right, lower))
            buf = io.BytesIO()
            cropped.save(buf, format='PNG')
    except CropFailure as e:
        logger.error(f"Crop Error: {e.message}")
        raise
    except Exception as e:
        logger.error(f"Crop Error: {e}")
        raise CropFailure("Image cropping failed.", cause=e) from e

    return CroppedImage(content=buf.getvalue(), width=cropped.width, height=cropped.height)


async def crop(image: SourceImage, region: CropRegion) -> CroppedImage:
    # Decoding and encoding are CPU bound; keep them off the event loop
    return await asyncio.to_thread(crop_sync, image, region)
