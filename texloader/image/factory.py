# texloader/image/factory.py
from __future__ import annotations

import io
import logging
from typing import TYPE_CHECKING, Optional

from PIL import Image, UnidentifiedImageError

from texloader.errors import Result, ResultCode, invalid_operation, out_of_range
from texloader.formats import TextureFormat
from texloader.loader import TextureLoader, TextureLoaderFactory
from texloader.reader import DataReader
from texloader.settings import TextureLoaderSettings
from texloader.types import TextureDesc, TextureType

if TYPE_CHECKING:
    from texloader.gpu.texture import Texture

logger = logging.getLogger("texloader.image")

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
JPEG_SIGNATURE = b"\xff\xd8\xff"


class ImageTextureLoader(TextureLoader):
    """Single RGBA8 mip decoded from a PNG or JPEG. Owns its pixels."""

    def __init__(self, reader: DataReader, width: int, height: int, pixels: bytes) -> None:
        super().__init__(
            reader,
            TextureDesc(
                format=TextureFormat.RGBA_UNORM8,
                type=TextureType.TWO_D,
                width=width,
                height=height,
            ),
        )
        self._pixels = pixels

    def can_upload_source_data(self) -> bool:
        return True

    def should_generate_mipmaps(self) -> bool:
        return True

    def _upload(self, texture: Texture) -> None:
        texture.upload(texture.get_full_range(0), self._pixels)

    def _load_to_external_memory(self, destination: memoryview, length: int) -> None:
        if len(self._pixels) > length:
            raise out_of_range(
                f"Destination too small: need {len(self._pixels)} bytes, have {length}."
            )
        destination[: len(self._pixels)] = self._pixels


class ImageTextureLoaderFactory(TextureLoaderFactory):
    def __init__(self, settings: Optional[TextureLoaderSettings] = None) -> None:
        self._settings = settings or TextureLoaderSettings()

    @property
    def header_length(self) -> int:
        return len(JPEG_SIGNATURE)

    def _can_create(self, reader: DataReader) -> Result:
        for signature in (PNG_SIGNATURE, JPEG_SIGNATURE):
            if reader.length >= len(signature) and reader.at(0, len(signature)) == signature:
                return Result.ok()
        return Result(ResultCode.INVALID_OPERATION, "Unrecognized image signature.")

    def _try_create(self, reader: DataReader) -> ImageTextureLoader:
        try:
            with Image.open(io.BytesIO(reader.data)) as img:
                converted = img.convert("RGBA")
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
            raise invalid_operation(f"Failed to decode image: {e}") from e

        if self._settings.flip_images_vertically:
            converted = converted.transpose(Image.Transpose.FLIP_TOP_BOTTOM)

        width, height = converted.size
        logger.debug("Decoded %dx%d image", width, height)
        return ImageTextureLoader(reader, width, height, converted.tobytes())
