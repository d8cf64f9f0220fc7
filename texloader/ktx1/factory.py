# texloader/ktx1/factory.py
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List, Sequence, Tuple

from texloader.errors import Result, ResultCode, invalid_operation, out_of_range
from texloader.formats import TextureFormat
from texloader.ktx1.header import (
    HEADER_LENGTH,
    IMAGE_SIZE_LENGTH,
    LITTLE_ENDIAN,
    Header,
)
from texloader.loader import MipLevelData, TextureLoader, TextureLoaderFactory
from texloader.reader import DataReader
from texloader.types import TextureDesc, TextureRangeDesc, TextureType

if TYPE_CHECKING:
    from texloader.gpu.texture import Texture

logger = logging.getLogger("texloader.ktx1")


def _reject(message: str) -> Result:
    return Result(ResultCode.INVALID_OPERATION, message)


class Ktx1TextureLoader(TextureLoader):
    """Loader over the mip levels of a validated KTX1 container."""

    def __init__(
        self,
        reader: DataReader,
        range_desc: TextureRangeDesc,
        texture_format: TextureFormat,
        mip_level_data: Sequence[MipLevelData],
        should_generate_mipmaps: bool,
    ) -> None:
        super().__init__(
            reader,
            TextureDesc(
                format=texture_format,
                type=TextureType.from_shape(
                    range_desc.num_faces, range_desc.depth, range_desc.num_layers
                ),
                width=range_desc.width,
                height=range_desc.height,
                depth=range_desc.depth,
                num_layers=range_desc.num_layers,
                num_mip_levels=range_desc.num_mip_levels,
            ),
        )
        self._mip_level_data = tuple(mip_level_data)
        self._should_generate_mipmaps = should_generate_mipmaps

    @property
    def mip_level_data(self) -> Tuple[MipLevelData, ...]:
        return self._mip_level_data

    def can_upload_source_data(self) -> bool:
        return True

    def should_generate_mipmaps(self) -> bool:
        return self._should_generate_mipmaps

    def _upload(self, texture: Texture) -> None:
        # Levels beyond what the target declares are dropped, not reported.
        count = min(texture.descriptor.num_mip_levels, len(self._mip_level_data))
        if count < len(self._mip_level_data):
            logger.debug(
                "Target texture holds %d mip levels, skipping %d",
                count,
                len(self._mip_level_data) - count,
            )
        for mip_level in range(count):
            texture.upload(
                texture.get_full_range(mip_level),
                self._mip_level_data[mip_level].data,
            )

    def _load_to_external_memory(self, destination: memoryview, length: int) -> None:
        offset = 0
        for mip_level, mip in enumerate(self._mip_level_data):
            end = offset + mip.length
            if end > length:
                raise out_of_range(
                    f"Destination too small for mip level {mip_level}: "
                    f"need {end} bytes, have {length}."
                )
            destination[offset:end] = mip.data
            offset = end


class Ktx1TextureLoaderFactory(TextureLoaderFactory):
    """
    Validates and decodes KTX1 containers.

    `can_create` looks at the 64-byte header only. `try_create` walks the
    key/value block and every mip entry, cross-checking each declared image
    size against what the format and dimensions imply.
    """

    @property
    def header_length(self) -> int:
        return HEADER_LENGTH

    def _can_create(self, reader: DataReader) -> Result:
        header = Header.unpack(reader)
        if not header.tag_is_valid():
            return _reject("Incorrect identifier.")
        if header.endianness != LITTLE_ENDIAN:
            return _reject("Big endian not supported.")
        if not header.format_properties().is_valid:
            return _reject("Unrecognized texture format.")
        if header.number_of_faces == 6 and header.number_of_array_elements > 1:
            return _reject("Texture cube arrays not supported.")
        if header.number_of_array_elements > 1 and header.pixel_depth > 1:
            return _reject("3D texture arrays not supported.")
        return Result.ok()

    def _try_create(self, reader: DataReader) -> Ktx1TextureLoader:
        header = Header.unpack(reader)
        length = reader.length

        if header.bytes_of_key_value_data > length:
            raise invalid_operation("Length is too short.")

        if header.number_of_faces not in (1, 6):
            raise invalid_operation("numberOfFaces must be 1 or 6.")

        is_cube = header.number_of_faces == 6
        if is_cube and header.pixel_depth != 0:
            raise invalid_operation("pixelDepth must be 0 for cube textures.")
        if is_cube and header.pixel_width != header.pixel_height:
            raise invalid_operation(
                "pixelWidth must match pixelHeight for cube textures."
            )

        properties = header.format_properties()

        range_desc = TextureRangeDesc(
            width=max(header.pixel_width, 1),
            height=max(header.pixel_height, 1),
            depth=max(header.pixel_depth, 1),
            num_layers=max(header.number_of_array_elements, 1),
            num_faces=header.number_of_faces,
            num_mip_levels=max(header.number_of_mipmap_levels, 1),
        )
        range_desc.validate().raise_if_error()

        range_bytes = properties.get_bytes_per_range(range_desc)
        if range_bytes > length - HEADER_LENGTH:
            raise invalid_operation("Length is too short.")

        # One size prefix is read per mip even when the header declares zero.
        expected_length = (
            HEADER_LENGTH
            + header.bytes_of_key_value_data
            + range_desc.num_mip_levels * IMAGE_SIZE_LENGTH
            + range_bytes
        )
        if length < expected_length:
            raise invalid_operation("Length shorter than expected length.")

        mip_level_data: List[MipLevelData] = []
        offset = HEADER_LENGTH + header.bytes_of_key_value_data
        for mip_level in range(range_desc.num_mip_levels):
            image_size = reader.read_u32_at(offset)
            expected_bytes = properties.get_bytes_per_range(
                range_desc.at_mip_level(mip_level).at_face(0)
            )
            expected_cube_bytes = expected_bytes * 6

            if image_size != expected_bytes and not (
                is_cube and image_size == expected_cube_bytes
            ):
                raise invalid_operation(
                    f"Unexpected image size for mip level {mip_level}: "
                    f"{image_size} (expected {expected_bytes})."
                )

            offset += IMAGE_SIZE_LENGTH
            mip_bytes = expected_cube_bytes if is_cube else expected_bytes
            mip_level_data.append(MipLevelData(offset, reader.at(offset, mip_bytes)))
            offset += mip_bytes

        logger.debug(
            "KTX1 %s %dx%dx%d, %d layer(s), %d mip(s), %d face(s)",
            properties.format.value,
            range_desc.width,
            range_desc.height,
            range_desc.depth,
            range_desc.num_layers,
            range_desc.num_mip_levels,
            range_desc.num_faces,
        )

        return Ktx1TextureLoader(
            reader,
            range_desc,
            properties.format,
            mip_level_data,
            should_generate_mipmaps=header.number_of_mipmap_levels == 0,
        )
