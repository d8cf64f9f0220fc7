# texloader/ktx1/header.py
from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import ClassVar

from texloader.formats import TextureFormatProperties
from texloader.reader import DataReader

KTX1_IDENTIFIER = bytes(
    (0xAB, 0x4B, 0x54, 0x58, 0x20, 0x31, 0x31, 0xBB, 0x0D, 0x0A, 0x1A, 0x0A)
)
LITTLE_ENDIAN = 0x04030201
HEADER_LENGTH = 64
IMAGE_SIZE_LENGTH = 4  # u32 length prefix before every mip level


@dataclass(frozen=True, slots=True)
class Header:
    """Fixed 64-byte KTX1 header, little-endian."""

    # 12s identifier, then 13 x u32
    _STRUCT: ClassVar[struct.Struct] = struct.Struct("<12s13I")

    identifier: bytes = KTX1_IDENTIFIER
    endianness: int = LITTLE_ENDIAN
    gl_type: int = 0
    gl_type_size: int = 1
    gl_format: int = 0
    gl_internal_format: int = 0
    gl_base_internal_format: int = 0
    pixel_width: int = 0
    pixel_height: int = 0
    pixel_depth: int = 0
    number_of_array_elements: int = 0
    number_of_faces: int = 1
    number_of_mipmap_levels: int = 1
    bytes_of_key_value_data: int = 0

    @classmethod
    def unpack(cls, reader: DataReader) -> Header:
        return cls(*reader.unpack_from(cls._STRUCT, 0))

    def pack(self) -> bytes:
        return self._STRUCT.pack(
            self.identifier,
            self.endianness,
            self.gl_type,
            self.gl_type_size,
            self.gl_format,
            self.gl_internal_format,
            self.gl_base_internal_format,
            self.pixel_width,
            self.pixel_height,
            self.pixel_depth,
            self.number_of_array_elements,
            self.number_of_faces,
            self.number_of_mipmap_levels,
            self.bytes_of_key_value_data,
        )

    def tag_is_valid(self) -> bool:
        return self.identifier == KTX1_IDENTIFIER

    def format_properties(self) -> TextureFormatProperties:
        return TextureFormatProperties.from_gl(
            self.gl_internal_format, self.gl_format, self.gl_type
        )
