from dataclasses import replace
from typing import List, Optional, Sequence, Tuple

import pytest

from texloader.errors import Result
from texloader.formats import (
    GL_COMPRESSED_RGBA_S3TC_DXT1_EXT,
    GL_RGBA,
    GL_RGBA8,
    GL_UNSIGNED_BYTE,
    TextureFormat,
    TextureFormatProperties,
)
from texloader.ktx1.header import Header
from texloader.types import TextureDesc, TextureRangeDesc, TextureType


def rgba8_header(**fields) -> Header:
    base = Header(
        gl_type=GL_UNSIGNED_BYTE,
        gl_format=GL_RGBA,
        gl_internal_format=GL_RGBA8,
        gl_base_internal_format=GL_RGBA,
        pixel_width=4,
        pixel_height=4,
    )
    return replace(base, **fields)


def bc1_header(**fields) -> Header:
    base = Header(
        gl_type=0,
        gl_type_size=1,
        gl_format=0,
        gl_internal_format=GL_COMPRESSED_RGBA_S3TC_DXT1_EXT,
        gl_base_internal_format=GL_RGBA,
        pixel_width=8,
        pixel_height=8,
    )
    return replace(base, **fields)


def mip_sizes(header: Header) -> List[int]:
    """Single-face byte size of every mip level the header describes."""
    props = header.format_properties()
    rng = TextureRangeDesc(
        width=max(header.pixel_width, 1),
        height=max(header.pixel_height, 1),
        depth=max(header.pixel_depth, 1),
        num_layers=max(header.number_of_array_elements, 1),
        num_mip_levels=max(header.number_of_mipmap_levels, 1),
    )
    return [
        props.get_bytes_per_range(rng.at_mip_level(level))
        for level in range(rng.num_mip_levels)
    ]


def build_ktx1(
    header: Header,
    key_value_data: bytes = b"",
    image_sizes: Optional[Sequence[int]] = None,
    cube_prefix: str = "face",
) -> bytes:
    """
    Assemble a KTX1 container.

    Each mip payload is filled with its level index so copies can be checked.
    `image_sizes` overrides the length prefixes without changing payloads.
    """
    header = replace(header, bytes_of_key_value_data=len(key_value_data))
    faces = header.number_of_faces if header.number_of_faces in (1, 6) else 1
    out = bytearray(header.pack())
    out += key_value_data
    for level, size in enumerate(mip_sizes(header)):
        prefix = size * faces if cube_prefix == "all" else size
        if image_sizes is not None:
            prefix = image_sizes[level]
        out += prefix.to_bytes(4, "little")
        out += bytes([level + 1]) * (size * faces)
    return bytes(out)


class RecordingTexture:
    """Upload target that remembers every call."""

    def __init__(self, desc: TextureDesc) -> None:
        self._desc = desc
        self.uploads: List[Tuple[TextureRangeDesc, bytes]] = []

    @property
    def descriptor(self) -> TextureDesc:
        return self._desc

    def get_full_range(self, mip_level: int = 0) -> TextureRangeDesc:
        return self._desc.full_range(mip_level)

    def upload(self, range_desc: TextureRangeDesc, data) -> Result:
        self.uploads.append((range_desc, bytes(data)))
        return Result.ok()


@pytest.fixture
def rgba8_4x4() -> bytes:
    return build_ktx1(rgba8_header())


@pytest.fixture
def rgba8_props() -> TextureFormatProperties:
    return TextureFormatProperties.from_format(TextureFormat.RGBA_UNORM8)


@pytest.fixture
def recording_texture():
    def make(num_mip_levels: int = 1, **fields) -> RecordingTexture:
        desc = TextureDesc(
            format=fields.pop("format", TextureFormat.RGBA_UNORM8),
            type=fields.pop("type", TextureType.TWO_D),
            width=fields.pop("width", 4),
            height=fields.pop("height", 4),
            num_mip_levels=num_mip_levels,
            **fields,
        )
        return RecordingTexture(desc)

    return make
