# texloader/formats.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

from texloader.types import TextureRangeDesc, mip_dimension


class TextureFormat(str, Enum):
    INVALID = "invalid"

    R_UNORM8 = "r_unorm8"
    RG_UNORM8 = "rg_unorm8"
    RGBA_UNORM8 = "rgba_unorm8"
    RGBA_SRGB = "rgba_srgb"
    BGRA_UNORM8 = "bgra_unorm8"
    R_F16 = "r_f16"
    RG_F16 = "rg_f16"
    RGBA_F16 = "rgba_f16"
    R_F32 = "r_f32"
    RG_F32 = "rg_f32"
    RGBA_F32 = "rgba_f32"
    B5G6R5_UNORM = "b5g6r5_unorm"
    ABGR_UNORM4 = "abgr_unorm4"

    ETC1_RGB8 = "etc1_rgb8"
    ETC2_RGB8 = "etc2_rgb8"
    ETC2_SRGB8 = "etc2_srgb8"
    ETC2_RGBA8 = "etc2_rgba8"
    ETC2_SRGB8_A8 = "etc2_srgb8_a8"
    BC1_RGB = "bc1_rgb"
    BC1_RGBA = "bc1_rgba"
    BC2_RGBA = "bc2_rgba"
    BC3_RGBA = "bc3_rgba"
    BC7_RGBA = "bc7_rgba"
    ASTC_4X4 = "astc_4x4"
    ASTC_6X6 = "astc_6x6"
    ASTC_8X8 = "astc_8x8"


# --- OpenGL enums used by container headers ---
GL_UNSIGNED_BYTE = 0x1401
GL_FLOAT = 0x1406
GL_HALF_FLOAT = 0x140B
GL_UNSIGNED_SHORT_4_4_4_4 = 0x8033
GL_UNSIGNED_SHORT_5_6_5 = 0x8363

GL_RED = 0x1903
GL_RGB = 0x1907
GL_RGBA = 0x1908
GL_RG = 0x8227
GL_BGRA = 0x80E1

GL_RGBA4 = 0x8056
GL_RGBA8 = 0x8058
GL_R8 = 0x8229
GL_RG8 = 0x822B
GL_R16F = 0x822D
GL_R32F = 0x822E
GL_RG16F = 0x822F
GL_RG32F = 0x8230
GL_RGBA32F = 0x8814
GL_RGBA16F = 0x881A
GL_SRGB8_ALPHA8 = 0x8C43
GL_RGB565 = 0x8D62
GL_BGRA8_EXT = 0x93A1

GL_COMPRESSED_RGB_S3TC_DXT1_EXT = 0x83F0
GL_COMPRESSED_RGBA_S3TC_DXT1_EXT = 0x83F1
GL_COMPRESSED_RGBA_S3TC_DXT3_EXT = 0x83F2
GL_COMPRESSED_RGBA_S3TC_DXT5_EXT = 0x83F3
GL_ETC1_RGB8_OES = 0x8D64
GL_COMPRESSED_RGBA_BPTC_UNORM = 0x8E8C
GL_COMPRESSED_RGB8_ETC2 = 0x9274
GL_COMPRESSED_SRGB8_ETC2 = 0x9275
GL_COMPRESSED_RGBA8_ETC2_EAC = 0x9278
GL_COMPRESSED_SRGB8_ALPHA8_ETC2_EAC = 0x9279
GL_COMPRESSED_RGBA_ASTC_4x4_KHR = 0x93B0
GL_COMPRESSED_RGBA_ASTC_6x6_KHR = 0x93B4
GL_COMPRESSED_RGBA_ASTC_8x8_KHR = 0x93B7


@dataclass(frozen=True, slots=True)
class TextureFormatProperties:
    """
    Storage layout of a pixel format.

    Uncompressed formats are modelled as 1x1x1 blocks, so the same block
    arithmetic sizes every format.
    """

    format: TextureFormat
    bytes_per_block: int = 0
    block_width: int = 1
    block_height: int = 1
    block_depth: int = 1
    components: int = 0
    dtype: Optional[str] = None  # moderngl dtype string, None if not allocatable
    srgb: bool = False
    swizzle: Optional[str] = None
    gl_internal_format: int = 0

    @property
    def is_valid(self) -> bool:
        return self.format != TextureFormat.INVALID

    @property
    def is_compressed(self) -> bool:
        return (self.block_width, self.block_height, self.block_depth) != (1, 1, 1)

    @classmethod
    def from_format(cls, fmt: TextureFormat) -> TextureFormatProperties:
        return _PROPERTIES.get(fmt, _INVALID)

    @classmethod
    def from_gl(
        cls, internal_format: int, gl_format: int = 0, gl_type: int = 0
    ) -> TextureFormatProperties:
        """
        Resolve container GL enums to a format.

        Sized internal formats are authoritative; unsized ones fall back to
        the (format, type) pair.
        """
        fmt = _BY_INTERNAL_FORMAT.get(internal_format)
        if fmt is None:
            fmt = _BY_FORMAT_AND_TYPE.get((gl_format, gl_type), TextureFormat.INVALID)
        return cls.from_format(fmt)

    def get_bytes_per_block_region(self, width: int, height: int, depth: int = 1) -> int:
        blocks_x = -(-width // self.block_width)
        blocks_y = -(-height // self.block_height)
        blocks_z = -(-depth // self.block_depth)
        return blocks_x * blocks_y * blocks_z * self.bytes_per_block

    def get_bytes_per_range(self, desc: TextureRangeDesc) -> int:
        """Bytes needed for every mip, layer and face in the range."""
        total = 0
        for level in range(desc.num_mip_levels):
            total += self.get_bytes_per_block_region(
                mip_dimension(desc.width, level),
                mip_dimension(desc.height, level),
                mip_dimension(desc.depth, level),
            )
        return total * desc.num_layers * desc.num_faces


def _plain(
    fmt: TextureFormat,
    size: int,
    components: int,
    dtype: Optional[str],
    gl_internal_format: int,
    **kwargs,
) -> TextureFormatProperties:
    return TextureFormatProperties(
        format=fmt,
        bytes_per_block=size,
        components=components,
        dtype=dtype,
        gl_internal_format=gl_internal_format,
        **kwargs,
    )


def _block(
    fmt: TextureFormat, size: int, width: int, height: int, gl_internal_format: int
) -> TextureFormatProperties:
    return TextureFormatProperties(
        format=fmt,
        bytes_per_block=size,
        block_width=width,
        block_height=height,
        components=4,
        gl_internal_format=gl_internal_format,
    )


_INVALID = TextureFormatProperties(format=TextureFormat.INVALID)

_F = TextureFormat
_PROPERTIES: Dict[TextureFormat, TextureFormatProperties] = {
    p.format: p
    for p in (
        _plain(_F.R_UNORM8, 1, 1, "f1", GL_R8),
        _plain(_F.RG_UNORM8, 2, 2, "f1", GL_RG8),
        _plain(_F.RGBA_UNORM8, 4, 4, "f1", GL_RGBA8),
        _plain(_F.RGBA_SRGB, 4, 4, "f1", GL_SRGB8_ALPHA8, srgb=True),
        _plain(_F.BGRA_UNORM8, 4, 4, "f1", GL_BGRA8_EXT, swizzle="BGRA"),
        _plain(_F.R_F16, 2, 1, "f2", GL_R16F),
        _plain(_F.RG_F16, 4, 2, "f2", GL_RG16F),
        _plain(_F.RGBA_F16, 8, 4, "f2", GL_RGBA16F),
        _plain(_F.R_F32, 4, 1, "f4", GL_R32F),
        _plain(_F.RG_F32, 8, 2, "f4", GL_RG32F),
        _plain(_F.RGBA_F32, 16, 4, "f4", GL_RGBA32F),
        # Packed 16-bit layouts have no moderngl dtype.
        _plain(_F.B5G6R5_UNORM, 2, 3, None, GL_RGB565),
        _plain(_F.ABGR_UNORM4, 2, 4, None, GL_RGBA4),
        _block(_F.ETC1_RGB8, 8, 4, 4, GL_ETC1_RGB8_OES),
        _block(_F.ETC2_RGB8, 8, 4, 4, GL_COMPRESSED_RGB8_ETC2),
        _block(_F.ETC2_SRGB8, 8, 4, 4, GL_COMPRESSED_SRGB8_ETC2),
        _block(_F.ETC2_RGBA8, 16, 4, 4, GL_COMPRESSED_RGBA8_ETC2_EAC),
        _block(_F.ETC2_SRGB8_A8, 16, 4, 4, GL_COMPRESSED_SRGB8_ALPHA8_ETC2_EAC),
        _block(_F.BC1_RGB, 8, 4, 4, GL_COMPRESSED_RGB_S3TC_DXT1_EXT),
        _block(_F.BC1_RGBA, 8, 4, 4, GL_COMPRESSED_RGBA_S3TC_DXT1_EXT),
        _block(_F.BC2_RGBA, 16, 4, 4, GL_COMPRESSED_RGBA_S3TC_DXT3_EXT),
        _block(_F.BC3_RGBA, 16, 4, 4, GL_COMPRESSED_RGBA_S3TC_DXT5_EXT),
        _block(_F.BC7_RGBA, 16, 4, 4, GL_COMPRESSED_RGBA_BPTC_UNORM),
        _block(_F.ASTC_4X4, 16, 4, 4, GL_COMPRESSED_RGBA_ASTC_4x4_KHR),
        _block(_F.ASTC_6X6, 16, 6, 6, GL_COMPRESSED_RGBA_ASTC_6x6_KHR),
        _block(_F.ASTC_8X8, 16, 8, 8, GL_COMPRESSED_RGBA_ASTC_8x8_KHR),
    )
}

_BY_INTERNAL_FORMAT: Dict[int, TextureFormat] = {
    p.gl_internal_format: fmt for fmt, p in _PROPERTIES.items()
}

_BY_FORMAT_AND_TYPE: Dict[Tuple[int, int], TextureFormat] = {
    (GL_RED, GL_UNSIGNED_BYTE): _F.R_UNORM8,
    (GL_RG, GL_UNSIGNED_BYTE): _F.RG_UNORM8,
    (GL_RGBA, GL_UNSIGNED_BYTE): _F.RGBA_UNORM8,
    (GL_BGRA, GL_UNSIGNED_BYTE): _F.BGRA_UNORM8,
    (GL_RGBA, GL_HALF_FLOAT): _F.RGBA_F16,
    (GL_RGBA, GL_FLOAT): _F.RGBA_F32,
    (GL_RGB, GL_UNSIGNED_SHORT_5_6_5): _F.B5G6R5_UNORM,
    (GL_RGBA, GL_UNSIGNED_SHORT_4_4_4_4): _F.ABGR_UNORM4,
}
