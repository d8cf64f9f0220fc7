# texloader/gpu/texture.py
from __future__ import annotations

import logging
from dataclasses import replace
from typing import TYPE_CHECKING, Any, Protocol, Union

import moderngl

from texloader.errors import Result, ResultCode
from texloader.formats import TextureFormatProperties
from texloader.types import TextureDesc, TextureRangeDesc, TextureType

if TYPE_CHECKING:
    from texloader.loader import TextureLoader

logger = logging.getLogger("texloader.gpu")

MglTexture = Union[
    moderngl.Texture, moderngl.TextureArray, moderngl.Texture3D, moderngl.TextureCube
]


class Texture(Protocol):
    """Upload target a loader writes mip levels into."""

    @property
    def descriptor(self) -> TextureDesc: ...

    def get_full_range(self, mip_level: int = 0) -> TextureRangeDesc: ...

    def upload(self, range_desc: TextureRangeDesc, data: Any) -> Result: ...


class ModernGLTexture:
    """
    Wrapper around a moderngl texture object.

    Only `moderngl.Texture` can address mip levels on write, so the other
    kinds are allocated with a single level.
    """

    def __init__(self, handle: MglTexture, desc: TextureDesc) -> None:
        self.handle = handle
        self._desc = desc
        self._properties = TextureFormatProperties.from_format(desc.format)

    @classmethod
    def from_loader(
        cls, ctx: moderngl.Context, loader: TextureLoader
    ) -> ModernGLTexture:
        """Allocate a texture shaped like `loader` and upload its data."""
        texture = allocate_texture(ctx, loader.descriptor)
        loader.upload(texture)

        if loader.should_generate_mipmaps() and isinstance(
            texture.handle, moderngl.Texture
        ):
            texture.handle.filter = (moderngl.LINEAR_MIPMAP_LINEAR, moderngl.LINEAR)
            texture.handle.build_mipmaps()
        return texture

    @property
    def descriptor(self) -> TextureDesc:
        return self._desc

    def get_full_range(self, mip_level: int = 0) -> TextureRangeDesc:
        return self._desc.full_range(mip_level)

    def upload(self, range_desc: TextureRangeDesc, data: Any) -> Result:
        if range_desc.mip_level >= self._desc.num_mip_levels:
            return Result(
                ResultCode.ARGUMENT_OUT_OF_RANGE,
                f"Mip level {range_desc.mip_level} not allocated "
                f"({self._desc.num_mip_levels} available).",
            )

        view = memoryview(data).cast("B")
        expected = self._properties.get_bytes_per_range(range_desc)
        if view.nbytes < expected:
            return Result(
                ResultCode.ARGUMENT_OUT_OF_RANGE,
                f"Upload needs {expected} bytes, got {view.nbytes}.",
            )

        if isinstance(self.handle, moderngl.TextureCube):
            face_bytes = expected // range_desc.num_faces
            for i in range(range_desc.num_faces):
                self.handle.write(
                    range_desc.face + i, view[i * face_bytes : (i + 1) * face_bytes]
                )
        elif isinstance(self.handle, moderngl.Texture):
            self.handle.write(view[:expected], level=range_desc.mip_level)
        else:
            self.handle.write(view[:expected])

        return Result.ok()

    def use(self, location: int = 0) -> None:
        self.handle.use(location)

    def release(self) -> None:
        self.handle.release()


def allocate_texture(ctx: moderngl.Context, desc: TextureDesc) -> ModernGLTexture:
    """
    Allocate a texture according to a TextureDesc.

    Raises:
        ValueError: If the descriptor is invalid or the format has no
            moderngl representation.
    """
    if min(desc.width, desc.height, desc.depth, desc.num_layers) <= 0:
        raise ValueError("Texture dimensions must be positive")

    props = TextureFormatProperties.from_format(desc.format)
    if props.dtype is None:
        raise ValueError(f"Format '{desc.format.value}' cannot be allocated by moderngl")

    internal_format = props.gl_internal_format if props.srgb else None
    if props.srgb and desc.type in (TextureType.TWO_D_ARRAY, TextureType.THREE_D):
        # texture_array and texture3d take no internal format.
        logger.debug(
            "%s texture allocated without sRGB internal format for %s",
            desc.type.value,
            desc.format.value,
        )

    num_mip_levels = 1

    if desc.type == TextureType.CUBE:
        if desc.width != desc.height:
            raise ValueError("Cubemap textures must be square")
        tex = ctx.texture_cube(
            size=(desc.width, desc.height),
            components=props.components,
            dtype=props.dtype,
            internal_format=internal_format,
        )
    elif desc.type == TextureType.THREE_D:
        tex = ctx.texture3d(
            size=(desc.width, desc.height, desc.depth),
            components=props.components,
            dtype=props.dtype,
        )
    elif desc.type == TextureType.TWO_D_ARRAY:
        tex = ctx.texture_array(
            size=(desc.width, desc.height, desc.num_layers),
            components=props.components,
            dtype=props.dtype,
        )
    else:
        tex = ctx.texture(
            size=(desc.width, desc.height),
            components=props.components,
            dtype=props.dtype,
            internal_format=internal_format,
        )
        num_mip_levels = desc.num_mip_levels
        if num_mip_levels > 1:
            # Allocates storage for every level; contents are overwritten on upload.
            tex.build_mipmaps(0, num_mip_levels - 1)
            tex.filter = (moderngl.LINEAR_MIPMAP_LINEAR, moderngl.LINEAR)

    if props.swizzle:
        tex.swizzle = props.swizzle

    if num_mip_levels < desc.num_mip_levels:
        logger.debug(
            "%s texture allocated with 1 of %d mip levels",
            desc.type.value,
            desc.num_mip_levels,
        )

    return ModernGLTexture(tex, replace(desc, num_mip_levels=num_mip_levels))
