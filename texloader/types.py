# texloader/types.py
from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import TYPE_CHECKING

from texloader.errors import Result, ResultCode

if TYPE_CHECKING:
    from texloader.formats import TextureFormat


class TextureType(str, Enum):
    """Texture layouts a loader can describe."""

    TWO_D = "2d"
    TWO_D_ARRAY = "2d_array"
    THREE_D = "3d"
    CUBE = "cube"

    @classmethod
    def from_shape(cls, num_faces: int, depth: int, num_layers: int) -> TextureType:
        # Priority matters: a cube wins over depth, depth wins over layers.
        if num_faces == 6:
            return cls.CUBE
        if depth > 1:
            return cls.THREE_D
        if num_layers > 1:
            return cls.TWO_D_ARRAY
        return cls.TWO_D


def calc_num_mip_levels(width: int, height: int, depth: int = 1) -> int:
    """Length of the full mip chain for the given base dimensions."""
    return max(width, height, depth, 1).bit_length()


def mip_dimension(base: int, level: int) -> int:
    return max(1, base >> level)


def _invalid(message: str) -> Result:
    return Result(ResultCode.INVALID_OPERATION, message)


@dataclass(frozen=True, slots=True)
class TextureRangeDesc:
    """
    A region of a texture: extent at `mip_level`, plus layer/face/mip spans.

    Dimensions describe the first mip in the range; later mips in the range
    halve independently per axis with a floor of 1.
    """

    width: int = 1
    height: int = 1
    depth: int = 1
    num_layers: int = 1
    num_faces: int = 1
    num_mip_levels: int = 1
    mip_level: int = 0
    layer: int = 0
    face: int = 0

    def validate(self) -> Result:
        if min(
            self.width,
            self.height,
            self.depth,
            self.num_layers,
            self.num_faces,
            self.num_mip_levels,
        ) < 1:
            return _invalid(
                "width, height, depth, num_layers, num_faces and "
                "num_mip_levels must be at least 1."
            )
        if min(self.mip_level, self.layer, self.face) < 0:
            return _invalid("mip_level, layer and face must not be negative.")
        if self.num_faces not in (1, 6):
            return _invalid("num_faces must be 1 or 6.")
        if self.face + self.num_faces > 6:
            return _invalid("face + num_faces must be <= 6.")
        if self.num_faces == 6 and self.num_layers > 1:
            return _invalid("Cube texture arrays are not supported.")
        if self.num_layers > 1 and self.depth > 1:
            return _invalid("3D texture arrays are not supported.")
        if self.num_faces == 6 and self.width != self.height:
            return _invalid("Cube texture faces must be square.")
        if self.num_mip_levels > calc_num_mip_levels(
            self.width, self.height, self.depth
        ):
            return _invalid(
                f"num_mip_levels ({self.num_mip_levels}) exceeds the mip chain "
                f"of a {self.width}x{self.height}x{self.depth} texture."
            )
        return Result.ok()

    def at_mip_level(self, mip_level: int) -> TextureRangeDesc:
        """Single-mip range at `mip_level`, which must not precede this range."""
        if mip_level < self.mip_level:
            raise ValueError(
                f"mip_level {mip_level} precedes range start {self.mip_level}"
            )
        delta = mip_level - self.mip_level
        return replace(
            self,
            width=mip_dimension(self.width, delta),
            height=mip_dimension(self.height, delta),
            depth=mip_dimension(self.depth, delta),
            mip_level=mip_level,
            num_mip_levels=1,
        )

    def at_face(self, face: int) -> TextureRangeDesc:
        return replace(self, face=face, num_faces=1)

    def at_layer(self, layer: int) -> TextureRangeDesc:
        return replace(self, layer=layer, num_layers=1)


@dataclass(frozen=True, slots=True)
class TextureDesc:
    """Shape and format of a whole texture."""

    format: TextureFormat
    type: TextureType = TextureType.TWO_D
    width: int = 1
    height: int = 1
    depth: int = 1
    num_layers: int = 1
    num_mip_levels: int = 1

    @property
    def num_faces(self) -> int:
        return 6 if self.type == TextureType.CUBE else 1

    def as_range(self) -> TextureRangeDesc:
        """Range covering every mip, layer and face."""
        return TextureRangeDesc(
            width=self.width,
            height=self.height,
            depth=self.depth,
            num_layers=self.num_layers,
            num_faces=self.num_faces,
            num_mip_levels=self.num_mip_levels,
        )

    def full_range(self, mip_level: int = 0) -> TextureRangeDesc:
        """All layers and faces of a single mip."""
        return self.as_range().at_mip_level(mip_level)
