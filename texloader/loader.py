# texloader/loader.py
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional

import numpy as np

from texloader.errors import (
    Result,
    ResultCode,
    TextureLoaderError,
    invalid_operation,
    out_of_range,
)
from texloader.formats import TextureFormatProperties
from texloader.reader import DataReader
from texloader.types import TextureDesc

if TYPE_CHECKING:
    from texloader.gpu.texture import Texture


@dataclass(frozen=True, slots=True)
class MipLevelData:
    """
    Pixel payload of one mip level, borrowed from the source buffer.

    For cube textures the view covers all six faces, face-major.
    """

    offset: int
    data: memoryview

    @property
    def length(self) -> int:
        return self.data.nbytes

    def as_array(self) -> np.ndarray:
        """Read-only uint8 view; no copy."""
        return np.frombuffer(self.data, dtype=np.uint8)


class TextureLoader(ABC):
    """
    A decoded texture ready for upload or copy-out.

    Holding a loader keeps the source buffer alive through its reader.
    """

    def __init__(self, reader: DataReader, descriptor: TextureDesc) -> None:
        self._reader = reader
        self._descriptor = descriptor

    @property
    def descriptor(self) -> TextureDesc:
        return self._descriptor

    @property
    def format_properties(self) -> TextureFormatProperties:
        return TextureFormatProperties.from_format(self._descriptor.format)

    @property
    def memory_size_in_bytes(self) -> int:
        return self.format_properties.get_bytes_per_range(self._descriptor.as_range())

    def can_upload_source_data(self) -> bool:
        return False

    def should_generate_mipmaps(self) -> bool:
        return False

    def upload(self, texture: Texture) -> None:
        if not self.can_upload_source_data():
            raise invalid_operation("Loader cannot upload source data directly.")
        self._upload(texture)

    def load_to_external_memory(self, destination: Any, length: Optional[int] = None) -> None:
        """
        Copy every mip level, in order, into `destination`.

        Args:
            destination: Writable buffer (bytearray, numpy array, memoryview).
            length: Usable byte count of `destination`; defaults to its size.

        Raises:
            TextureLoaderError: If the destination is missing, read-only, or
                too small for the next mip level.
        """
        if destination is None:
            raise TextureLoaderError(
                ResultCode.ARGUMENT_INVALID, "Destination is None."
            )
        view = memoryview(destination)
        if view.readonly:
            raise TextureLoaderError(
                ResultCode.ARGUMENT_INVALID, "Destination is read-only."
            )
        if view.format != "B" or view.ndim != 1:
            view = view.cast("B")
        if length is None:
            length = view.nbytes
        elif length < 0 or length > view.nbytes:
            raise out_of_range(
                f"Declared length {length} does not fit destination of {view.nbytes} bytes."
            )
        self._load_to_external_memory(view, length)

    def load(self) -> np.ndarray:
        """Copy the whole texture into a freshly allocated uint8 array."""
        out = np.empty(self.memory_size_in_bytes, dtype=np.uint8)
        self.load_to_external_memory(out)
        return out

    def _upload(self, texture: Texture) -> None:
        raise invalid_operation(f"{type(self).__name__} does not support upload.")

    @abstractmethod
    def _load_to_external_memory(self, destination: memoryview, length: int) -> None:
        pass


class TextureLoaderFactory(ABC):
    """
    Recognises one container format and builds loaders for it.

    `can_create` is cheap and never raises, so it can sniff arbitrary
    buffers. `try_create` raises on the first violation and never returns a
    partially built loader.
    """

    @property
    @abstractmethod
    def header_length(self) -> int:
        pass

    def can_create(self, data: Any) -> Result:
        if data is None:
            return Result(ResultCode.ARGUMENT_INVALID, "Reader's data is None.")
        try:
            reader = data if isinstance(data, DataReader) else DataReader(data)
        except TextureLoaderError as e:
            return e.result
        if reader.length < self.header_length:
            return Result(ResultCode.ARGUMENT_OUT_OF_RANGE, "Not enough data for header.")
        return self._can_create(reader)

    def try_create(self, data: Any) -> TextureLoader:
        reader = data if isinstance(data, DataReader) else DataReader(data)
        self.can_create(reader).raise_if_error()
        return self._try_create(reader)

    @abstractmethod
    def _can_create(self, reader: DataReader) -> Result:
        pass

    @abstractmethod
    def _try_create(self, reader: DataReader) -> TextureLoader:
        pass
