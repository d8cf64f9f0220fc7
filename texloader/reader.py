# texloader/reader.py
from __future__ import annotations

import struct
from typing import Any, Tuple

from texloader.errors import ResultCode, TextureLoaderError, out_of_range


class DataReader:
    """
    Bounds-checked, read-only access to a borrowed byte buffer.

    The reader never copies the source. Views handed out by `at` keep the
    underlying object alive for as long as they are referenced.
    """

    _U32 = struct.Struct("<I")

    def __init__(self, data: Any) -> None:
        if data is None:
            raise TextureLoaderError(
                ResultCode.ARGUMENT_INVALID, "Reader's data is None."
            )
        try:
            view = memoryview(data)
        except TypeError as e:
            raise TextureLoaderError(
                ResultCode.ARGUMENT_INVALID, "Data does not expose a byte buffer."
            ) from e
        if view.format != "B" or view.ndim != 1:
            view = view.cast("B")
        self._view = view.toreadonly()

    @property
    def data(self) -> memoryview:
        return self._view

    @property
    def length(self) -> int:
        return self._view.nbytes

    def __len__(self) -> int:
        return self._view.nbytes

    def _check(self, offset: int, size: int, label: str) -> None:
        if offset < 0 or size < 0 or offset + size > self.length:
            raise out_of_range(
                f"Out of range read for {label}: {offset}+{size}>{self.length}"
            )

    def at(self, offset: int, length: int) -> memoryview:
        """Zero-copy view of `length` bytes starting at `offset`."""
        self._check(offset, length, "view")
        return self._view[offset : offset + length]

    def read_u32_at(self, offset: int) -> int:
        self._check(offset, self._U32.size, "u32")
        return self._U32.unpack_from(self._view, offset)[0]

    def unpack_from(self, layout: struct.Struct, offset: int = 0) -> Tuple[Any, ...]:
        self._check(offset, layout.size, "struct")
        return layout.unpack_from(self._view, offset)
