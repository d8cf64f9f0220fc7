# texloader/errors.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict


class ResultCode(str, Enum):
    OK = "ok"
    ARGUMENT_INVALID = "argument_invalid"
    ARGUMENT_OUT_OF_RANGE = "argument_out_of_range"
    INVALID_OPERATION = "invalid_operation"


@dataclass(frozen=True, slots=True)
class Result:
    """
    Outcome of a check that does not raise.

    Used by the sniffing entry points so that probing many candidate
    buffers never goes through exceptions.
    """

    code: ResultCode = ResultCode.OK
    message: str = ""

    @classmethod
    def ok(cls) -> Result:
        return cls()

    @property
    def is_ok(self) -> bool:
        return self.code == ResultCode.OK

    def raise_if_error(self) -> None:
        if not self.is_ok:
            raise TextureLoaderError(self.code, self.message)


@dataclass(eq=False)
class TextureLoaderError(Exception):
    code: ResultCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"

    @property
    def result(self) -> Result:
        return Result(self.code, self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code.value, "message": self.message}


def invalid_operation(message: str) -> TextureLoaderError:
    return TextureLoaderError(ResultCode.INVALID_OPERATION, message)


def out_of_range(message: str) -> TextureLoaderError:
    return TextureLoaderError(ResultCode.ARGUMENT_OUT_OF_RANGE, message)


__all__ = [
    "ResultCode",
    "Result",
    "TextureLoaderError",
    "invalid_operation",
    "out_of_range",
]
