from texloader.errors import Result, ResultCode, TextureLoaderError
from texloader.factory import TextureLoaderRegistry
from texloader.formats import TextureFormat, TextureFormatProperties
from texloader.image import ImageTextureLoader, ImageTextureLoaderFactory
from texloader.ktx1 import Ktx1TextureLoader, Ktx1TextureLoaderFactory
from texloader.loader import MipLevelData, TextureLoader, TextureLoaderFactory
from texloader.reader import DataReader
from texloader.settings import TextureLoaderSettings
from texloader.types import TextureDesc, TextureRangeDesc, TextureType

__all__ = [
    "DataReader",
    "ImageTextureLoader",
    "ImageTextureLoaderFactory",
    "Ktx1TextureLoader",
    "Ktx1TextureLoaderFactory",
    "MipLevelData",
    "Result",
    "ResultCode",
    "TextureDesc",
    "TextureFormat",
    "TextureFormatProperties",
    "TextureLoader",
    "TextureLoaderError",
    "TextureLoaderFactory",
    "TextureLoaderRegistry",
    "TextureLoaderSettings",
    "TextureRangeDesc",
    "TextureType",
]
