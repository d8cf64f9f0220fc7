from texloader.ktx1.factory import Ktx1TextureLoader, Ktx1TextureLoaderFactory
from texloader.ktx1.header import HEADER_LENGTH, KTX1_IDENTIFIER, LITTLE_ENDIAN, Header

__all__ = [
    "Header",
    "HEADER_LENGTH",
    "KTX1_IDENTIFIER",
    "LITTLE_ENDIAN",
    "Ktx1TextureLoader",
    "Ktx1TextureLoaderFactory",
]
