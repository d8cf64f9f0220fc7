from texloader.importers.base import AssetImporter
from texloader.importers.texture import TextureImporter

__all__ = ["AssetImporter", "TextureImporter"]
