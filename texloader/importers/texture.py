# texloader/importers/texture.py
import logging
from pathlib import Path
from typing import Optional

from texloader.factory import TextureLoaderRegistry
from texloader.importers.base import AssetImporter
from texloader.loader import TextureLoader
from texloader.settings import TextureLoaderSettings

logger = logging.getLogger("texloader.importers")


class TextureImporter(AssetImporter):
    def __init__(self, settings: Optional[TextureLoaderSettings] = None) -> None:
        self._registry = TextureLoaderRegistry.from_settings(settings)

    def import_file(self, path: Path) -> TextureLoader:
        # The loader borrows these bytes for its whole lifetime.
        data = Path(path).read_bytes()
        loader = self._registry.try_create(data)
        logger.info(
            "Imported %s: %s %s %dx%d, %d mip(s)",
            path,
            loader.descriptor.type.value,
            loader.descriptor.format.value,
            loader.descriptor.width,
            loader.descriptor.height,
            loader.descriptor.num_mip_levels,
        )
        return loader
