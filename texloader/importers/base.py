# texloader/importers/base.py
from abc import ABC, abstractmethod
from pathlib import Path

from texloader.loader import TextureLoader


class AssetImporter(ABC):
    @abstractmethod
    def import_file(self, path: Path) -> TextureLoader:
        """
        Read a texture file and return a loader over its bytes.

        The loader keeps the file contents alive; nothing is uploaded yet.
        """
        pass
