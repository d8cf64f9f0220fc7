# texloader/factory.py
from __future__ import annotations

import logging
from typing import Any, List, Optional, Sequence

from texloader.errors import Result, ResultCode, invalid_operation
from texloader.image.factory import ImageTextureLoaderFactory
from texloader.ktx1.factory import Ktx1TextureLoaderFactory
from texloader.loader import TextureLoader, TextureLoaderFactory
from texloader.reader import DataReader
from texloader.settings import TextureLoaderSettings

logger = logging.getLogger("texloader.factory")


class TextureLoaderRegistry:
    """
    Picks the first factory that accepts a buffer.

    Factories are probed in order through their side-effect free
    `can_create`, so put the strictest formats first.
    """

    def __init__(self, factories: Sequence[TextureLoaderFactory]) -> None:
        self._factories: List[TextureLoaderFactory] = list(factories)

    @classmethod
    def from_settings(
        cls, settings: Optional[TextureLoaderSettings] = None
    ) -> TextureLoaderRegistry:
        settings = settings or TextureLoaderSettings()
        factories: List[TextureLoaderFactory] = []
        if settings.enable_ktx1:
            factories.append(Ktx1TextureLoaderFactory())
        if settings.enable_images:
            factories.append(ImageTextureLoaderFactory(settings))
        return cls(factories)

    @property
    def factories(self) -> List[TextureLoaderFactory]:
        return list(self._factories)

    def find_factory(self, data: Any) -> Optional[TextureLoaderFactory]:
        for factory in self._factories:
            result = factory.can_create(data)
            if result.is_ok:
                return factory
            logger.debug(
                "%s rejected data: %s", type(factory).__name__, result.message
            )
        return None

    def can_create(self, data: Any) -> Result:
        if self.find_factory(data) is None:
            return Result(ResultCode.INVALID_OPERATION, "Unrecognized texture data.")
        return Result.ok()

    def try_create(self, data: Any) -> TextureLoader:
        reader = DataReader(data)
        factory = self.find_factory(reader)
        if factory is None:
            raise invalid_operation("Unrecognized texture data.")
        return factory.try_create(reader)
