from texloader.image.factory import ImageTextureLoader, ImageTextureLoaderFactory

__all__ = ["ImageTextureLoader", "ImageTextureLoaderFactory"]
