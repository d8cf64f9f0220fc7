# texloader/settings.py
from dataclasses import dataclass


@dataclass(slots=True)
class TextureLoaderSettings:
    """
    Which container formats a registry accepts and how decoded images are laid out.
    """

    enable_ktx1: bool = True
    enable_images: bool = True

    # PNG/JPEG rows are stored top-down; OpenGL samples bottom-up.
    flip_images_vertically: bool = False
