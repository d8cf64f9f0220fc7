from texloader.gpu.texture import ModernGLTexture, Texture, allocate_texture

__all__ = ["Texture", "ModernGLTexture", "allocate_texture"]
