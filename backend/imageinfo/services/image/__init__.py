from .cached_image import CachedImage, create_head_probe_image

__all__ = ["CachedImage", "create_head_probe_image"]
