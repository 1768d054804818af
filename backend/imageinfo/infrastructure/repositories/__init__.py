from .cache_repository import BoundedImageInfoCache

__all__ = ["BoundedImageInfoCache"]
