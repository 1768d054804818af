"""
Image Info Cache

Bounded, storage-backed cache of remote image metadata (file size, file type,
pixel dimensions), populated by retrying header-only probes.
"""

__version__ = "0.1.0"
