"""
Image Info Value Objects

Immutable value objects describing what is known about a remote image.
Wire names are camelCase to stay compatible with the persisted cache format.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Dimensions(BaseModel):
    """Pixel dimensions of an image."""

    model_config = ConfigDict(frozen=True)

    width: int = Field(ge=0)
    height: int = Field(ge=0)

    def __str__(self) -> str:
        return f"{self.width}x{self.height}"


class FileInfo(BaseModel):
    """
    File metadata extracted from HTTP response headers.

    Both fields are optional: a server may omit ``Content-Length`` or
    ``Content-Type`` and the probe still succeeds.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    file_type: Optional[str] = Field(default=None, alias="fileType")
    size: Optional[int] = Field(default=None, ge=0)


class ImageInfo(BaseModel):
    """Everything resolved for one image URL."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    url: str
    dimensions: Optional[Dimensions] = None
    file_info: Optional[FileInfo] = Field(default=None, alias="fileInfo")
