"""
Image Info Cache Entities

Cache entry entity and the codec for the persisted cache store.
"""

from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from .value_objects import Dimensions, FileInfo


class CacheEntry(BaseModel):
    """
    Cached metadata for one image URL.

    ``added_datetime`` is the epoch millisecond timestamp of the most recent
    write to the entry, not of its first insertion.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    dimensions: Optional[Dimensions] = None
    file_info: Optional[FileInfo] = Field(default=None, alias="fileInfo")
    added_datetime: int = Field(alias="addedDatetime")

    def merged(
        self,
        *,
        dimensions: Optional[Dimensions] = None,
        file_info: Optional[FileInfo] = None,
        added_datetime: int,
    ) -> "CacheEntry":
        """Return a copy with the given fields replaced; ``None`` keeps the old value."""
        return CacheEntry(
            dimensions=dimensions if dimensions is not None else self.dimensions,
            file_info=file_info if file_info is not None else self.file_info,
            added_datetime=added_datetime,
        )


CacheStore = Dict[str, CacheEntry]

_cache_store_adapter: TypeAdapter[CacheStore] = TypeAdapter(CacheStore)


def parse_cache_store(raw: Optional[str]) -> Optional[CacheStore]:
    """
    Decode a persisted cache store.

    Missing data decodes to an empty store. Returns ``None`` when the data is
    not valid JSON or does not match the cache store schema.
    """
    if raw is None:
        return {}

    try:
        return _cache_store_adapter.validate_json(raw)
    except ValidationError:
        return None


def serialize_cache_store(store: CacheStore) -> str:
    """Encode a cache store to its persisted JSON form."""
    return _cache_store_adapter.dump_json(
        store, by_alias=True, exclude_none=True
    ).decode("utf-8")
