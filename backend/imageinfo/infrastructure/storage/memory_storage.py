"""Process-local key-value storage."""

from typing import Dict, Optional

from ...domain.image_info.repository_interfaces import KeyValueStorage


class InMemoryKeyValueStorage(KeyValueStorage):
    """Dict-backed storage, shared by every cache built on the same instance."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._items: Dict[str, str] = dict(initial or {})

    async def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    async def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def __len__(self) -> int:
        return len(self._items)
