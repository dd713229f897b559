"""
Warranty Status Cache.

Per-view, in-memory mapping from asset identifier to last known warranty
status. A full refresh replaces the mapping wholesale; between refreshes a
successful registration may patch a single entry optimistically. Patches
are best effort and are always followed by a refresh that corrects drift.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Mapping
from typing import Any

from shared.logging import get_logger
from services.asset_tracker.warranty.client import WarrantyServiceClient
from services.asset_tracker.warranty.models import AssetId, WarrantyStatus, asset_key


logger = get_logger(__name__)


class WarrantyStatusCache:
    """
    State container for one view's warranty statuses.

    Writers (``replace``, ``patch``, ``refresh``) are serialized so that two
    registrations finishing together cannot lose each other's patch.
    """

    def __init__(self, client: WarrantyServiceClient) -> None:
        self._client = client
        self._entries: dict[str, WarrantyStatus] = {}
        self._loading: set[str] = set()
        self._lock = asyncio.Lock()

    @property
    def client(self) -> WarrantyServiceClient:
        return self._client

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, asset_id: object) -> bool:
        return str(asset_id) in self._entries

    def get(self, asset_id: AssetId) -> WarrantyStatus | None:
        """Cached status of an asset, or None if never fetched."""
        return self._entries.get(asset_key(asset_id))

    def is_loading(self, asset_id: AssetId) -> bool:
        """Whether a fetch for this asset is still outstanding."""
        return asset_key(asset_id) in self._loading

    def asset_keys(self) -> list[str]:
        """Keys of every cached entry."""
        return list(self._entries)

    def snapshot(self) -> dict[str, WarrantyStatus]:
        """Shallow copy of the current mapping."""
        return dict(self._entries)

    async def replace(self, mapping: Mapping[Any, WarrantyStatus]) -> None:
        """Replace every entry with ``mapping``."""
        async with self._lock:
            self._entries = {asset_key(k): v for k, v in mapping.items()}
        logger.debug("warranty_cache_replaced", entries=len(mapping))

    async def patch(self, asset_id: AssetId, partial: Mapping[str, Any]) -> WarrantyStatus:
        """
        Optimistically merge ``partial`` into one entry.

        Args:
            asset_id: Asset identifier
            partial: Status fields to overwrite

        Returns:
            The patched status
        """
        key = asset_key(asset_id)
        async with self._lock:
            current = self._entries.get(key) or WarrantyStatus()
            patched = current.merged(dict(partial))
            self._entries[key] = patched
        logger.debug("warranty_cache_patched", asset_id=key, fields=sorted(partial))
        return patched

    async def refresh(self, asset_ids: Iterable[AssetId]) -> dict[str, WarrantyStatus]:
        """
        Fetch fresh statuses for ``asset_ids`` and replace the mapping.

        Args:
            asset_ids: Every asset the view currently shows

        Returns:
            The new mapping
        """
        ids = list(asset_ids)
        keys = {asset_key(asset_id) for asset_id in ids}
        self._loading |= keys
        try:
            fresh = await self._client.batch_check_warranty_status(ids)
            await self.replace(fresh)
        finally:
            self._loading -= keys

        logger.info(
            "warranty_cache_refreshed",
            entries=len(fresh),
            failed=sum(1 for status in fresh.values() if status.error),
        )
        return self.snapshot()
