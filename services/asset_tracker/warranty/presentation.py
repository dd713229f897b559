"""
Warranty badge classification and the registration action.

Views render a badge per asset from its cached status and offer a
registration action where coverage is known to be missing.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from shared.logging import get_logger
from services.asset_tracker.warranty.cache import WarrantyStatusCache
from services.asset_tracker.warranty.client import WarrantyServiceClient
from services.asset_tracker.warranty.models import (
    RegistrationResult,
    WarrantyStatus,
    status_patch_from_registration,
)
from services.asset_tracker.warranty.normalize import as_mapping


logger = get_logger(__name__)

EXPIRING_SOON_DAYS = 30
DEFAULT_FAILURE_MESSAGE = "Failed to register warranty"


class WarrantyBadge(str, Enum):
    """Badge shown next to an asset."""

    LOADING = "loading"
    UNKNOWN = "unknown"
    NOT_REGISTERED = "not_registered"
    EXPIRED = "expired"
    EXPIRING_SOON = "expiring_soon"
    REGISTERED = "registered"


@dataclass(frozen=True)
class BadgeView:
    """Rendered badge state."""

    badge: WarrantyBadge
    label: str
    days_until_expiry: int | None = None

    @property
    def offers_registration(self) -> bool:
        """Registration is offered only when coverage is known to be missing."""
        return self.badge is WarrantyBadge.NOT_REGISTERED


def classify_warranty_status(
    status: WarrantyStatus | None,
    loading: bool = False,
) -> BadgeView:
    """
    Choose the badge for an asset.

    Rules apply in order: an outstanding fetch, a failed check, no coverage,
    expired coverage, coverage ending within 30 days, active coverage.

    Args:
        status: Cached status, None if the asset was never checked
        loading: Whether a fetch for the asset is outstanding

    Returns:
        BadgeView
    """
    if loading:
        return BadgeView(WarrantyBadge.LOADING, "Loading...")
    if status is not None and status.error:
        # A failed check says nothing about coverage
        return BadgeView(WarrantyBadge.UNKNOWN, "Unknown")
    if status is None or not status.is_registered:
        return BadgeView(WarrantyBadge.NOT_REGISTERED, "Not Registered")
    if status.status == "expired":
        return BadgeView(WarrantyBadge.EXPIRED, "Expired")

    days = status.days_until_expiry
    if days is not None and days <= EXPIRING_SOON_DAYS:
        return BadgeView(
            WarrantyBadge.EXPIRING_SOON,
            f"Expiring Soon ({days} days)",
            days_until_expiry=days,
        )
    return BadgeView(WarrantyBadge.REGISTERED, "Registered", days_until_expiry=days)


@dataclass
class RegistrationOutcome:
    """What happened when a user asked to register a warranty."""

    result: RegistrationResult
    accepted: bool
    recovered_duplicate: bool = False
    error_message: str | None = None


async def _call(callback: Callable[..., Any] | None, *args: Any) -> None:
    if callback is None:
        return
    returned = callback(*args)
    if inspect.isawaitable(returned):
        await returned


class RegistrationAction:
    """
    Registration flow of a view.

    On an accepted registration (including the service reporting that the
    asset is already registered) the cache is patched with the returned
    state, ``on_success`` runs, and the cache is refreshed from the service.
    Otherwise ``on_error`` receives a displayable message.
    """

    def __init__(self, client: WarrantyServiceClient, cache: WarrantyStatusCache) -> None:
        self.client = client
        self.cache = cache

    async def submit(
        self,
        asset: Any,
        user: Any,
        warranty_duration_months: int | None = None,
        on_success: Callable[[RegistrationResult], Any] | None = None,
        on_error: Callable[[str], Any] | None = None,
    ) -> RegistrationOutcome:
        """
        Register a warranty and update the view's cache.

        Args:
            asset: Asset row being registered
            user: Acting user
            warranty_duration_months: Coverage length (default 12)
            on_success: Called with the result when registration is accepted
            on_error: Called with a message when it is not

        Returns:
            RegistrationOutcome
        """
        asset_id = as_mapping(asset).get("id")
        result = await self.client.register_warranty(asset, user, warranty_duration_months)

        if not result.is_accepted:
            message = result.message or result.error or DEFAULT_FAILURE_MESSAGE
            logger.info("warranty_registration_rejected", asset_id=asset_id, message=message)
            await _call(on_error, message)
            return RegistrationOutcome(result=result, accepted=False, error_message=message)

        if result.is_duplicate_registration:
            logger.info(
                "warranty_already_registered",
                asset_id=asset_id,
                warranty_id=result.warranty_id,
            )

        await self.cache.patch(asset_id, status_patch_from_registration(result))
        await _call(on_success, result)
        await self.cache.refresh(self.cache.asset_keys())

        return RegistrationOutcome(
            result=result,
            accepted=True,
            recovered_duplicate=result.is_duplicate_registration,
        )
