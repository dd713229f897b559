"""
Remote Warranty Service Client.

Registers asset warranties with the external warranty service and checks
their status, one asset at a time or in throttled batches.

Transport failures never raise out of this client: they are reported as
structured failure results so a caller can render them next to the asset
they concern.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
from datetime import date, datetime
from typing import Any
from urllib.parse import quote

import httpx

from shared.config import settings
from shared.logging import get_logger
from services.asset_tracker.warranty.models import (
    AssetId,
    RegistrationResult,
    WarrantyRegistrationRequest,
    WarrantyStatus,
    asset_key,
)
from services.asset_tracker.warranty.normalize import (
    as_mapping,
    first_present,
    parse_cost,
    resolve_creator_name,
    resolve_related_name,
    resolve_user_display_name,
)


logger = get_logger(__name__)

REGISTRATION_FAILED_MESSAGE = "Failed to register warranty. Please try again."
STATUS_CHECK_FAILED_MESSAGE = "Failed to check warranty status"
NETWORK_ERROR_MESSAGE = "Network error. Please try again."

REGISTER_PATH = "/api/warranty/register/"
CHECK_PATH = "/api/warranty/check/{asset_id}/"


def _isoformat(value: Any) -> str | None:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if value is None:
        return None
    return str(value)


def build_registration_request(
    asset: Any,
    user: Any,
    warranty_duration_months: int | None = None,
    default_duration_months: int = 12,
) -> WarrantyRegistrationRequest:
    """
    Flatten an asset row and the acting user into a registration request.

    Args:
        asset: Asset row; category, department and creator may be joined
            objects, bare strings or absent.
        user: Acting user profile.
        warranty_duration_months: Coverage length; falsy means the default.
        default_duration_months: Coverage length used when none is given.

    Returns:
        WarrantyRegistrationRequest with every name field reduced to a string.
    """
    asset = as_mapping(asset)
    user = as_mapping(user)

    return WarrantyRegistrationRequest(
        id=asset.get("id"),
        name=asset.get("name") or "",
        category=resolve_related_name(asset, "category", "categories"),
        department=resolve_related_name(asset, "department", "departments"),
        cost=parse_cost(asset.get("cost")),
        date_purchased=_isoformat(asset.get("date_purchased")),
        created_by=resolve_creator_name(asset),
        created_at=_isoformat(asset.get("created_at")),
        registered_by_id="" if user.get("id") is None else str(user["id"]),
        registered_by_name=resolve_user_display_name(user),
        warranty_duration_months=warranty_duration_months or default_duration_months,
        serial_number=first_present(asset, "serial_number", "serialNumber"),
        manufacturer=first_present(asset, "manufacturer"),
        model_number=first_present(asset, "model_number", "modelNumber"),
    )


class WarrantyServiceClient:
    """
    Async client for the remote warranty service.

    Usage:
        async with WarrantyServiceClient() as client:
            result = await client.register_warranty(asset, user)
            statuses = await client.batch_check_warranty_status([1, 2, 3])
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout_seconds: float | None = None,
        batch_size: int | None = None,
        default_duration_months: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            base_url: Service base URL (default from settings)
            timeout_seconds: Per-call timeout (default from settings)
            batch_size: Concurrent status checks per chunk (default from settings)
            default_duration_months: Coverage length when none is requested
            transport: Optional httpx transport, used to stub the service
        """
        self.base_url = (base_url or settings.warranty.base_url).rstrip("/")
        self.timeout_seconds = timeout_seconds or settings.warranty.timeout_seconds
        self.batch_size = batch_size or settings.warranty.batch_size
        self.default_duration_months = (
            default_duration_months or settings.warranty.default_duration_months
        )
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout_seconds),
                headers={"Content-Type": "application/json"},
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> WarrantyServiceClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def register_warranty(
        self,
        asset: Any,
        user: Any,
        warranty_duration_months: int | None = None,
    ) -> RegistrationResult:
        """
        Register warranty coverage for an asset.

        The response body is parsed whatever the HTTP status: the service
        reports rejections in the body. The call is made once and never
        retried.

        Args:
            asset: Asset row to register
            user: Acting user profile
            warranty_duration_months: Coverage length (default 12)

        Returns:
            RegistrationResult; ``success`` is False on any failure,
            including network errors, unreadable responses and asset rows
            that cannot be turned into a request.
        """
        try:
            request = build_registration_request(
                asset,
                user,
                warranty_duration_months,
                default_duration_months=self.default_duration_months,
            )
        except (TypeError, ValueError) as e:
            logger.warning("warranty_registration_unbuildable", error=str(e), error_type=type(e).__name__)
            return RegistrationResult(
                success=False,
                error=str(e),
                message=REGISTRATION_FAILED_MESSAGE,
            )

        logger.info(
            "warranty_registration_submitted",
            asset_id=request.id,
            duration_months=request.warranty_duration_months,
            registered_by_id=request.registered_by_id,
        )

        try:
            client = await self._get_client()
            # NaN costs serialize as null, matching what browsers send
            response = await client.post(REGISTER_PATH, content=request.model_dump_json())
            result = RegistrationResult.from_body(response.json())
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(
                "warranty_registration_failed",
                asset_id=request.id,
                error=str(e),
                error_type=type(e).__name__,
            )
            return RegistrationResult(
                success=False,
                error=str(e) or "Network error occurred",
                message=REGISTRATION_FAILED_MESSAGE,
            )

        logger.info(
            "warranty_registration_completed",
            asset_id=request.id,
            http_status=response.status_code,
            success=result.success,
            status=result.status,
            warranty_id=result.warranty_id,
        )
        return result

    async def check_warranty_status(self, asset_id: AssetId) -> WarrantyStatus:
        """
        Check the warranty status of one asset.

        Always inspect ``error`` before trusting ``is_registered=False``: a
        failed check and a confirmed absence of coverage look alike otherwise.

        Args:
            asset_id: Asset identifier

        Returns:
            WarrantyStatus, error-flagged if the check could not be completed
        """
        path = CHECK_PATH.format(asset_id=quote(str(asset_id), safe=""))

        try:
            client = await self._get_client()
            response = await client.get(path)
        except httpx.HTTPError as e:
            logger.warning("warranty_status_check_failed", asset_id=asset_id, error=str(e))
            return WarrantyStatus.failed(NETWORK_ERROR_MESSAGE)

        if not response.is_success:
            logger.warning(
                "warranty_status_check_rejected",
                asset_id=asset_id,
                http_status=response.status_code,
            )
            return WarrantyStatus.failed(STATUS_CHECK_FAILED_MESSAGE)

        try:
            return WarrantyStatus.from_body(response.json())
        except ValueError as e:
            logger.warning("warranty_status_unreadable", asset_id=asset_id, error=str(e))
            return WarrantyStatus.failed(NETWORK_ERROR_MESSAGE)

    async def batch_check_warranty_status(
        self,
        asset_ids: Iterable[AssetId],
    ) -> dict[str, WarrantyStatus]:
        """
        Check warranty status for many assets.

        Identifiers are processed in sequential chunks of ``batch_size``;
        checks within a chunk run concurrently and the next chunk starts only
        once every check in the current one has settled. A failure affects
        only its own identifier.

        Args:
            asset_ids: Asset identifiers; duplicates collapse to one entry

        Returns:
            Mapping of ``asset_key(asset_id)`` to status
        """
        ids = list(asset_ids)
        results: dict[str, WarrantyStatus] = {}

        for start in range(0, len(ids), self.batch_size):
            chunk = ids[start : start + self.batch_size]
            statuses = await asyncio.gather(
                *(self.check_warranty_status(asset_id) for asset_id in chunk),
                return_exceptions=True,
            )

            for asset_id, status in zip(chunk, statuses):
                if isinstance(status, BaseException):
                    logger.warning(
                        "warranty_status_check_crashed",
                        asset_id=asset_id,
                        error=str(status),
                        error_type=type(status).__name__,
                    )
                    status = WarrantyStatus(is_registered=False, error=True)
                results[asset_key(asset_id)] = status

            logger.debug(
                "warranty_status_chunk_settled",
                checked=min(start + self.batch_size, len(ids)),
                total=len(ids),
            )

        return results
