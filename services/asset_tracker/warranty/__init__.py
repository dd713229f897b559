"""Remote warranty service integration."""

from services.asset_tracker.warranty.cache import WarrantyStatusCache
from services.asset_tracker.warranty.client import (
    WarrantyServiceClient,
    build_registration_request,
)
from services.asset_tracker.warranty.models import (
    RegistrationResult,
    WarrantyRegistrationRequest,
    WarrantyStatus,
    asset_key,
)
from services.asset_tracker.warranty.presentation import (
    BadgeView,
    RegistrationAction,
    RegistrationOutcome,
    WarrantyBadge,
    classify_warranty_status,
)

__all__ = [
    "WarrantyStatusCache",
    "WarrantyServiceClient",
    "build_registration_request",
    "RegistrationResult",
    "WarrantyRegistrationRequest",
    "WarrantyStatus",
    "asset_key",
    "BadgeView",
    "RegistrationAction",
    "RegistrationOutcome",
    "WarrantyBadge",
    "classify_warranty_status",
]
