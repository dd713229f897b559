"""
Asset Tracker: asset registry with warranty registration.

Users record purchased assets and register warranty coverage for them
with an external warranty service; administrators manage users,
categories and departments and oversee every asset.

Key Features:
- Asset registry with category, department and cost tracking
- Remote warranty registration with duplicate recovery
- Batched, fault-isolated warranty status checks
- Role checks re-derived from the profile store on every request
"""

from services.asset_tracker.warranty import (
    RegistrationResult,
    WarrantyServiceClient,
    WarrantyStatus,
    WarrantyStatusCache,
)

__all__ = [
    "RegistrationResult",
    "WarrantyServiceClient",
    "WarrantyStatus",
    "WarrantyStatusCache",
]
