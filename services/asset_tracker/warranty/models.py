"""
Warranty service wire models.

Field names follow the remote warranty service contract exactly.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError


AssetId = int | str


class WarrantyRegistrationRequest(BaseModel):
    """Flattened registration payload sent to the remote service."""

    id: AssetId
    name: str
    category: str = ""
    department: str = ""
    cost: float
    date_purchased: str | None = None
    created_by: str = ""
    created_at: str | None = None

    # Acting user
    registered_by_id: str
    registered_by_name: str

    warranty_duration_months: int = 12
    serial_number: str | None = None
    manufacturer: str | None = None
    model_number: str | None = None


def _validate_fields(model: type[BaseModel], body: Any) -> Any:
    """
    Validate a response body field by field.

    A field whose value does not fit its type is dropped (left at its
    default) instead of failing the whole body.

    Raises:
        ValueError: If the body is not a JSON object
    """
    if not isinstance(body, Mapping):
        raise ValueError(f"Expected a JSON object, got {type(body).__name__}")

    data = dict(body)
    try:
        return model.model_validate(data)
    except ValidationError as e:
        rejected = {err["loc"][0] for err in e.errors() if err["loc"]}

    return model.model_validate({k: v for k, v in data.items() if k not in rejected})


class RegistrationResult(BaseModel):
    """Registration response body; failures are encoded here, not in the status code."""

    model_config = ConfigDict(extra="ignore")

    success: bool = False
    message: str | None = None
    status: str | None = None
    status_label: str | None = None
    warranty_id: AssetId | None = None
    asset_id: AssetId | None = None
    registered_at: str | None = None
    warranty_start_date: str | None = None
    warranty_end_date: str | None = None
    error: str | None = None

    # Field errors as the service reports them; shape varies by endpoint
    details: Any = None

    @classmethod
    def from_body(cls, body: Any) -> RegistrationResult:
        """Parse a response body, keeping every field that validates."""
        return _validate_fields(cls, body)

    @property
    def is_duplicate_registration(self) -> bool:
        """A rejected registration for an asset that already has coverage."""
        return (
            not self.success
            and self.status == "registered"
            and self.warranty_id is not None
        )

    @property
    def is_accepted(self) -> bool:
        """Successful, or a duplicate that callers treat as success."""
        return self.success or self.is_duplicate_registration


class WarrantyStatus(BaseModel):
    """Last known warranty state of one asset. Held in memory only."""

    model_config = ConfigDict(extra="ignore")

    is_registered: bool = False
    status: str | None = None
    status_label: str | None = None
    warranty_id: AssetId | None = None
    warranty_start_date: str | None = None
    warranty_end_date: str | None = None
    days_until_expiry: int | None = None
    registered_at: str | None = None
    registered_by: str | None = None
    message: str | None = None

    # True when the state is unknown because the check itself failed
    error: bool = False

    @classmethod
    def failed(cls, message: str) -> WarrantyStatus:
        """Status for an asset whose check could not be completed."""
        return cls(is_registered=False, message=message, error=True)

    @classmethod
    def from_body(cls, body: Any) -> WarrantyStatus:
        """Parse a status check body, keeping every field that validates."""
        return _validate_fields(cls, body)

    def merged(self, patch: dict[str, Any]) -> WarrantyStatus:
        """Return a copy with ``patch`` applied over the current fields."""
        data = self.model_dump()
        data.update({k: v for k, v in patch.items() if k in type(self).model_fields})
        return type(self).model_validate(data)


def status_patch_from_registration(result: RegistrationResult) -> dict[str, Any]:
    """Fields of a status record implied by an accepted registration."""
    patch: dict[str, Any] = {"is_registered": True, "error": False}
    for field in (
        "status",
        "status_label",
        "warranty_id",
        "warranty_start_date",
        "warranty_end_date",
        "registered_at",
        "message",
    ):
        value = getattr(result, field)
        if value is not None:
            patch[field] = value
    return patch


def asset_key(asset_id: AssetId) -> str:
    """Mapping key for an asset; ``7`` and ``"7"`` address the same entry."""
    return str(asset_id)
