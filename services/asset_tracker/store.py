"""
In-memory asset tracker store.

Development stand-in for the relational backend: profiles, categories,
departments and assets. Asset rows are returned joined the way the
warranty integration consumes them, with ``categories``, ``departments``
and ``profiles`` relations carrying the related names.
"""

from __future__ import annotations

import itertools
import math
from datetime import UTC, date, datetime
from enum import Enum
from typing import Any
from uuid import uuid4

from shared.logging import get_logger
from services.asset_tracker.warranty.normalize import parse_cost


logger = get_logger(__name__)


class Role(str, Enum):
    """Profile roles."""

    ADMIN = "admin"
    USER = "user"


class StoreError(Exception):
    """Base class for store errors."""


class RecordNotFoundError(StoreError):
    """Referenced record does not exist."""


class ConflictError(StoreError):
    """Write would violate a uniqueness or reference constraint."""


class AssetTrackerStore:
    """
    Tables kept in process memory.

    Not safe across processes; every method completes without awaiting, so
    it is consistent within one event loop.
    """

    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        """Drop every record."""
        self._profiles: dict[str, dict[str, Any]] = {}
        self._categories: dict[int, dict[str, Any]] = {}
        self._departments: dict[int, dict[str, Any]] = {}
        self._assets: dict[int, dict[str, Any]] = {}
        self._ids = {
            "categories": itertools.count(1),
            "departments": itertools.count(1),
            "assets": itertools.count(1),
        }

    # ------------------------------------------------------------------
    # Profiles
    # ------------------------------------------------------------------

    def create_profile(
        self,
        email: str,
        full_name: str,
        password_hash: str | None = None,
        role: Role = Role.USER,
        department_id: int | None = None,
        profile_id: str | None = None,
    ) -> dict[str, Any]:
        """Create a profile; e-mail addresses are unique, case-insensitively."""
        if email and self.get_profile_by_email(email) is not None:
            raise ConflictError(f"A user with email {email} already exists")
        if department_id is not None and department_id not in self._departments:
            raise RecordNotFoundError(f"Department {department_id} not found")

        profile = {
            "id": profile_id or str(uuid4()),
            "email": email,
            "full_name": full_name,
            "role": Role(role).value,
            "department_id": department_id,
            "password_hash": password_hash,
            "created_at": datetime.now(UTC),
        }
        self._profiles[profile["id"]] = profile
        logger.info("profile_created", user_id=profile["id"], role=profile["role"])
        return dict(profile)

    def get_profile(self, profile_id: str) -> dict[str, Any] | None:
        profile = self._profiles.get(profile_id)
        return dict(profile) if profile else None

    def get_profile_by_email(self, email: str) -> dict[str, Any] | None:
        wanted = email.strip().lower()
        for profile in self._profiles.values():
            if (profile["email"] or "").lower() == wanted:
                return dict(profile)
        return None

    def ensure_profile(self, profile_id: str, email: str | None = None) -> dict[str, Any]:
        """
        Get a profile, creating a ``user`` profile when none exists.

        The full name of a provisioned profile is the e-mail local part, or
        ``"User"`` without an e-mail.
        """
        profile = self.get_profile(profile_id)
        if profile is not None:
            return profile

        full_name = email.split("@")[0] if email else "User"
        logger.info("profile_provisioned", user_id=profile_id)
        return self.create_profile(
            email=email or "",
            full_name=full_name or "User",
            profile_id=profile_id,
        )

    def list_profiles(self) -> list[dict[str, Any]]:
        """Profiles joined with their department name."""
        rows = []
        for profile in self._profiles.values():
            row = dict(profile)
            department = self._departments.get(profile["department_id"])
            row["departments"] = {"name": department["name"]} if department else None
            rows.append(row)
        return sorted(rows, key=lambda r: r["created_at"])

    def update_role(self, profile_id: str, role: Role) -> dict[str, Any]:
        profile = self._profiles.get(profile_id)
        if profile is None:
            raise RecordNotFoundError(f"User {profile_id} not found")
        profile["role"] = Role(role).value
        logger.info("profile_role_updated", user_id=profile_id, role=profile["role"])
        return dict(profile)

    def update_password_hash(self, profile_id: str, password_hash: str) -> None:
        if profile_id in self._profiles:
            self._profiles[profile_id]["password_hash"] = password_hash

    # ------------------------------------------------------------------
    # Categories and departments
    # ------------------------------------------------------------------

    def _create_named(self, table: str, records: dict[int, dict[str, Any]], name: str) -> dict[str, Any]:
        name = name.strip()
        if any(r["name"].lower() == name.lower() for r in records.values()):
            raise ConflictError(f"{table[:-1].capitalize()} '{name}' already exists")

        record = {
            "id": next(self._ids[table]),
            "name": name,
            "created_at": datetime.now(UTC),
        }
        records[record["id"]] = record
        logger.info(f"{table}_created", record_id=record["id"], name=name)
        return dict(record)

    def _delete_named(self, table: str, records: dict[int, dict[str, Any]], record_id: int, ref_field: str) -> None:
        if record_id not in records:
            raise RecordNotFoundError(f"{table[:-1].capitalize()} {record_id} not found")

        holders = [*self._assets.values(), *self._profiles.values()]
        if any(h.get(ref_field) == record_id for h in holders):
            raise ConflictError(f"{table[:-1].capitalize()} {record_id} is still in use")

        del records[record_id]
        logger.info(f"{table}_deleted", record_id=record_id)

    def create_category(self, name: str) -> dict[str, Any]:
        return self._create_named("categories", self._categories, name)

    def list_categories(self) -> list[dict[str, Any]]:
        return sorted((dict(c) for c in self._categories.values()), key=lambda c: c["name"].lower())

    def delete_category(self, category_id: int) -> None:
        self._delete_named("categories", self._categories, category_id, "category_id")

    def create_department(self, name: str) -> dict[str, Any]:
        return self._create_named("departments", self._departments, name)

    def list_departments(self) -> list[dict[str, Any]]:
        return sorted((dict(d) for d in self._departments.values()), key=lambda d: d["name"].lower())

    def delete_department(self, department_id: int) -> None:
        self._delete_named("departments", self._departments, department_id, "department_id")

    # ------------------------------------------------------------------
    # Assets
    # ------------------------------------------------------------------

    def create_asset(
        self,
        name: str,
        cost: float,
        created_by: str,
        category_id: int | None = None,
        department_id: int | None = None,
        date_purchased: date | None = None,
        serial_number: str | None = None,
        manufacturer: str | None = None,
        model_number: str | None = None,
    ) -> dict[str, Any]:
        """Create an asset and return it joined."""
        if category_id is not None and category_id not in self._categories:
            raise RecordNotFoundError(f"Category {category_id} not found")
        if department_id is not None and department_id not in self._departments:
            raise RecordNotFoundError(f"Department {department_id} not found")

        asset = {
            "id": next(self._ids["assets"]),
            "name": name,
            "category_id": category_id,
            "department_id": department_id,
            "cost": cost,
            "date_purchased": date_purchased,
            "created_by": created_by,
            "created_at": datetime.now(UTC),
            "serial_number": serial_number,
            "manufacturer": manufacturer,
            "model_number": model_number,
        }
        self._assets[asset["id"]] = asset
        logger.info("asset_created", asset_id=asset["id"], created_by=created_by)
        return self._join(asset)

    def get_asset(self, asset_id: int) -> dict[str, Any] | None:
        asset = self._assets.get(asset_id)
        return self._join(asset) if asset else None

    def list_assets(self, created_by: str | None = None) -> list[dict[str, Any]]:
        """Joined assets, newest first, optionally limited to one creator."""
        assets = self._assets.values()
        if created_by is not None:
            assets = [a for a in assets if a["created_by"] == created_by]
        rows = [self._join(a) for a in assets]
        return sorted(rows, key=lambda r: (r["created_at"], r["id"]), reverse=True)

    def delete_asset(self, asset_id: int) -> None:
        if asset_id not in self._assets:
            raise RecordNotFoundError(f"Asset {asset_id} not found")
        del self._assets[asset_id]
        logger.info("asset_deleted", asset_id=asset_id)

    def _join(self, asset: dict[str, Any]) -> dict[str, Any]:
        row = dict(asset)
        category = self._categories.get(asset["category_id"])
        department = self._departments.get(asset["department_id"])
        profile = self._profiles.get(asset["created_by"])
        row["categories"] = {"name": category["name"]} if category else None
        row["departments"] = {"name": department["name"]} if department else None
        row["profiles"] = {"full_name": profile["full_name"]} if profile else None
        return row

    # ------------------------------------------------------------------
    # Counts
    # ------------------------------------------------------------------

    def counts(self) -> dict[str, int]:
        return {
            "users": len(self._profiles),
            "assets": len(self._assets),
            "categories": len(self._categories),
            "departments": len(self._departments),
        }


def _related_name(row: dict[str, Any], relation: str) -> str:
    related = row.get(relation)
    return related["name"] if related else ""


def filter_assets(
    rows: list[dict[str, Any]],
    search: str | None = None,
    category_id: int | None = None,
    department_id: int | None = None,
) -> list[dict[str, Any]]:
    """
    Filter joined asset rows.

    ``search`` matches case-insensitively on the asset, category or
    department name.
    """
    if search:
        needle = search.lower()
        rows = [
            r for r in rows
            if needle in r["name"].lower()
            or needle in _related_name(r, "categories").lower()
            or needle in _related_name(r, "departments").lower()
        ]
    if category_id is not None:
        rows = [r for r in rows if r["category_id"] == category_id]
    if department_id is not None:
        rows = [r for r in rows if r["department_id"] == department_id]
    return rows


def total_value(rows: list[dict[str, Any]]) -> float:
    """Sum of asset costs; unparseable costs count as zero."""
    total = 0.0
    for row in rows:
        cost = parse_cost(row.get("cost"))
        total += cost if math.isfinite(cost) else 0.0
    return total


store = AssetTrackerStore()


def get_store() -> AssetTrackerStore:
    """Dependency returning the process-wide store."""
    return store
