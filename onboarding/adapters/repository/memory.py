"""
In-memory repository adapter - Implements AffiliateRepository protocol.

Process-local stand-in for the durable affiliate store, used when the
application runs with ``storage_backend=memory`` and by integration tests.
"""

import threading
import uuid
from datetime import UTC, datetime
from typing import Any

from onboarding.domain.exceptions import RegistrationConflict

from .postgres import SYSTEM_FIELDS, hash_password, split_affiliate_data


class InMemoryAffiliateRepository:
    """
    Implements AffiliateRepository protocol with a dict keyed by id.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, bcrypt_cost: int = 4) -> None:
        self._records: dict[str, dict[str, Any]] = {}
        self._lock = threading.Lock()
        self._bcrypt_cost = bcrypt_cost

    def email_exists(self, email: str) -> bool:
        with self._lock:
            return any(record["email"] == email for record in self._records.values())

    def create(self, data: dict[str, Any]) -> dict[str, Any]:
        columns, profile, password = split_affiliate_data(data)
        password_hash = hash_password(password, self._bcrypt_cost) if password else None
        now = datetime.now(tz=UTC)
        with self._lock:
            if any(r["email"] == columns["email"] for r in self._records.values()):
                raise RegistrationConflict(
                    "Email address is already registered with another affiliate"
                )
            record = {
                "id": str(uuid.uuid4()),
                **columns,
                "active_member": bool(columns["active_member"]),
                "profile": profile,
                "password_hash": password_hash,
                "created_at": now,
                "updated_at": now,
            }
            self._records[record["id"]] = record
            return self._public(record)

    def update(self, affiliate_id: str, fields: dict[str, Any]) -> dict[str, Any]:
        unknown = set(fields) - SYSTEM_FIELDS
        if unknown:
            raise ValueError(f"Cannot update non-system fields: {sorted(unknown)}")
        with self._lock:
            record = self._records.get(affiliate_id)
            if record is None:
                raise LookupError(f"Affiliate not found: {affiliate_id}")
            record.update(fields)
            record["updated_at"] = datetime.now(tz=UTC)
            return self._public(record)

    def get(self, affiliate_id: str) -> dict[str, Any] | None:
        with self._lock:
            record = self._records.get(affiliate_id)
            return self._public(record) if record is not None else None

    def count(self) -> int:
        with self._lock:
            return len(self._records)

    @staticmethod
    def _public(record: dict[str, Any]) -> dict[str, Any]:
        return {key: value for key, value in record.items() if key != "password_hash"}
