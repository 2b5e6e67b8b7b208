"""Onboarding record storage.

Records live for the lifetime of the process. `OnboardingRepository` is the
interface the routes depend on; `InMemoryOnboardingStore` backs it with dicts
guarded by a lock, so a durable backend can replace it without touching the
callers.
"""

import abc
import logging
import threading
from typing import Any, Optional

from onboarding_api.schemas.onboarding import OnboardingRecord, OnboardingStatus, utcnow

logger = logging.getLogger(__name__)


class InvalidStatusTransition(Exception):
    def __init__(self, current: OnboardingStatus, target: OnboardingStatus):
        self.current = current
        self.target = target
        super().__init__(f"cannot move from {current.value} to {target.value}")


def _email_key(email: Optional[str]) -> Optional[str]:
    return email.strip().lower() if email else None


class OnboardingRepository(abc.ABC):
    @abc.abstractmethod
    def set(self, token: str, record: OnboardingRecord) -> None: ...

    @abc.abstractmethod
    def get(self, token: str) -> Optional[OnboardingRecord]: ...

    @abc.abstractmethod
    def update(self, token: str, **fields: Any) -> Optional[OnboardingRecord]: ...

    @abc.abstractmethod
    def find_by_email_or_slug(self, email: Optional[str], slug: Optional[str]) -> Optional[OnboardingRecord]: ...

    @abc.abstractmethod
    def insert_if_absent(self, record: OnboardingRecord) -> tuple[OnboardingRecord, bool]: ...

    @abc.abstractmethod
    def delete(self, token: str) -> None: ...

    @abc.abstractmethod
    def get_all(self) -> list[OnboardingRecord]: ...

    @abc.abstractmethod
    def clear(self) -> int: ...


class InMemoryOnboardingStore(OnboardingRepository):
    def __init__(self):
        self._records: dict[str, OnboardingRecord] = {}
        self._email_index: dict[str, str] = {}
        self._slug_index: dict[str, str] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._records)

    def _index(self, token: str, record: OnboardingRecord) -> None:
        email = _email_key(record.owner_email)
        if email:
            self._email_index[email] = token
        if record.slug:
            self._slug_index[record.slug] = token

    def _unindex(self, record: OnboardingRecord) -> None:
        email = _email_key(record.owner_email)
        if email and self._email_index.get(email) == record.token:
            del self._email_index[email]
        if record.slug and self._slug_index.get(record.slug) == record.token:
            del self._slug_index[record.slug]

    def _find(self, email: Optional[str], slug: Optional[str]) -> Optional[OnboardingRecord]:
        token = self._email_index.get(_email_key(email)) if email else None
        if token is None and slug:
            token = self._slug_index.get(slug)
        return self._records.get(token) if token else None

    def set(self, token: str, record: OnboardingRecord) -> None:
        """Insert or silently overwrite. Uniqueness is the caller's concern."""
        with self._lock:
            previous = self._records.get(token)
            if previous is not None:
                self._unindex(previous)
            self._records[token] = record
            self._index(token, record)

    def get(self, token: str) -> Optional[OnboardingRecord]:
        return self._records.get(token)

    def update(self, token: str, **fields: Any) -> Optional[OnboardingRecord]:
        """Merge `fields` into the record and stamp updated_at.

        Unknown tokens are skipped silently. A status that would move
        backwards raises InvalidStatusTransition.
        """
        with self._lock:
            existing = self._records.get(token)
            if existing is None:
                logger.debug("update skipped, unknown token %s", token)
                return None
            fields.pop("token", None)
            target = fields.get("status")
            if target is not None:
                target = OnboardingStatus(target)
                if not existing.status.can_transition_to(target):
                    raise InvalidStatusTransition(existing.status, target)
                fields["status"] = target
            updated = existing.model_copy(update={**fields, "updated_at": utcnow()})
            self._unindex(existing)
            self._records[token] = updated
            self._index(token, updated)
            return updated

    def find_by_email_or_slug(self, email: Optional[str], slug: Optional[str]) -> Optional[OnboardingRecord]:
        """Email match wins over slug match."""
        return self._find(email, slug)

    def insert_if_absent(self, record: OnboardingRecord) -> tuple[OnboardingRecord, bool]:
        """Atomic duplicate check plus insert.

        Returns (existing, False) when the owner email or slug is taken,
        otherwise (record, True).
        """
        with self._lock:
            existing = self._find(record.owner_email, record.slug)
            if existing is not None:
                return existing, False
            self._records[record.token] = record
            self._index(record.token, record)
            return record, True

    def delete(self, token: str) -> None:
        with self._lock:
            record = self._records.pop(token, None)
            if record is not None:
                self._unindex(record)

    def get_all(self) -> list[OnboardingRecord]:
        return list(self._records.values())

    def clear(self) -> int:
        with self._lock:
            removed = len(self._records)
            self._records.clear()
            self._email_index.clear()
            self._slug_index.clear()
        logger.info("Onboarding store cleared (%d records)", removed)
        return removed
