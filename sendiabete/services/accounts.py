"""
Account ledger.

Holds every practitioner/admin account in memory, initialised from the
persisted snapshot at startup. Each mutation is written through the store
before the in-memory record is replaced, so a failed write leaves the ledger
unchanged.

Serialization point: one re-entrant lock per account. The upload workflow
holds it only while reserving a photo (quota check) and while committing the
reading (quota consumption); never during image analysis. Both run in the
threadpool, so the lock separates worker threads, not coroutines; nothing
should call these methods from the event loop thread. A registry lock guards
account insertion, lock creation and the snapshots read by authenticate and
list_all.
"""

import threading
from contextlib import contextmanager
from dataclasses import dataclass, replace
from datetime import date, timedelta
from enum import Enum
from typing import Callable, Iterable, Iterator

from sendiabete.core.errors import (
    AccountMissing,
    AuthFailure,
    DuplicateId,
    InvalidPlan,
    LicenseInactive,
    NotFound,
    QuotaExhausted,
)
from sendiabete.core.logging_config import get_logger
from sendiabete.core.security import dummy_verify, generate_secret, hash_password, verify_password
from sendiabete.services.catalog import LicenseCatalog

logger = get_logger(__name__)


class Role(str, Enum):
    PRACTITIONER = "practitioner"
    ADMIN = "admin"


class AccountStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


@dataclass(frozen=True)
class Account:
    account_id: str
    display_name: str
    email: str
    phone: str | None
    secret_hash: str
    plan_id: str | None
    photos_allowed: int
    photos_used: int
    activated_on: date
    expires_on: date | None
    status: AccountStatus = AccountStatus.ACTIVE
    role: Role = Role.PRACTITIONER

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def is_active(self) -> bool:
        return self.status == AccountStatus.ACTIVE

    @property
    def photos_remaining(self) -> int:
        return max(self.photos_allowed - self.photos_used, 0)

    @property
    def percent_used(self) -> int:
        if self.photos_allowed <= 0:
            return 0
        return round(self.photos_used / self.photos_allowed * 100)

    def is_expired(self, today: date) -> bool:
        return self.expires_on is not None and today > self.expires_on


class AccountLedger:
    def __init__(
        self,
        catalog: LicenseCatalog,
        store=None,
        accounts: Iterable[Account] = (),
        today: Callable[[], date] = date.today,
    ):
        self._catalog = catalog
        self._store = store
        self._today = today
        self._accounts: dict[str, Account] = {a.account_id: a for a in accounts}
        self._reserved: dict[str, int] = {}
        self._locks: dict[str, threading.RLock] = {}
        self._registry_lock = threading.Lock()

    # ---------------------------
    # locking
    # ---------------------------

    def _lock_for(self, account_id: str) -> threading.RLock:
        with self._registry_lock:
            lock = self._locks.get(account_id)
            if lock is None:
                lock = self._locks[account_id] = threading.RLock()
            return lock

    def _snapshot(self) -> list[Account]:
        # create() inserts from other threads
        with self._registry_lock:
            return list(self._accounts.values())

    @contextmanager
    def locked(self, account_id: str) -> Iterator[None]:
        with self._lock_for(account_id):
            yield

    # ---------------------------
    # operations
    # ---------------------------

    def create(
        self,
        account_id: str,
        display_name: str,
        email: str,
        phone: str | None,
        plan_id: str | None,
        role: Role = Role.PRACTITIONER,
    ) -> tuple[Account, str]:
        """
        Create an account and return it with its plaintext secret.

        The secret is returned exactly once; only its bcrypt hash is kept.
        Practitioners need a catalog plan, admins may have none.
        """
        if account_id in self._accounts:
            raise DuplicateId()

        plan = None
        if plan_id is not None or role == Role.PRACTITIONER:
            if plan_id is None or plan_id not in self._catalog:
                raise InvalidPlan()
            plan = self._catalog.lookup(plan_id)

        secret = generate_secret()
        today = self._today()
        account = Account(
            account_id=account_id,
            display_name=display_name,
            email=email,
            phone=phone,
            secret_hash=hash_password(secret),
            plan_id=plan.plan_id if plan else None,
            photos_allowed=plan.photo_allowance if plan else 0,
            photos_used=0,
            activated_on=today,
            expires_on=today + timedelta(days=plan.validity_days) if plan else None,
            status=AccountStatus.ACTIVE,
            role=role,
        )

        with self._registry_lock:
            if account_id in self._accounts:
                raise DuplicateId()
            if self._store is not None:
                self._store.save_account(account)
            self._accounts[account_id] = account

        logger.info(
            "account_created",
            account_id=account_id,
            role=role.value,
            plan_id=account.plan_id,
            photos_allowed=account.photos_allowed,
            expires_on=str(account.expires_on),
        )
        return account, secret

    def authenticate(self, identifier: str, secret: str) -> Account:
        """Match on account id or email, active accounts only."""
        account = next(
            (
                a for a in self._snapshot()
                if (a.account_id == identifier or a.email == identifier) and a.is_active
            ),
            None,
        )
        if account is None:
            # keep timing close to a real verification
            dummy_verify()
            logger.info("login_failed")
            raise AuthFailure()
        if not verify_password(secret, account.secret_hash):
            logger.info("login_failed")
            raise AuthFailure()
        return account

    def get(self, account_id: str) -> Account:
        account = self._accounts.get(account_id)
        if account is None:
            raise NotFound("Account not found")
        return account

    def list_all(self, excluding: Iterable[str] = ()) -> list[Account]:
        skip = set(excluding)
        return [a for a in self._snapshot() if a.account_id not in skip]

    def reserve_quota(self, account_id: str) -> Account:
        """
        Check the account can take one more photo and hold it for the caller.

        Pending reservations count as used, so concurrent uploads cannot
        both pass the check for the last photo. Release with
        ``release_quota`` on failure or consume with
        ``decrement_quota(..., reserved=True)``.
        """
        with self.locked(account_id):
            account = self._accounts.get(account_id)
            if account is None:
                raise AccountMissing()
            if not account.is_active:
                raise LicenseInactive()
            if account.is_expired(self._today()):
                raise LicenseInactive("License expired")
            pending = self._reserved.get(account_id, 0)
            if account.photos_used + pending >= account.photos_allowed:
                logger.info(
                    "quota_refused",
                    account_id=account_id,
                    photos_used=account.photos_used,
                    photos_allowed=account.photos_allowed,
                    pending=pending,
                )
                raise QuotaExhausted()
            self._reserved[account_id] = pending + 1
            return account

    def release_quota(self, account_id: str) -> None:
        with self.locked(account_id):
            pending = self._reserved.get(account_id, 0)
            if pending <= 1:
                self._reserved.pop(account_id, None)
            else:
                self._reserved[account_id] = pending - 1

    def decrement_quota(self, account_id: str, reading=None, reserved: bool = False) -> Account:
        """
        Consume one photo: photos_used += 1.

        The caller has already checked the quota. When ``reading`` is given
        it is persisted in the same transaction as the account update.
        """
        with self.locked(account_id):
            account = self.get(account_id)
            updated = replace(account, photos_used=account.photos_used + 1)
            if self._store is not None:
                if reading is None:
                    self._store.save_account(updated)
                else:
                    self._store.record_upload(updated, reading)
            self._accounts[account_id] = updated
            if reserved:
                self.release_quota(account_id)
            return updated
