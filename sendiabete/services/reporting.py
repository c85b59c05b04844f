from dataclasses import dataclass
from decimal import Decimal

from sendiabete.services.accounts import Account, AccountLedger
from sendiabete.services.catalog import LicenseCatalog


@dataclass(frozen=True)
class LedgerStats:
    total_accounts: int
    active_accounts: int
    photos_sold: int
    revenue: Decimal
    photos_used: int


def practitioners(ledger: AccountLedger) -> list[Account]:
    return [a for a in ledger.list_all() if not a.is_admin]


def summarize(ledger: AccountLedger, catalog: LicenseCatalog) -> LedgerStats:
    """Aggregate the current ledger state, admin accounts excluded."""
    accounts = practitioners(ledger)
    revenue = Decimal("0")
    for account in accounts:
        if account.plan_id in catalog:
            revenue += catalog.lookup(account.plan_id).price
    return LedgerStats(
        total_accounts=len(accounts),
        active_accounts=sum(1 for a in accounts if a.is_active),
        photos_sold=sum(a.photos_allowed for a in accounts),
        revenue=revenue,
        photos_used=sum(a.photos_used for a in accounts),
    )
