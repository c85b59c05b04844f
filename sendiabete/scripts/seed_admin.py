from sendiabete.core.config import settings
from sendiabete.core.errors import NotFound
from sendiabete.core.logging_config import configure_logging
from sendiabete.db.store import SqlStore
from sendiabete.services.accounts import AccountLedger, Role
from sendiabete.services.catalog import load_catalog

def seed_admin(ledger: AccountLedger) -> str | None:
    """Create the admin account if absent. Returns its one-time secret, or None if it already existed."""
    try:
        ledger.get(settings.admin_account_id)
        return None
    except NotFound:
        pass

    _, secret = ledger.create(
        account_id=settings.admin_account_id,
        display_name=settings.admin_name,
        email=settings.admin_email,
        phone=None,
        plan_id=None,
        role=Role.ADMIN,
    )
    return secret

def main():
    configure_logging(settings)
    store = SqlStore.from_url(settings.database_url, echo=settings.db_echo)
    store.create_schema()
    ledger = AccountLedger(load_catalog(settings), store=store, accounts=store.load_accounts())

    secret = seed_admin(ledger)
    if secret is None:
        print("Admin account already exists:", settings.admin_account_id)
    else:
        print("Admin account created:", settings.admin_account_id)
        print("One-time password (not shown again):", secret)

if __name__ == "__main__":
    main()
