from sendiabete.core.config import settings
from sendiabete.scripts.seed_admin import seed_admin


def test_seed_admin_once(ledger):
    secret = seed_admin(ledger)

    admin = ledger.get(settings.admin_account_id)
    assert admin.is_admin
    assert ledger.authenticate(settings.admin_email, secret) == admin

    assert seed_admin(ledger) is None
