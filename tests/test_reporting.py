from decimal import Decimal

from sendiabete.services.accounts import Role
from sendiabete.services.reporting import practitioners, summarize


def test_summary_excludes_admins(catalog, ledger):
    ledger.create("root", "Admin", "admin@example.sn", None, None, role=Role.ADMIN)
    ledger.create("dr_a", "Dr A", "a@example.sn", None, "duo")
    ledger.create("dr_b", "Dr B", "b@example.sn", None, "cabinet")
    ledger.decrement_quota("dr_a")
    ledger.decrement_quota("dr_b")
    ledger.decrement_quota("dr_b")

    stats = summarize(ledger, catalog)

    assert stats.total_accounts == 2
    assert stats.active_accounts == 2
    assert stats.photos_sold == 302
    assert stats.revenue == Decimal("80000")
    assert stats.photos_used == 3
    assert [a.account_id for a in practitioners(ledger)] == ["dr_a", "dr_b"]


def test_summary_of_empty_ledger(catalog, ledger):
    stats = summarize(ledger, catalog)
    assert stats.total_accounts == 0
    assert stats.revenue == Decimal("0")
    assert stats.photos_used == 0


def test_practitioner_named_admin_is_counted(catalog, ledger):
    ledger.create("admin", "Dr Admin", "dr.admin@example.sn", None, "solo")
    assert summarize(ledger, catalog).total_accounts == 1


def test_account_usage_rounding(ledger):
    ledger.create("dr_c", "Dr C", "c@example.sn", None, "cabinet")
    account = ledger.decrement_quota("dr_c")
    assert account.photos_remaining == 299
    assert account.percent_used == 0  # round(1/300*100)
    for _ in range(4):
        account = ledger.decrement_quota("dr_c")
    assert account.percent_used == 2  # round(5/300*100) = round(1.67)
