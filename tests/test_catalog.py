import json
from decimal import Decimal

import pytest

from sendiabete.core.config import Settings
from sendiabete.core.errors import NotFound
from sendiabete.services.catalog import LicenseCatalog, LicensePlan, load_catalog


def test_lookup(catalog):
    plan = catalog.lookup("duo")
    assert plan.photo_allowance == 2
    assert plan.validity_days == 30
    assert plan.price == Decimal("5000")


def test_lookup_unknown_plan(catalog):
    with pytest.raises(NotFound):
        catalog.lookup("platinum")
    assert "platinum" not in catalog


def test_plans_sorted_by_price(catalog):
    assert [p.plan_id for p in catalog.plans()] == ["solo", "duo", "cabinet"]


def test_default_catalog_is_valid():
    catalog = LicenseCatalog.default()
    assert catalog.plans()
    assert all(p.photo_allowance > 0 and p.validity_days > 0 for p in catalog.plans())


@pytest.mark.parametrize(
    "photos, days",
    [(0, 30), (10, 0), (-1, 30)],
)
def test_rejects_non_positive_allowance_or_duration(photos, days):
    with pytest.raises(ValueError):
        LicenseCatalog([LicensePlan("bad", "Bad", photos, days, Decimal("1"))])


def test_rejects_duplicate_plan_id():
    plan = LicensePlan("dup", "Dup", 1, 1, Decimal("1"))
    with pytest.raises(ValueError):
        LicenseCatalog([plan, plan])


def test_from_json_file(tmp_path):
    path = tmp_path / "licences.json"
    path.write_text(json.dumps({
        "mini": {"name": "Mini", "photos": 5, "duration_days": 7, "price": 1000.5},
    }), encoding="utf-8")

    catalog = LicenseCatalog.from_json_file(path)
    plan = catalog.lookup("mini")
    assert plan.photo_allowance == 5
    assert plan.price == Decimal("1000.5")
    assert plan.currency == "XOF"


def test_from_json_file_missing_field(tmp_path):
    path = tmp_path / "licences.json"
    path.write_text(json.dumps({"mini": {"name": "Mini", "photos": 5}}), encoding="utf-8")
    with pytest.raises(ValueError):
        LicenseCatalog.from_json_file(path)


def test_load_catalog_defaults_without_path():
    catalog = load_catalog(Settings(license_catalog_path=""))
    assert [p.plan_id for p in catalog.plans()] == [p.plan_id for p in LicenseCatalog.default().plans()]
