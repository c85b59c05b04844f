import json
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path

from sendiabete.core.errors import NotFound
from sendiabete.core.logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class LicensePlan:
    # A stable identifier like: "decouverte", "cabinet", "clinique"
    plan_id: str
    name: str
    photo_allowance: int
    validity_days: int
    price: Decimal
    currency: str = "XOF"


DEFAULT_PLANS = [
    {"plan_id": "decouverte", "name": "Découverte 30 jours", "photo_allowance": 50,
     "validity_days": 30, "price": Decimal("15000"), "currency": "XOF"},

    {"plan_id": "cabinet", "name": "Cabinet 90 jours", "photo_allowance": 300,
     "validity_days": 90, "price": Decimal("75000"), "currency": "XOF"},

    {"plan_id": "clinique", "name": "Clinique 365 jours", "photo_allowance": 2000,
     "validity_days": 365, "price": Decimal("400000"), "currency": "XOF"},
]


class LicenseCatalog:
    """Plan id -> LicensePlan. Built once at startup, read-only afterwards."""

    def __init__(self, plans):
        by_id: dict[str, LicensePlan] = {}
        for plan in plans:
            if plan.plan_id in by_id:
                raise ValueError(f"Duplicate plan id: {plan.plan_id}")
            if plan.photo_allowance <= 0:
                raise ValueError(f"Plan {plan.plan_id}: photo allowance must be positive")
            if plan.validity_days <= 0:
                raise ValueError(f"Plan {plan.plan_id}: validity days must be positive")
            by_id[plan.plan_id] = plan
        self._plans = by_id

    def lookup(self, plan_id: str) -> LicensePlan:
        plan = self._plans.get(plan_id)
        if plan is None:
            raise NotFound("License plan not found")
        return plan

    def __contains__(self, plan_id: str) -> bool:
        return plan_id in self._plans

    def plans(self) -> list[LicensePlan]:
        return sorted(self._plans.values(), key=lambda p: (p.price, p.plan_id))

    @classmethod
    def default(cls) -> "LicenseCatalog":
        return cls(LicensePlan(**data) for data in DEFAULT_PLANS)

    @classmethod
    def from_json_file(cls, path: str | Path) -> "LicenseCatalog":
        """
        Load plans from a JSON object keyed by plan id:
        {"decouverte": {"name": ..., "photos": 50, "duration_days": 30, "price": 15000, "currency": "XOF"}}
        """
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
        plans = []
        for plan_id, data in raw.items():
            try:
                plans.append(LicensePlan(
                    plan_id=plan_id,
                    name=data.get("name") or plan_id,
                    photo_allowance=int(data["photos"]),
                    validity_days=int(data["duration_days"]),
                    price=Decimal(str(data["price"])),
                    currency=data.get("currency") or "XOF",
                ))
            except (KeyError, TypeError, ArithmeticError) as exc:
                raise ValueError(f"Invalid plan entry {plan_id!r}: {exc}") from exc
        catalog = cls(plans)
        logger.info("license_catalog_loaded", path=str(path), plans=[p.plan_id for p in catalog.plans()])
        return catalog


def load_catalog(settings) -> LicenseCatalog:
    """Catalog from ``settings.license_catalog_path`` or the built-in plans."""
    if settings.license_catalog_path:
        return LicenseCatalog.from_json_file(settings.license_catalog_path)
    return LicenseCatalog.default()
