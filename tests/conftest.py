import json
import os
from decimal import Decimal

# before any sendiabete import: settings are read once at import time
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["OPENAI_API_KEY"] = ""
os.environ["LICENSE_CATALOG_PATH"] = ""
os.environ["LOG_LEVEL"] = "warning"

import pytest
from fastapi.testclient import TestClient

from sendiabete.core.config import Settings
from sendiabete.main import create_app
from sendiabete.services.accounts import AccountLedger, Role
from sendiabete.services.catalog import LicenseCatalog, LicensePlan
from sendiabete.services.readings import ReadingLedger
from sendiabete.services.upload import UploadWorkflow

from tests.fakes import FakeAnalyzer

TEST_PLANS = {
    "solo": {"name": "Solo", "photos": 1, "duration_days": 30, "price": 2000, "currency": "XOF"},
    "duo": {"name": "Duo", "photos": 2, "duration_days": 30, "price": 5000, "currency": "XOF"},
    "cabinet": {"name": "Cabinet", "photos": 300, "duration_days": 90, "price": 75000, "currency": "XOF"},
}


@pytest.fixture
def catalog():
    return LicenseCatalog(
        LicensePlan(
            plan_id=plan_id,
            name=data["name"],
            photo_allowance=data["photos"],
            validity_days=data["duration_days"],
            price=Decimal(data["price"]),
            currency=data["currency"],
        )
        for plan_id, data in TEST_PLANS.items()
    )


@pytest.fixture
def ledger(catalog):
    return AccountLedger(catalog)


@pytest.fixture
def readings():
    return ReadingLedger()


@pytest.fixture
def analyzer():
    return FakeAnalyzer()


@pytest.fixture
def workflow(ledger, readings, analyzer):
    return UploadWorkflow(ledger, readings, analyzer)


@pytest.fixture
def settings(tmp_path):
    catalog_file = tmp_path / "licences.json"
    catalog_file.write_text(json.dumps(TEST_PLANS), encoding="utf-8")
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'test.db'}",
        license_catalog_path=str(catalog_file),
        openai_api_key="",
        log_level="warning",
    )


@pytest.fixture
def app(settings, analyzer):
    return create_app(settings, analyzer=analyzer)


@pytest.fixture
def client(app):
    return TestClient(app)


def login(client, identifier, password) -> dict:
    r = client.post("/auth/login", json={"identifier": identifier, "password": password})
    assert r.status_code == 200, r.text
    return {"Authorization": f"Bearer {r.json()['access_token']}"}


@pytest.fixture
def admin_headers(app, client):
    _, secret = app.state.accounts.create(
        account_id="root",
        display_name="Administrateur",
        email="admin@example.sn",
        phone=None,
        plan_id=None,
        role=Role.ADMIN,
    )
    return login(client, "root", secret)
