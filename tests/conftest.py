import datetime as dt

import pytest
from fastapi.testclient import TestClient

import seed_data
from billing import BillingEngine
from desk import PharmacyDesk
from inventory import InventoryLedger
from main import app, get_desk
from prescriptions import PrescriptionWorkflow


@pytest.fixture
def ledger():
    return InventoryLedger(seed_data.demo_medicines())


@pytest.fixture
def today():
    return dt.date(2024, 2, 1)


@pytest.fixture
def engine(ledger, today):
    return BillingEngine(price_lookup=ledger.price_of, today=lambda: today)


@pytest.fixture
def events():
    return []


@pytest.fixture
def workflow(events):
    return PrescriptionWorkflow(seed_data.demo_registry(), on_dispense=events.append)


@pytest.fixture
def desk():
    return PharmacyDesk.create()


@pytest.fixture
def client(desk):
    app.dependency_overrides[get_desk] = lambda: desk
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
