from datetime import datetime
from zoneinfo import ZoneInfo

import pytest
from fastapi.testclient import TestClient

import paintball.main as main_module
from paintball import config
from paintball.db.models import (
    SETTINGS_ID,
    Addon,
    Booking,
    BookingAddon,
    Client,
    Package,
    Resource,
    VenueSettings,
)
from paintball.main import app


PARIS = ZoneInfo("Europe/Paris")


class FakeQuery:
    def __init__(self, session, model):
        self.session = session
        self.model = model

    def all(self):
        return list(self.session.store.get(self.model, []))


class FakeSession:
    def __init__(self):
        self.store = {
            Package: [],
            Addon: [],
            Resource: [],
            Booking: [],
            BookingAddon: [],
            Client: [],
            VenueSettings: [],
        }
        self.next_id = {
            Package: 1,
            Addon: 1,
            Resource: 1,
            Booking: 1,
            BookingAddon: 1,
            Client: 1,
        }
        self.commits = 0
        self.rollbacks = 0

    def query(self, model):
        return FakeQuery(self, model)

    def add(self, row):
        model = type(row)
        if getattr(row, "id", None) is None and model in self.next_id:
            row.id = self.next_id[model]
            self.next_id[model] += 1
        if model in self.store and row not in self.store[model]:
            self.store[model].append(row)

    def delete(self, row):
        rows = self.store.get(type(row), [])
        if row in rows:
            rows.remove(row)

    def flush(self):
        return None

    def commit(self):
        self.commits += 1

    def rollback(self):
        self.rollbacks += 1

    def close(self):
        return None


def add_package(session, name="Découverte", price_cents=2000, duration_min=120, **kwargs):
    package = Package(
        name=name,
        price_cents=price_cents,
        duration_min=duration_min,
        included_balls=kwargs.get("included_balls", 120),
        is_promo=kwargs.get("is_promo", False),
        is_public=kwargs.get("is_public", True),
    )
    session.add(package)
    return package


def add_addon(session, name="Combinaison", price_cents=400):
    addon = Addon(name=name, price_cents=price_cents)
    session.add(addon)
    return addon


def add_resource(session, name="Terrain A", capacity=1):
    resource = Resource(name=name, capacity=capacity)
    session.add(resource)
    return resource


def add_client(session, name="Alice Martin", email=None, phone=None, notes=None):
    client = Client(name=name, email=email, phone=phone, notes=notes)
    session.add(client)
    return client


def add_booking(
    session,
    package,
    start,
    end,
    resource=None,
    status="CONFIRMED",
    group_size=10,
    client=None,
):
    booking = Booking(
        package_id=package.id,
        resource_id=resource.id if resource is not None else None,
        client_id=client.id if client is not None else None,
        group_size=group_size,
        customer_name="Existing Customer",
        customer_email=None,
        customer_phone=None,
        notes=None,
        start_time=start,
        end_time=end,
        nocturne=False,
        status=status,
        total_cents=package.price_cents * group_size,
        deposit_cents=0,
    )
    session.add(booking)
    return booking


def add_settings(session, **overrides):
    values = {
        "nocturne_threshold": 20,
        "nocturne_per_person_cents": 400,
        "min_players": 8,
        "penalty_under_min_cents": 2500,
        "opening_hours_json": {},
        "stripe_enabled": False,
        "deposit_type": "NONE",
        "deposit_fixed_cents": None,
        "deposit_percent": None,
    }
    values.update(overrides)
    settings = VenueSettings(id=SETTINGS_ID, **values)
    session.add(settings)
    return settings


def paris(year, month, day, hour, minute=0):
    return datetime(year, month, day, hour, minute, tzinfo=PARIS)


@pytest.fixture
def fake_session(monkeypatch):
    session = FakeSession()
    monkeypatch.setattr(main_module, "SessionLocal", lambda: session)
    return session


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setattr(config, "ENV", "dev")
    monkeypatch.setattr(config, "ADMIN_API_KEY", "")
    return TestClient(app)
