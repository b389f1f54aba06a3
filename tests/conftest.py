# Pytest fixtures for pgrent tests
# App on in-memory SQLite, JWT headers and small model factories

from datetime import date, datetime
from decimal import Decimal

import pytest
from flask_jwt_extended import create_access_token

from pgrent import create_app
from pgrent.config import TestingConfig
from pgrent.extensions import db
from pgrent.models import (
    CurrentBill,
    PaymentStatus,
    PgLocation,
    RentPayment,
    Room,
    Tenant,
    TenantStatus,
)


@pytest.fixture
def app():
    """Create an app with a fresh schema for each test."""
    app = create_app(TestingConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers(app, factory):
    """Bearer token plus the location header for the default location."""
    token = create_access_token(identity="1")
    return {
        "Authorization": f"Bearer {token}",
        "X-PG-Location-Id": str(factory.location().id),
    }


class Factory:
    """Persist model rows with sensible defaults."""

    def __init__(self):
        self._location = None

    def location(self, name=None):
        """The default location, or a new one when ``name`` is given."""
        if name is None and self._location is not None:
            return self._location
        loc = PgLocation(location_name=name or "Sunrise PG", address="12 MG Road")
        db.session.add(loc)
        db.session.commit()
        if name is None:
            self._location = loc
        return loc

    def room(self, room_no="101", rent_price=Decimal("10000"), location=None):
        location = location or self.location()
        room = Room(pg_id=location.id, room_no=room_no, rent_price=rent_price)
        db.session.add(room)
        db.session.commit()
        return room

    def tenant(self, room, name="Asha", check_in=date(2024, 1, 10), user_id=None,
               status=TenantStatus.ACTIVE, is_deleted=False):
        tenant = Tenant(
            pg_id=room.pg_id,
            room_id=room.id,
            user_id=user_id,
            name=name,
            check_in_date=check_in,
            status=status,
            is_deleted=is_deleted,
        )
        db.session.add(tenant)
        db.session.commit()
        return tenant

    def payment(self, tenant, status=PaymentStatus.PAID, amount_paid="10000",
                actual_rent_amount="10000", payment_date=None, start_date=None,
                end_date=None, is_deleted=False):
        if payment_date is None:
            anchor = start_date or date(2024, 1, 1)
            payment_date = datetime(anchor.year, anchor.month, anchor.day, 10, 0)
        record = RentPayment(
            tenant_id=tenant.id,
            pg_id=tenant.pg_id,
            amount_paid=Decimal(amount_paid),
            actual_rent_amount=Decimal(actual_rent_amount) if actual_rent_amount is not None else None,
            payment_date=payment_date,
            start_date=start_date,
            end_date=end_date,
            status=status,
            is_deleted=is_deleted,
        )
        db.session.add(record)
        db.session.commit()
        return record

    def bill(self, tenant, amount="500", bill_date=date(2024, 3, 5), is_deleted=False):
        bill = CurrentBill(
            tenant_id=tenant.id,
            pg_id=tenant.pg_id,
            bill_amount=Decimal(amount),
            bill_date=bill_date,
            is_deleted=is_deleted,
        )
        db.session.add(bill)
        db.session.commit()
        return bill


@pytest.fixture
def factory(app):
    return Factory()


class RecordingSender:
    """Notification sender double that records deliveries."""

    def __init__(self, fail_for=(), decline_for=()):
        self.sent = []
        self.fail_for = set(fail_for)
        self.decline_for = set(decline_for)

    def send(self, user_id, notification):
        if user_id in self.fail_for:
            raise RuntimeError("push gateway unavailable")
        if user_id in self.decline_for:
            return False
        self.sent.append((user_id, notification))
        return True


@pytest.fixture
def sender():
    return RecordingSender()


@pytest.fixture
def make_sender():
    return RecordingSender
