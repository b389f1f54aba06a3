# Store-backed tests for the property-wide pending reports

from datetime import date, datetime
from decimal import Decimal

import pytest

from pgrent.billing import aggregator
from pgrent.billing.classifier import OverallStatus
from pgrent.errors import NotFoundError, PreconditionFailedError
from pgrent.models import PaymentStatus, TenantStatus

NOW = date(2024, 3, 20)


@pytest.fixture
def property_setup(factory):
    """Room 101 with one paid-up and one behind tenant, plus an unpriced room."""
    room = factory.room("101")
    paid_up = factory.tenant(room, "Paid Up", check_in=date(2024, 1, 10))
    for month in (1, 2, 3):
        factory.payment(paid_up, start_date=date(2024, month, 1), end_date=date(2024, month, 28))

    behind = factory.tenant(room, "Behind", check_in=date(2024, 1, 10))
    factory.payment(behind, start_date=date(2024, 1, 1))
    factory.payment(
        behind,
        status=PaymentStatus.PARTIAL,
        amount_paid="4000",
        start_date=date(2024, 3, 1),
        end_date=date(2024, 3, 31),
    )

    unpriced = factory.room("102", rent_price=None)
    skipped = factory.tenant(unpriced, "No Rent", check_in=date(2024, 1, 10))
    return {"paid_up": paid_up, "behind": behind, "skipped": skipped}


class TestPendingReport:
    """Test the full reconciliation report for a location."""

    def test_lists_only_tenants_with_issues(self, factory, property_setup):
        report = aggregator.pending_report(factory.location().id, now=NOW)

        assert [v.tenant.id for v in report.tenants] == [property_setup["behind"].id]
        view = report.tenants[0]
        assert view.overall_status == OverallStatus.MISSING_PAYMENTS
        assert view.total_due == Decimal("16000.00")

    def test_counts_and_skips(self, factory, property_setup):
        report = aggregator.pending_report(factory.location().id, now=NOW)

        assert report.status_counts == {
            OverallStatus.PAID: 1,
            OverallStatus.PENDING: 0,
            OverallStatus.PARTIAL_PAYMENTS: 0,
            OverallStatus.MISSING_PAYMENTS: 1,
        }
        assert report.skipped_tenants == [property_setup["skipped"].id]
        assert report.summary == {
            "total_tenants": 1,
            "total_pending_amount": "16000.00",
            "overdue_tenants": 1,
            "partial_payment_tenants": 0,
        }

    def test_serialization_is_stable(self, factory, property_setup):
        pg_id = factory.location().id
        first = aggregator.pending_report(pg_id, now=NOW).serialize()
        second = aggregator.pending_report(pg_id, now=NOW).serialize()
        assert first == second
        assert first["as_of"] == "2024-03-20"

    def test_ranks_by_amount_due(self, factory, property_setup):
        room = factory.room("103")
        far_behind = factory.tenant(room, "Far Behind", check_in=date(2023, 12, 1))
        report = aggregator.pending_report(factory.location().id, now=NOW)
        assert [v.tenant.id for v in report.tenants] == [far_behind.id, property_setup["behind"].id]

    def test_tombstoned_payment_is_ignored(self, factory):
        room = factory.room("104")
        tenant = factory.tenant(room, "Deleted Payment", check_in=date(2024, 3, 1))
        factory.payment(tenant, start_date=date(2024, 3, 1), is_deleted=True)

        report = aggregator.pending_report(factory.location().id, now=NOW)
        view = next(v for v in report.tenants if v.tenant.id == tenant.id)
        assert [m.month for m in view.reconciliation.missing_months] == ["2024-03"]
        assert view.reconciliation.latest_payment is None

    def test_inactive_and_deleted_tenants_are_excluded(self, factory):
        room = factory.room("105")
        factory.tenant(room, "Left", status=TenantStatus.INACTIVE)
        factory.tenant(room, "Removed", is_deleted=True)
        report = aggregator.pending_report(factory.location().id, now=NOW)
        assert report.tenants == []
        assert sum(report.status_counts.values()) == 0

    def test_other_locations_are_not_included(self, factory, property_setup):
        other = factory.location("Lakeview PG")
        room = factory.room("201", location=other)
        factory.tenant(room, "Elsewhere")
        report = aggregator.pending_report(factory.location().id, now=NOW)
        assert all(v.tenant.pg_id == factory.location().id for v in report.tenants)


class TestTenantPendingView:
    def test_single_tenant_view(self, factory, property_setup):
        view = aggregator.tenant_pending_view(property_setup["behind"].id, now=NOW)
        data = view.serialize()
        assert data["tenant_name"] == "Behind"
        assert data["room_no"] == "101"
        assert data["total_due"] == "16000.00"

    def test_unknown_tenant(self, app):
        with pytest.raises(NotFoundError):
            aggregator.tenant_pending_view(999, now=NOW)

    def test_wrong_location_is_not_found(self, factory, property_setup):
        with pytest.raises(NotFoundError):
            aggregator.tenant_pending_view(property_setup["behind"].id, pg_id=9999, now=NOW)

    def test_unpriced_room(self, factory, property_setup):
        with pytest.raises(PreconditionFailedError):
            aggregator.tenant_pending_view(property_setup["skipped"].id, now=NOW)

    def test_inactive_tenant_owes_nothing(self, factory):
        room = factory.room("106")
        tenant = factory.tenant(room, "Checked Out", status=TenantStatus.INACTIVE)
        view = aggregator.tenant_pending_view(tenant.id, now=NOW)
        assert view.overall_status == OverallStatus.PAID
        assert view.total_due == Decimal("0.00")


class TestDueAndOverdue:
    def test_tenants_due_in(self, factory):
        room = factory.room("107")
        soon = factory.tenant(room, "Due Soon", user_id=7)
        factory.payment(soon, start_date=date(2024, 2, 23), end_date=date(2024, 3, 22))
        tomorrow = factory.tenant(room, "Due Tomorrow")
        factory.payment(tomorrow, start_date=date(2024, 2, 21), end_date=date(2024, 3, 20))

        due_soon = aggregator.tenants_due_in(3, now=NOW)
        assert [d["tenant_id"] for d in due_soon] == [soon.id]
        assert due_soon[0]["next_due_date"] == "2024-03-23"
        assert due_soon[0]["monthly_rent"] == "10000.00"
        assert due_soon[0]["user_id"] == 7

        due_tomorrow = aggregator.tenants_due_in(1, now=NOW)
        assert [d["tenant_id"] for d in due_tomorrow] == [tomorrow.id]

    def test_overdue_tenants(self, factory):
        room = factory.room("108")
        late = factory.tenant(room, "Late")
        pending = factory.payment(
            late,
            status=PaymentStatus.PENDING,
            amount_paid="0",
            start_date=date(2024, 2, 1),
            end_date=date(2024, 2, 29),
        )
        partial = factory.payment(
            late,
            status=PaymentStatus.PARTIAL,
            amount_paid="4000",
            start_date=date(2024, 3, 1),
            end_date=date(2024, 3, 10),
            payment_date=datetime(2024, 3, 1, 9, 0),
        )
        # Period not yet over
        factory.payment(
            late,
            status=PaymentStatus.PENDING,
            amount_paid="0",
            start_date=date(2024, 3, 11),
            end_date=date(2024, 4, 10),
        )

        overdue = aggregator.overdue_tenants(now=NOW)
        assert overdue == [{
            "tenant_id": late.id,
            "tenant_name": "Late",
            "user_id": None,
            "room_no": "108",
            "amount": "16000.00",
            "overdue_days": 20,
            "payment_ids": sorted([pending.id, partial.id]),
        }]

    def test_location_ids_with_active_tenants(self, factory, property_setup):
        other = factory.location("Lakeview PG")
        factory.tenant(factory.room("201", location=other), "Elsewhere")
        assert aggregator.location_ids_with_active_tenants() == [factory.location().id, other.id]
