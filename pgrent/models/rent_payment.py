from datetime import datetime

from ..billing.money import format_money
from ..extensions import db


class PaymentStatus:
    PAID = "PAID"
    PARTIAL = "PARTIAL"
    PENDING = "PENDING"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"

    # Statuses that leave money owed for the covered period
    OUTSTANDING = (PARTIAL, PENDING)


class RentPayment(db.Model):
    __tablename__ = "tenant_payments"

    id = db.Column(db.Integer, primary_key=True)
    tenant_id = db.Column(db.Integer, db.ForeignKey("tenants.id"), nullable=False, index=True)
    pg_id = db.Column(db.Integer, db.ForeignKey("pg_locations.id"), nullable=False, index=True)

    # Financial details
    amount_paid = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    actual_rent_amount = db.Column(db.Numeric(10, 2), nullable=True)

    # Dates
    payment_date = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    start_date = db.Column(db.Date, nullable=True)  # covered period start
    end_date = db.Column(db.Date, nullable=True)    # covered period end

    status = db.Column(db.String(20), default=PaymentStatus.PENDING, nullable=False, index=True)
    payment_method = db.Column(db.String(20))
    remarks = db.Column(db.Text)

    is_deleted = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    tenant = db.relationship("Tenant", back_populates="rent_payments")

    def __repr__(self):
        return f"<RentPayment {self.id}: Tenant {self.tenant_id}, {self.amount_paid} {self.status}>"

    @property
    def outstanding_amount(self):
        """Amount still owed on this record (PENDING counts nothing as paid)."""
        if self.status not in PaymentStatus.OUTSTANDING or self.actual_rent_amount is None:
            return None
        paid = 0 if self.status == PaymentStatus.PENDING else (self.amount_paid or 0)
        return max(self.actual_rent_amount - paid, 0)

    def serialize(self):
        return {
            "id": self.id,
            "tenant_id": self.tenant_id,
            "pg_id": self.pg_id,
            "amount_paid": format_money(self.amount_paid),
            "actual_rent_amount": format_money(self.actual_rent_amount),
            "payment_date": self.payment_date.isoformat() if self.payment_date else None,
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "end_date": self.end_date.isoformat() if self.end_date else None,
            "status": self.status,
            "payment_method": self.payment_method,
            "remarks": self.remarks,
        }
