from datetime import datetime

from ..billing.money import format_money
from ..extensions import db


class CurrentBill(db.Model):
    """A shared or individual utility charge, one per tenant per month."""

    __tablename__ = "current_bills"

    id = db.Column(db.Integer, primary_key=True)
    tenant_id = db.Column(db.Integer, db.ForeignKey("tenants.id"), nullable=False, index=True)
    pg_id = db.Column(db.Integer, db.ForeignKey("pg_locations.id"), nullable=False, index=True)

    bill_amount = db.Column(db.Numeric(10, 2), nullable=False)
    bill_date = db.Column(db.Date, nullable=False, index=True)  # month the bill covers
    remarks = db.Column(db.Text)

    is_deleted = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    tenant = db.relationship("Tenant", back_populates="current_bills")

    def __repr__(self):
        return f"<CurrentBill {self.id}: Tenant {self.tenant_id}, {self.bill_amount} on {self.bill_date}>"

    def serialize(self):
        return {
            "id": self.id,
            "tenant_id": self.tenant_id,
            "pg_id": self.pg_id,
            "bill_amount": format_money(self.bill_amount),
            "bill_date": self.bill_date.isoformat() if self.bill_date else None,
            "remarks": self.remarks,
            "tenant_name": self.tenant.name if self.tenant else None,
            "room_no": self.tenant.room.room_no if self.tenant and self.tenant.room else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
