from datetime import datetime

from ..extensions import db


class TenantStatus:
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class Tenant(db.Model):
    __tablename__ = "tenants"

    id = db.Column(db.Integer, primary_key=True)
    pg_id = db.Column(db.Integer, db.ForeignKey("pg_locations.id"), nullable=False, index=True)
    room_id = db.Column(db.Integer, db.ForeignKey("rooms.id"), nullable=True, index=True)

    # Account that receives push notifications, if the tenant has one
    user_id = db.Column(db.Integer, nullable=True)

    name = db.Column(db.String(255), nullable=False)
    phone_no = db.Column(db.String(20))
    email = db.Column(db.String(255))

    check_in_date = db.Column(db.Date, nullable=False)
    check_out_date = db.Column(db.Date, nullable=True)
    status = db.Column(db.String(20), default=TenantStatus.ACTIVE, nullable=False, index=True)

    is_deleted = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    room = db.relationship("Room", back_populates="tenants")
    rent_payments = db.relationship("RentPayment", back_populates="tenant", lazy=True)
    current_bills = db.relationship("CurrentBill", back_populates="tenant", lazy=True)

    def __repr__(self):
        return f"<Tenant {self.id}: {self.name}>"

    def serialize(self):
        return {
            "id": self.id,
            "pg_id": self.pg_id,
            "room_id": self.room_id,
            "name": self.name,
            "phone_no": self.phone_no,
            "email": self.email,
            "check_in_date": self.check_in_date.isoformat() if self.check_in_date else None,
            "check_out_date": self.check_out_date.isoformat() if self.check_out_date else None,
            "status": self.status,
        }
