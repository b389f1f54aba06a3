from datetime import datetime

from ..billing.money import format_money
from ..extensions import db


class Room(db.Model):
    __tablename__ = "rooms"

    id = db.Column(db.Integer, primary_key=True)
    pg_id = db.Column(db.Integer, db.ForeignKey("pg_locations.id"), nullable=False, index=True)
    room_no = db.Column(db.String(50), nullable=False)

    # Current monthly rent; history is not tracked
    rent_price = db.Column(db.Numeric(10, 2), nullable=True)

    is_deleted = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    location = db.relationship("PgLocation", back_populates="rooms")
    tenants = db.relationship("Tenant", back_populates="room", lazy=True)

    def __repr__(self):
        return f"<Room {self.id}: {self.room_no}>"

    def serialize(self):
        return {
            "id": self.id,
            "pg_id": self.pg_id,
            "room_no": self.room_no,
            "rent_price": format_money(self.rent_price),
        }
