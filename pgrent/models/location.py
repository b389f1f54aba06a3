from datetime import datetime

from ..extensions import db


class PgLocation(db.Model):
    __tablename__ = "pg_locations"

    id = db.Column(db.Integer, primary_key=True)
    location_name = db.Column(db.String(255), nullable=False)
    address = db.Column(db.String(512))
    is_deleted = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    rooms = db.relationship("Room", back_populates="location", lazy=True)

    def __repr__(self):
        return f"<PgLocation {self.id}: {self.location_name}>"

    def serialize(self):
        return {
            "id": self.id,
            "location_name": self.location_name,
            "address": self.address,
        }
