from ..extensions import db

from .location import PgLocation
from .room import Room
from .tenant import Tenant, TenantStatus
from .rent_payment import PaymentStatus, RentPayment
from .current_bill import CurrentBill

__all__ = [
    "db",
    "CurrentBill",
    "PaymentStatus",
    "PgLocation",
    "RentPayment",
    "Room",
    "Tenant",
    "TenantStatus",
]
