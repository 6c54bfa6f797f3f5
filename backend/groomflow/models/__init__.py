"""ORM models package export."""

from groomflow.models.appointment import (
    OCCUPYING_STATUSES,
    Appointment,
    AppointmentService,
    AppointmentStatus,
)
from groomflow.models.audit_event import AuditEvent
from groomflow.models.client import Client
from groomflow.models.kennel import Kennel, SizeClass
from groomflow.models.payment import Payment, PaymentMethod, PaymentStatus
from groomflow.models.pet import Pet, PetType
from groomflow.models.salon import Salon
from groomflow.models.service import Service
from groomflow.models.user import User, UserRole, UserStatus

__all__ = [
    "OCCUPYING_STATUSES",
    "Appointment",
    "AppointmentService",
    "AppointmentStatus",
    "AuditEvent",
    "Client",
    "Kennel",
    "SizeClass",
    "Payment",
    "PaymentMethod",
    "PaymentStatus",
    "Pet",
    "PetType",
    "Salon",
    "Service",
    "User",
    "UserRole",
    "UserStatus",
]
