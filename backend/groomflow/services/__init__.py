"""Service layer exports."""
from groomflow.services import (
    appointment_service,
    auth_service,
    client_service,
    kennel_service,
    payment_service,
    pet_service,
    salon_service,
    service_catalog_service,
    user_service,
    workflow_service,
)

__all__ = [
    "appointment_service",
    "auth_service",
    "client_service",
    "kennel_service",
    "payment_service",
    "pet_service",
    "salon_service",
    "service_catalog_service",
    "user_service",
    "workflow_service",
]
