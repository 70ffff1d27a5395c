"""Domain Events.

This module provides clean access to the authentication domain events. All
events are immutable records built through ``create_auth_event`` and handed to
an external sink for audit and analytics.
"""

from .authentication_events import (
    AuthDomainEvent,
    build_event_metadata,
    create_auth_event,
    event_category,
    is_security_event,
    is_tenant_event,
    is_user_event,
)
from .schemas import (
    EVENT_SCHEMAS,
    SECURITY_EVENT_TYPES,
    AuthEventType,
    EventCategory,
    EventSchema,
    EventSeverity,
)

__all__ = [
    "AuthDomainEvent",
    "AuthEventType",
    "EVENT_SCHEMAS",
    "EventCategory",
    "EventSchema",
    "EventSeverity",
    "SECURITY_EVENT_TYPES",
    "build_event_metadata",
    "create_auth_event",
    "event_category",
    "is_security_event",
    "is_tenant_event",
    "is_user_event",
]
