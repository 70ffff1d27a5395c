"""Authentication Domain Events.

These events represent significant business occurrences in the authentication
domain that other parts of the system react to (audit logging, analytics,
security monitoring). The engine only builds them; transporting and storing
them is the caller's job.

``create_auth_event`` is the single construction path. It checks the payload
against the event's schema and always injects ``timestamp`` and ``metadata``,
so no event exists without either.
"""

from dataclasses import asdict, dataclass, is_dataclass
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Mapping, Optional, Union

import structlog

from authdomain.domain.entities.session import DeviceInfo, SessionLocation
from authdomain.domain.events.schemas import (
    EVENT_SCHEMAS,
    RESERVED_PAYLOAD_FIELDS,
    SECURITY_EVENT_TYPES,
    AuthEventType,
    EventCategory,
)
from authdomain.domain.validation.primitives import is_valid_ip_address, is_valid_user_agent
from authdomain.utils.clock import as_utc, utc_now

logger = structlog.get_logger(__name__)

METADATA_FIELDS: FrozenSet[str] = frozenset(
    {"ip_address", "user_agent", "location", "device", "context"}
)
_LOCATION_FIELDS = ("country", "city", "region")
_DEVICE_FIELDS = ("type", "name", "os", "browser")


def _freeze(value: Any) -> Any:
    """Recursively turns a JSON-like value into its read-only counterpart."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return _format_timestamp(value)
    if isinstance(value, Mapping):
        return MappingProxyType({str(k): _freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple, set, frozenset)):
        return tuple(_freeze(v) for v in value)
    return value


def _thaw(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: _thaw(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [_thaw(v) for v in value]
    return value


def _format_timestamp(moment: datetime) -> str:
    return as_utc(moment).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _parse_timestamp(value: str) -> datetime:
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


def resolve_event_type(event_type: Union[AuthEventType, str]) -> AuthEventType:
    """Accepts a tag as enum member or string.

    Raises:
        ValueError: If the tag is not a known event type.
    """
    try:
        return AuthEventType(event_type)
    except ValueError:
        raise ValueError(f"Unknown authentication event type: {event_type!r}") from None


@dataclass(frozen=True)
class AuthDomainEvent:
    """An immutable fact of the authentication flow.

    Attributes:
        type: The event tag.
        payload: Read-only payload, always holding ``timestamp`` (ISO-8601 UTC)
            and ``metadata`` (read-only mapping).
    """

    type: AuthEventType
    payload: Mapping[str, Any]

    @property
    def timestamp(self) -> str:
        return self.payload["timestamp"]

    @property
    def occurred_at(self) -> datetime:
        return _parse_timestamp(self.payload["timestamp"])

    @property
    def metadata(self) -> Mapping[str, Any]:
        return self.payload["metadata"]

    @property
    def category(self) -> EventCategory:
        return event_category(self.type)

    def to_dict(self) -> Dict[str, Any]:
        """Plain, JSON-ready representation for an external event sink."""
        return {"type": self.type.value, "payload": _thaw(self.payload)}


def create_auth_event(
    event_type: Union[AuthEventType, str],
    payload: Mapping[str, Any],
    metadata: Optional[Mapping[str, Any]] = None,
    occurred_at: Optional[datetime] = None,
) -> AuthDomainEvent:
    """Builds an event after checking ``payload`` against the event's schema.

    Args:
        event_type: The event tag, as ``AuthEventType`` or its string value.
        payload: Event fields, without ``timestamp`` and ``metadata``.
        metadata: Request context, see ``build_event_metadata``. Defaults to ``{}``.
        occurred_at: Event time, defaults to now. Naive values are read as UTC.

    Raises:
        ValueError: On an unknown tag, a missing required field, an unknown
            field, a value outside a field's allowed choices, a caller-supplied
            ``timestamp``/``metadata`` key, or unknown metadata keys.
    """
    resolved = resolve_event_type(event_type)
    schema = EVENT_SCHEMAS[resolved]

    reserved = RESERVED_PAYLOAD_FIELDS & set(payload)
    if reserved:
        raise ValueError(
            f"{resolved.value}: payload must not set {sorted(reserved)}; they are injected"
        )
    missing = schema.required - set(payload)
    if missing:
        raise ValueError(f"{resolved.value}: missing required fields {sorted(missing)}")
    unknown = set(payload) - schema.fields
    if unknown:
        raise ValueError(f"{resolved.value}: unknown fields {sorted(unknown)}")

    frozen_payload = {key: _freeze(value) for key, value in payload.items()}
    for key, allowed in schema.choices.items():
        if key not in frozen_payload:
            continue
        value = frozen_payload[key]
        if not isinstance(value, str) or value not in allowed:
            raise ValueError(
                f"{resolved.value}: {key}={frozen_payload[key]!r} is not one of {sorted(allowed)}"
            )

    metadata = metadata or {}
    unknown_metadata = set(metadata) - METADATA_FIELDS
    if unknown_metadata:
        raise ValueError(f"Unknown event metadata fields {sorted(unknown_metadata)}")

    frozen_payload["timestamp"] = _format_timestamp(occurred_at or utc_now())
    frozen_payload["metadata"] = _freeze(metadata)

    event = AuthDomainEvent(type=resolved, payload=MappingProxyType(frozen_payload))
    logger.debug(
        "auth_event_created",
        event_type=resolved.value,
        category=schema.category.value,
        security_event=resolved in SECURITY_EVENT_TYPES,
    )
    return event


def _component(value: Any, allowed_fields) -> Dict[str, Any]:
    if is_dataclass(value):
        value = asdict(value)
    return {
        key: (item.value if isinstance(item, Enum) else item)
        for key, item in dict(value).items()
        if key in allowed_fields and item is not None
    }


def build_event_metadata(
    ip_address: Optional[str] = None,
    user_agent: Optional[str] = None,
    location: Optional[Union[SessionLocation, Mapping[str, Any]]] = None,
    device: Optional[Union[DeviceInfo, Mapping[str, Any]]] = None,
    context: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    """Builds the request context attached to an event.

    Only the supplied keys appear in the result.

    Raises:
        ValueError: If ``ip_address`` or ``user_agent`` is malformed.
    """
    metadata: Dict[str, Any] = {}
    if ip_address is not None:
        if not is_valid_ip_address(ip_address):
            raise ValueError(f"Invalid IP address for event metadata: {ip_address!r}")
        metadata["ip_address"] = ip_address.strip()
    if user_agent is not None:
        if not is_valid_user_agent(user_agent):
            raise ValueError("Invalid user agent for event metadata")
        metadata["user_agent"] = user_agent.strip()
    if location is not None:
        metadata["location"] = _component(location, _LOCATION_FIELDS)
    if device is not None:
        metadata["device"] = _component(device, _DEVICE_FIELDS)
    if context is not None:
        metadata["context"] = dict(context)
    return metadata


def is_security_event(event: AuthDomainEvent) -> bool:
    return event.type in SECURITY_EVENT_TYPES


def _has_identifier(event: AuthDomainEvent, key: str) -> bool:
    value = event.payload.get(key)
    return isinstance(value, str) and bool(value)


def is_tenant_event(event: AuthDomainEvent) -> bool:
    """True when the payload carries a ``tenant_id``."""
    return _has_identifier(event, "tenant_id")


def is_user_event(event: AuthDomainEvent) -> bool:
    """True when the payload carries a ``user_id``."""
    return _has_identifier(event, "user_id")


def event_category(event_type: Union[AuthEventType, str]) -> EventCategory:
    return EVENT_SCHEMAS[resolve_event_type(event_type)].category
