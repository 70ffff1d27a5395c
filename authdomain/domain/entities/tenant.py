"""Tenant aggregate and tenant membership.

Tenants are customer organizations that scope users, roles and resource
limits. Status changes are external business events; this module only models
the tenant's state.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional, Tuple

from authdomain.domain.entities.user import UserRole

TenantId = str


class TenantStatus(str, Enum):
    """Lifecycle status of a tenant.

    Attributes:
        ACTIVE: Fully operational.
        INACTIVE: Deactivated by the owner or by billing.
        SUSPENDED: Blocked by the operator, e.g. for abuse.
        TRIAL: Evaluation period.
    """

    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"
    TRIAL = "trial"


class SubscriptionPlan(str, Enum):
    STARTER = "starter"
    PROFESSIONAL = "professional"
    ENTERPRISE = "enterprise"
    CUSTOM = "custom"


def _freeze(mapping: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    return MappingProxyType(dict(mapping or {}))


@dataclass(frozen=True)
class Tenant:
    """A customer organization.

    ``features`` are the feature flags enabled by the plan; ``limits`` maps a
    resource name to its quota. Both are frozen on construction.
    """

    id: TenantId
    name: str
    slug: str
    status: TenantStatus
    plan: SubscriptionPlan
    country: str
    timezone: str
    language: str
    currency: str
    created_at: datetime
    updated_at: datetime
    features: Tuple[str, ...] = ()
    limits: Mapping[str, int] = field(default_factory=dict)
    settings: Mapping[str, Any] = field(default_factory=dict)
    description: Optional[str] = None
    website: Optional[str] = None
    logo_url: Optional[str] = None
    industry: Optional[str] = None
    company_size: Optional[str] = None
    created_by: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "features", tuple(self.features))
        object.__setattr__(self, "limits", _freeze(self.limits))
        object.__setattr__(self, "settings", _freeze(self.settings))

    @property
    def is_operational(self) -> bool:
        return self.status in (TenantStatus.ACTIVE, TenantStatus.TRIAL)

    def has_feature(self, name: str) -> bool:
        return name in self.features

    def limit_for(self, resource: str) -> Optional[int]:
        """Returns the quota for ``resource``, ``None`` when it is unlimited."""
        return self.limits.get(resource)


@dataclass(frozen=True)
class TenantMembership:
    """A user's membership of one tenant, with the role held there."""

    tenant_id: TenantId
    role: UserRole
    joined_at: datetime
    permissions: Tuple[str, ...] = ()
    is_active: bool = True

    def __post_init__(self):
        object.__setattr__(self, "permissions", tuple(self.permissions))
