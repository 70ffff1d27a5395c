"""Validation and business-rule engine for multi-tenant authentication flows.

The package is a pure domain library: it validates forms, enforces password
and tenant policies, and builds authentication events. Persistence, transport
and delivery belong to the embedding application.
"""

__version__ = "0.1.0"
