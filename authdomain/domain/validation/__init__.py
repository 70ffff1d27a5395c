"""Validation layer of the authentication domain.

- ``primitives``: total format checks and normalizers
- ``profile``: free-text profile field checks
- ``forms``: whole-form validators returning a ``ValidationResult``
- ``business_rules``: threshold and state checks over caller-owned counters
"""
