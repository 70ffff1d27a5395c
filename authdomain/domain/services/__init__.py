"""Domain Services for the Authentication Bounded Context.

Security Domain Services:
- Password Policy: configurable policy, strength scoring and reuse checks
"""
