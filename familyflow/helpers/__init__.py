"""Helper modules for the FamilyFlow service facade.

- auth_helpers: Authentication, role and ownership checks
- transport_helpers: Simulated latency and transient failures
"""
