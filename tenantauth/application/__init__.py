"""Application layer: use-case services, DTOs and ports (interfaces).

Depends on the domain layer only; infrastructure is injected through the
protocols in tenantauth.application.interfaces.
"""
