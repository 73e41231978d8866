"""deploy-doctor: production-readiness checks for nginx-served SPA containers."""

__version__ = "0.3.0"
