"""Audit logging package."""

from goals_accounts.audit.logger import AuditLogger, setup_logging

__all__ = ["AuditLogger", "setup_logging"]
