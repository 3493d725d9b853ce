"""Governance module for Glossa: the audit sink for admin actions."""

from glossa.governance.audit import AuditLogger, AuditSink

__all__ = ["AuditLogger", "AuditSink"]
