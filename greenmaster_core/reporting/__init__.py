"""
Reporting Module

pandas views over collection snapshots.
"""

from greenmaster_core.reporting.tables import (
    ISSUE_TAGS,
    audit_trail_table,
    financial_table,
    is_issue,
    issue_logs,
    logs_table,
    materials_by_category,
)

__all__ = [
    "ISSUE_TAGS",
    "audit_trail_table",
    "financial_table",
    "is_issue",
    "issue_logs",
    "logs_table",
    "materials_by_category",
]
