# =============================================================================
# greenmaster_core/reporting/tables.py
# Tabular views over collection snapshots (pandas)
# =============================================================================

from __future__ import annotations

from typing import List, Optional, Sequence

import numpy as np
import pandas as pd

from greenmaster_core.models import (
    AuditEvent,
    FinancialRecord,
    GolfCourse,
    LogEntry,
    MaterialRecord,
)

# Tags that mark a log as a course issue (the restricted view shows only these)
ISSUE_TAGS = ("이슈", "issue", "urgent", "긴급", "민원", "하자", "리스크")

LOG_COLUMNS = ["id", "date", "department", "course_id", "course", "title", "author", "tags", "created_at"]
FINANCIAL_COLUMNS = ["id", "course_id", "course", "year", "revenue", "profit", "margin_pct", "revenue_growth_pct"]
MATERIAL_COLUMNS = ["category", "items", "quantity", "units"]
AUDIT_COLUMNS = ["time", "user", "action", "target_type", "target", "details"]


def logs_table(logs: Sequence[LogEntry]) -> pd.DataFrame:
    """Field logs, newest first."""
    df = pd.DataFrame(
        [
            {
                "id": log.id,
                "date": log.date,
                "department": log.department.value,
                "course_id": log.course_id,
                "course": log.course_name,
                "title": log.title,
                "author": log.author,
                "tags": ", ".join(log.tags or []),
                "created_at": log.created_at or 0,
            }
            for log in logs
        ],
        columns=LOG_COLUMNS,
    )
    return df.sort_values(["date", "created_at"], ascending=False, ignore_index=True)


def is_issue(log: LogEntry) -> bool:
    tags = [t.lower() for t in log.tags or []]
    return any(tag in tags for tag in ISSUE_TAGS) or "이슈" in log.title


def issue_logs(logs: Sequence[LogEntry]) -> List[LogEntry]:
    return [log for log in logs if is_issue(log)]


def financial_table(
    records: Sequence[FinancialRecord],
    courses: Sequence[GolfCourse],
    course_id: Optional[str] = None,
) -> pd.DataFrame:
    """
    Revenue by course and year with operating margin and year-over-year growth.

    Growth compares a year with the previous recorded year of the same course.
    """
    names = {c.id: c.name for c in courses}
    rows = [
        {
            "id": r.id,
            "course_id": r.course_id,
            "course": names.get(r.course_id, r.course_id),
            "year": int(r.year),
            "revenue": float(r.revenue),
            "profit": np.nan if r.profit is None else float(r.profit),
        }
        for r in records
        if course_id is None or r.course_id == course_id
    ]
    df = pd.DataFrame(rows, columns=["id", "course_id", "course", "year", "revenue", "profit"])
    if df.empty:
        return pd.DataFrame(columns=FINANCIAL_COLUMNS)

    df = df.sort_values(["course_id", "year"], ignore_index=True)
    revenue = df["revenue"].replace(0, np.nan)
    df["margin_pct"] = (df["profit"] / revenue * 100).round(1)
    df["revenue_growth_pct"] = (
        df.groupby("course_id")["revenue"].pct_change() * 100
    ).round(1)
    return df[FINANCIAL_COLUMNS]


def materials_by_category(
    records: Sequence[MaterialRecord],
    course_id: Optional[str] = None,
) -> pd.DataFrame:
    """Item count, summed quantity and the units involved, per category."""
    df = pd.DataFrame(
        [
            {"category": r.category.value, "name": r.name, "quantity": float(r.quantity), "unit": r.unit}
            for r in records
            if course_id is None or r.course_id == course_id
        ],
        columns=["category", "name", "quantity", "unit"],
    )
    if df.empty:
        return pd.DataFrame(columns=MATERIAL_COLUMNS)

    grouped = df.groupby("category", sort=True).agg(
        items=("name", "count"),
        quantity=("quantity", "sum"),
        units=("unit", lambda s: ", ".join(sorted(set(s)))),
    )
    return grouped.reset_index()[MATERIAL_COLUMNS]


def audit_trail_table(events: Sequence[AuditEvent]) -> pd.DataFrame:
    """System log, newest first."""
    df = pd.DataFrame(
        [
            {
                "timestamp": e.timestamp,
                "user": e.user_name,
                "action": e.action_type.value,
                "target_type": e.target_type.value,
                "target": e.target_name,
                "details": e.details or "",
            }
            for e in events
        ],
        columns=["timestamp", "user", "action", "target_type", "target", "details"],
    )
    df = df.sort_values("timestamp", ascending=False, ignore_index=True)
    df["time"] = pd.to_datetime(df["timestamp"], unit="ms")
    return df[AUDIT_COLUMNS]
