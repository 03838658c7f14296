# =============================================================================
# tests/unit/test_reporting.py
# Unit Tests for the pandas report views
# =============================================================================

import math

import pandas as pd
import pytest

from greenmaster_core.models import (
    AuditEvent,
    FinancialRecord,
    GolfCourse,
    LogEntry,
    MaterialRecord,
    seed_documents,
)
from greenmaster_core.reporting import (
    audit_trail_table,
    financial_table,
    is_issue,
    issue_logs,
    logs_table,
    materials_by_category,
)


@pytest.fixture
def logs():
    return [LogEntry.from_document(d) for d in seed_documents(now_ms=1_716_000_000_000)["logs"]]


@pytest.fixture
def courses():
    return [GolfCourse.from_document(d) for d in seed_documents(now_ms=0)["courses"]]


def financial(rid, course_id, year, revenue, profit=None):
    return FinancialRecord(id=rid, course_id=course_id, year=year, revenue=revenue, updated_at=0, profit=profit)


class TestLogsTable:

    def test_newest_first(self, logs):
        assert list(logs_table(logs)["id"]) == ["l1", "l2", "l3", "l4"]

    def test_empty(self):
        assert logs_table([]).empty

    def test_issue_detection_by_tag_or_title(self, logs):
        assert issue_logs(logs) == []
        flagged = LogEntry.from_document({
            **logs[0].to_document(), "id": "l9", "tags": ["긴급"],
        })
        titled = LogEntry.from_document({
            **logs[0].to_document(), "id": "l10", "title": "그린 이슈 보고", "tags": [],
        })
        assert is_issue(flagged) and is_issue(titled)


class TestFinancialTable:

    def test_margin_and_growth(self, courses):
        df = financial_table(
            [financial("f2", "c1", 2023, 12000, 1800), financial("f1", "c1", 2022, 10000, 1000)],
            courses,
        )
        assert list(df["year"]) == [2022, 2023]
        assert list(df["margin_pct"]) == [10.0, 15.0]
        assert math.isnan(df["revenue_growth_pct"].iloc[0])
        assert df["revenue_growth_pct"].iloc[1] == 20.0
        assert set(df["course"]) == {"스카이뷰 CC"}

    def test_growth_is_per_course(self, courses):
        df = financial_table(
            [financial("a", "c1", 2023, 100), financial("b", "c2", 2023, 500)], courses,
        )
        assert df["revenue_growth_pct"].isna().all()
        assert df["margin_pct"].isna().all()

    def test_course_filter_and_empty(self, courses):
        records = [financial("a", "c1", 2023, 100)]
        assert financial_table(records, courses, course_id="c2").empty


class TestMaterialsAndAudit:

    def test_materials_grouped_by_category(self):
        records = [
            MaterialRecord.from_document({"id": "m1", "courseId": "c1", "category": "비료", "name": "복합비료",
                                          "quantity": 10, "unit": "포", "lastUpdated": "2024-06-01"}),
            MaterialRecord.from_document({"id": "m2", "courseId": "c1", "category": "비료", "name": "석회",
                                          "quantity": 5, "unit": "kg", "lastUpdated": "2024-06-01"}),
            MaterialRecord.from_document({"id": "m3", "courseId": "c2", "category": "농약", "name": "살균제",
                                          "quantity": 2, "unit": "L", "lastUpdated": "2024-06-01"}),
        ]
        df = materials_by_category(records, course_id="c1")
        assert df.to_dict("records") == [{"category": "비료", "items": 2, "quantity": 15.0, "units": "kg, 포"}]

    def test_audit_trail_newest_first(self):
        events = [
            AuditEvent.from_document({"id": f"s{i}", "timestamp": ts, "userId": "admin-01", "userName": "김관리",
                                      "actionType": "UPDATE", "targetType": "COURSE", "targetName": "스카이뷰 CC"})
            for i, ts in enumerate([1_000, 3_000, 2_000])
        ]
        df = audit_trail_table(events)
        assert list(df.columns) == ["time", "user", "action", "target_type", "target", "details"]
        assert list(df["time"]) == list(pd.to_datetime([3_000, 2_000, 1_000], unit="ms"))
