"""Analytics listing and dashboard summary."""
import pytest

from replydesk.schemas.analytics import AnalyticsCreate
from replydesk.schemas.template import TemplateCreate
from replydesk.utils.datetime import days_ago


def _row(storage, owner, **counters):
    return storage.create_analytics(AnalyticsCreate(user_id=owner.id, **counters))


def test_summary_response_rate(client, storage, owner):
    _row(storage, owner, total_inquiries=10, automated_responses=5, customer_satisfaction=80, time_saved=30)
    _row(storage, owner, total_inquiries=20, automated_responses=15, customer_satisfaction=90, time_saved=45)

    data = client.get("/api/analytics/summary").json()
    assert data["responseRate"] == pytest.approx(66.6666, rel=1e-4)
    assert data["timeSaved"] == 75
    assert data["customerSatisfaction"] == pytest.approx(4.25)
    assert data["weeklyInquiries"] == 30
    assert data["weeklyResponses"] == 20


def test_summary_with_no_rows(client, owner):
    data = client.get("/api/analytics/summary").json()
    assert data == {
        "responseRate": 0,
        "timeSaved": 0,
        "customerSatisfaction": 0,
        "activeTemplates": 0,
        "weeklyInquiries": 0,
        "weeklyResponses": 0,
    }


def test_summary_zero_inquiries(client, storage, owner):
    _row(storage, owner, automated_responses=3)
    assert client.get("/api/analytics/summary").json()["responseRate"] == 0


def test_summary_counts_active_templates_and_week_only(client, storage, owner):
    for name, active in (("A", True), ("B", False), ("C", True)):
        storage.create_template(TemplateCreate(user_id=owner.id, name=name, category="general", content="x", is_active=active))
    old = _row(storage, owner, total_inquiries=100, automated_responses=100)
    storage.update_analytics(old.id, {"date": days_ago(8)})
    _row(storage, owner, total_inquiries=4, automated_responses=1)

    data = client.get("/api/analytics/summary").json()
    assert data["activeTemplates"] == 2
    assert data["weeklyInquiries"] == 4
    assert data["responseRate"] == 25


def test_list_analytics_window(client, storage, owner):
    recent = _row(storage, owner)
    old = _row(storage, owner)
    storage.update_analytics(old.id, {"date": days_ago(45)})

    default = client.get("/api/analytics").json()
    assert [a["id"] for a in default] == [recent.id]
    assert len(client.get("/api/analytics?days=60").json()) == 2
    assert len(client.get("/api/analytics?days=0").json()) == 2


def test_list_analytics_rejects_bad_days(client, owner):
    assert client.get("/api/analytics?days=abc").status_code == 400
    assert client.get("/api/analytics?days=-1").status_code == 400
