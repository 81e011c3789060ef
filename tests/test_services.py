from datetime import datetime, timedelta
import random
import pytest

from base import ToolServiceError
from config import UTC
from integrations.integration_store_local import DEMO_USER_ID
from services.analytics_service import AnalyticsService, date_range, post_metrics
from services.content_suggestion_service import (
    ContentSuggestionService,
    analyze_posts,
    hashtags_for,
    parse_timestamp,
)
from services.social_integration_service import SocialIntegrationService


def test_date_range_covers_timeframe():
    now = datetime(2025, 3, 1, tzinfo=UTC)
    start, end = date_range("90d", now)
    assert end == now
    assert end - start == timedelta(days=90)


def test_date_range_rejects_unknown_timeframe():
    with pytest.raises(ToolServiceError):
        date_range("2w")


def test_post_metrics_prefers_insights_and_reach():
    post = {
        "reactions": {"data": [{}, {}]},
        "comments": {"summary": {"total_count": 5}},
        "shares": {"count": 5},
        "insights": [{"post_reactions_like_total": 10, "post_impressions": 400, "post_reach": 200}],
    }
    metrics = post_metrics(post)
    assert metrics["likes"] == 10
    assert metrics["comments"] == 5
    assert metrics["total_engagement"] == 20
    assert metrics["engagement_rate"] == 10.0


def test_post_metrics_without_insights():
    post = {"reactions": {"data": [{}, {}, {}]}, "comments": None}
    metrics = post_metrics(post)
    assert metrics["likes"] == 3
    assert metrics["comments"] == 0
    assert metrics["engagement_rate"] == 0.0


def test_engagement_sums_only_rows_in_range(store):
    service = AnalyticsService(store, DEMO_USER_ID)
    week = service.get_user_analytics("facebook", "7d", ["engagement"])
    month = service.get_user_analytics("facebook", "30d", ["engagement"])
    assert 0 < week["metrics"]["engagement"] < month["metrics"]["engagement"]


def test_top_content_by_engagement_rate_is_sorted(store):
    posts = AnalyticsService(store, DEMO_USER_ID).get_top_performing_content("instagram")["posts"]
    rates = [p["metrics"]["engagement_rate"] for p in posts]
    assert rates == sorted(rates, reverse=True)
    assert all(p["platform"] == "instagram" for p in posts)


def test_analyze_posts_empty():
    assert analyze_posts([]) == {"top_post_types": [], "avg_engagement": 0, "best_posting_hours": []}


def test_analyze_posts_counts_types(store):
    posts = store.list_posts("facebook", ["fb-page-1"], 50)
    analysis = analyze_posts(posts)
    assert analysis["top_post_types"][:2] == ["photo", "video"]
    assert analysis["avg_engagement"] > 0
    assert len(analysis["best_posting_hours"]) == 3


def test_hashtags_for_topic():
    assert hashtags_for("Latte Art") == ["latteart", "trending", "viral", "explore", "fyp"]
    assert hashtags_for(None) == ["trending", "viral", "explore", "fyp"]


def test_suggestions_default_hour_without_history(store):
    class EmptyStore(type(store)):
        def list_posts(self, platform, page_ids, limit):
            return []

    service = ContentSuggestionService(EmptyStore(), DEMO_USER_ID, rng=random.Random(7))
    data = service.generate_content_suggestions("instagram", "story", count=2)
    assert [s["best_posting_time"]["hour"] for s in data["suggestions"]] == [14, 14]
    assert data["suggestions"][1]["based_on_analysis"]["inspired_by_type"] == "story"
    assert data["topic"] == "general"


def test_suggestions_need_synced_platform(store):
    with pytest.raises(ToolServiceError, match="not supported yet"):
        ContentSuggestionService(store, DEMO_USER_ID).generate_content_suggestions("twitter", "post")


def test_connection_status_groups_by_status(store):
    status = SocialIntegrationService(store, DEMO_USER_ID).connection_status()
    assert status["byStatus"] == {"connected": ["facebook", "instagram"], "expired": ["twitter"]}


def test_local_store_seeds_configured_default_user(monkeypatch):
    from config.settings import settings
    from integrations.integration_store_local import IntegrationStoreLocal

    monkeypatch.setattr(settings, "default_user_id", "acme-owner")
    store = IntegrationStoreLocal()

    assert store.get_integration("acme-owner", "facebook").is_active
    assert store.list_integrations("demo-user") == []


@pytest.mark.parametrize("value", [
    "2025-10-20T09:15:00+0000",
    "2025-10-20T09:15:00Z",
    "2025-10-20T09:15:00+00:00",
])
def test_parse_timestamp_accepts_graph_offsets(value):
    assert parse_timestamp(value) == datetime(2025, 10, 20, 9, 15, tzinfo=UTC)


def test_analyze_posts_reads_graph_timestamps():
    posts = [
        {"type": "photo", "created_time": "2025-10-20T09:15:00+0000"},
        {"type": "photo", "created_time": "2025-10-21T09:40:00Z"},
    ]
    assert analyze_posts(posts)["best_posting_hours"] == [9]
