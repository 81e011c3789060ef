import pytest

from tools.executor import ToolExecutor, TEST_PASSPHRASE
from integrations.integration_store_local import DEMO_USER_ID


@pytest.fixture
def executor(store):
    return ToolExecutor(store, DEMO_USER_ID)


def test_unknown_tool(executor):
    result = executor.execute_tool("delete_everything", {})
    assert not result.success
    assert result.error == "Unknown tool: delete_everything"


def test_test_tool_returns_passphrase(executor):
    result = executor.execute_tool("get_tool_test", {})
    assert result.success
    assert result.data == TEST_PASSPHRASE


def test_no_arg_tool_accepts_missing_arguments(executor):
    assert executor.execute_tool("get_connection_status", None).success


@pytest.mark.parametrize("name,args", [
    ("get_user_analytics", {"platform": "myspace"}),
    ("get_user_analytics", {}),
    ("get_top_performing_content", {"platform": "facebook", "limit": 500}),
    ("get_audience_insights", {"platform": "instagram", "insight_type": "horoscopes"}),
    ("check_social_connection", ["facebook"]),
])
def test_invalid_arguments_are_reported(executor, name, args):
    result = executor.execute_tool(name, args)
    assert not result.success
    assert result.error.startswith(f"Invalid arguments for {name}")


def test_get_social_integration_is_sanitized(executor):
    result = executor.execute_tool("get_social_integration", {"platform": "facebook"})
    assert result.success
    assert result.data["platform_username"] == "Insight Coffee Co."
    assert result.data["connection_status"] == "connected"
    assert "access_token" not in result.data
    assert "id" not in result.data


def test_get_social_integration_missing(executor):
    result = executor.execute_tool("get_social_integration", {"platform": "linkedin"})
    assert not result.success
    assert result.error == "No integration found for platform: linkedin"


def test_check_social_connection(executor):
    assert executor.execute_tool("check_social_connection", {"platform": "instagram"}).data == {
        "platform": "instagram", "isConnected": True,
    }
    # expired integrations are inactive
    assert executor.execute_tool("check_social_connection", {"platform": "twitter"}).data["isConnected"] is False


def test_list_social_integrations(executor):
    data = executor.execute_tool("list_social_integrations", {}).data
    assert [i["platform"] for i in data["integrations"]] == ["facebook", "instagram", "twitter"]
    assert all("access_token" not in i for i in data["integrations"])
    assert data["summary"] == {
        "connected": ["facebook", "instagram"],
        "total": 2,
        "allIntegrations": 3,
        "byStatus": {"connected": ["facebook", "instagram"], "expired": ["twitter"]},
    }


def test_user_analytics(executor):
    result = executor.execute_tool("get_user_analytics", {"platform": "instagram", "timeframe": "7d"})
    assert result.success
    assert result.data["platform"] == "instagram"
    assert result.data["timeframe"] == "7d"
    assert result.data["metrics"]["followers"] == 3000
    assert set(result.data["metrics"]) == {"followers", "engagement", "impressions", "reach", "views", "likes", "clicks"}


def test_user_analytics_metric_filter(executor):
    result = executor.execute_tool("get_user_analytics", {"platform": "facebook", "metrics": ["followers", "reach"]})
    assert set(result.data["metrics"]) == {"followers", "reach"}


@pytest.mark.parametrize("platform,error", [
    ("twitter", "twitter integration is not active. Connection status: expired"),
    ("youtube", "No youtube integration found. Please connect your youtube account first."),
])
def test_user_analytics_requires_connected_integration(executor, platform, error):
    result = executor.execute_tool("get_user_analytics", {"platform": platform})
    assert not result.success
    assert result.error == error


def test_top_performing_content(executor):
    result = executor.execute_tool("get_top_performing_content",
                                   {"platform": "facebook", "limit": 2, "metric": "likes"})
    posts = result.data["posts"]
    assert [p["metrics"]["likes"] for p in posts] == [420, 310]
    assert posts[0]["content"] == "Latte art tutorial"
    assert posts[0]["page_name"] == "Insight Coffee Co."
    assert result.data["total_posts"] == 5
    assert result.data["analyzed_posts"] == 2


def test_audience_insights(executor):
    result = executor.execute_tool("get_audience_insights", {"platform": "instagram", "insight_type": "locations"})
    assert result.data["insight_type"] == "locations"
    assert result.data["data"]["top_countries"][0]["country"] == "United States"


def test_content_suggestions(executor):
    result = executor.execute_tool("generate_content_suggestions",
                                   {"platform": "facebook", "content_type": "reel", "topic": "Cold Brew", "count": 3})
    data = result.data
    assert data["topic"] == "Cold Brew"
    assert len(data["suggestions"]) == 3
    assert data["suggestions"][0]["title"] == "Cold Brew Content Idea 1"
    assert data["suggestions"][0]["hashtags"][0] == "coldbrew"
    assert data["analysis_summary"]["total_posts_analyzed"] == 5


def test_collaborator_failure_becomes_value(store):
    class BrokenStore(type(store)):
        def list_integrations(self, user_id):
            raise RuntimeError("database unreachable")

    result = ToolExecutor(BrokenStore(), DEMO_USER_ID).execute_tool("get_connection_status", {})
    assert not result.success
    assert result.error == "database unreachable"
