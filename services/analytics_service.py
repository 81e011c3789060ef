from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Sequence, Tuple

from base import IntegrationStoreBase, ToolServiceError
from config import UTC, TIMEFRAME_DAYS
from models import SocialIntegration

# metric name -> insight column summed over the period
SUMMED_METRICS = {
    "engagement": "page_post_engagements",
    "impressions": "page_impressions",
    "reach": "page_impressions_unique",
    "views": "page_video_views",
    "likes": "page_actions_post_reactions_like_total",
    "clicks": "page_total_actions",
}
TOP_CONTENT_SCAN = 100


def date_range(timeframe: str, now: Optional[datetime] = None) -> Tuple[datetime, datetime]:
    if timeframe not in TIMEFRAME_DAYS:
        raise ToolServiceError(f"Unknown timeframe: {timeframe}")
    end = now or datetime.now(UTC)
    return end - timedelta(days=TIMEFRAME_DAYS[timeframe]), end


def _num(value: Any) -> float:
    try:
        return float(value or 0)
    except (TypeError, ValueError):
        return 0.0


def _edge_count(edge: Any) -> int:
    """Count for a Graph API edge like `reactions` or `comments`."""
    if not isinstance(edge, dict):
        return 0
    summary = edge.get("summary") or {}
    return int(summary.get("total_count") or len(edge.get("data") or []))


def post_metrics(post: Dict[str, Any]) -> Dict[str, Any]:
    insight = (post.get("insights") or [{}])[0] or {}
    likes = int(_num(insight.get("post_reactions_like_total"))
                or _num(insight.get("post_reactions_total"))
                or _edge_count(post.get("reactions")))
    comments = _edge_count(post.get("comments"))
    shares = int(_num((post.get("shares") or {}).get("count")))
    impressions = int(_num(insight.get("post_impressions")) or _num(insight.get("post_impressions_unique")))
    reach = int(_num(insight.get("post_reach")) or impressions)
    total = likes + comments + shares
    base = reach or impressions
    return {
        "likes": likes,
        "comments": comments,
        "shares": shares,
        "engagement_rate": round(total / base * 100, 2) if base else 0.0,
        "total_engagement": total,
        "impressions": impressions,
        "reach": reach,
    }


class AnalyticsService:
    def __init__(self, store: IntegrationStoreBase, user_id: str):
        self.store = store
        self.user_id = user_id

    def _connected_integration(self, platform: str) -> SocialIntegration:
        integration = self.store.get_integration(self.user_id, platform)
        if not integration:
            raise ToolServiceError(
                f"No {platform} integration found. Please connect your {platform} account first."
            )
        if not integration.is_active or integration.connection_status != "connected":
            raise ToolServiceError(
                f"{platform} integration is not active. Connection status: {integration.connection_status}"
            )
        if platform not in self.store.insight_platforms:
            raise ToolServiceError(f"Platform {platform} is not supported yet")
        return integration

    def _page_ids(self, platform: str, integration: SocialIntegration) -> Tuple[List[Dict[str, Any]], List[str]]:
        pages = self.store.list_pages(self.user_id, platform, integration.id)
        if not pages:
            raise ToolServiceError(f"No active {platform} pages found for this integration")
        return pages, [p["id"] for p in pages]

    def get_user_analytics(self, platform: str, timeframe: str = "30d",
                           metrics: Optional[Sequence[str]] = None) -> Dict[str, Any]:
        integration = self._connected_integration(platform)
        start, end = date_range(timeframe)
        _, page_ids = self._page_ids(platform, integration)

        rows = self.store.list_page_insights(platform, page_ids, start, end)
        if not rows:
            raise ToolServiceError(f"No {platform} insights data found for the specified timeframe")

        wanted = set(metrics) if metrics else None
        result: Dict[str, int] = {}
        if wanted is None or "followers" in wanted:
            result["followers"] = int(_num(rows[0].get("page_fans")))
        for name, column in SUMMED_METRICS.items():
            if wanted is None or name in wanted:
                result[name] = int(sum(_num(r.get(column)) for r in rows))

        return {
            "platform": platform,
            "timeframe": timeframe,
            "metrics": result,
            "period_start": start.isoformat(),
            "period_end": end.isoformat(),
        }

    def get_top_performing_content(self, platform: str, limit: int = 10,
                                   metric: str = "engagement_rate") -> Dict[str, Any]:
        integration = self._connected_integration(platform)
        pages, page_ids = self._page_ids(platform, integration)
        page_names = {p["id"]: p.get("page_name") for p in pages}

        posts = self.store.list_posts(platform, page_ids, TOP_CONTENT_SCAN)
        if not posts:
            raise ToolServiceError("No posts found for this integration")

        scored = []
        for post in posts:
            scored.append({
                "id": post["id"],
                "platform": platform,
                "content": post.get("message") or post.get("description") or post.get("name") or "",
                "created_at": post.get("created_time"),
                "metrics": post_metrics(post),
                "url": post.get("permalink_url") or f"https://{platform}.com/{post['id']}",
                "type": post.get("type") or "post",
                "page_name": page_names.get(post.get("page_id")) or "Unknown",
            })
        scored.sort(key=lambda p: p["metrics"][metric], reverse=True)
        top = scored[:limit]

        return {
            "platform": platform,
            "metric": metric,
            "posts": top,
            "total_posts": len(posts),
            "analyzed_posts": len(top),
        }
