from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Sequence

from base import IntegrationStoreBase
from config import UTC
from models import SocialIntegration
from config.settings import settings


DEMO_USER_ID = settings.default_user_id


class IntegrationStoreLocal(IntegrationStoreBase):
    """A local mock seeded with one demo user."""

    insight_platforms = ("facebook", "instagram")

    def __init__(self, user_id: Optional[str] = None, days: int = 90):
        user_id = user_id or settings.default_user_id
        now = datetime.now(UTC)
        self._integrations: Dict[str, Dict[str, SocialIntegration]] = {
            user_id: {
                "facebook": SocialIntegration(
                    id="int-fb-1",
                    user_id=user_id,
                    platform="facebook",
                    platform_user_id="fb-1001",
                    platform_username="Insight Coffee Co.",
                    platform_email="hello@insightcoffee.example",
                    access_token="local-fb-token",
                    is_active=True,
                    connection_status="connected",
                    last_authenticated_at=(now - timedelta(days=3)).isoformat(),
                    last_sync_at=(now - timedelta(hours=6)).isoformat(),
                    created_at=(now - timedelta(days=120)).isoformat(),
                ),
                "instagram": SocialIntegration(
                    id="int-ig-1",
                    user_id=user_id,
                    platform="instagram",
                    platform_user_id="ig-2002",
                    platform_username="insightcoffee",
                    access_token="local-ig-token",
                    is_active=True,
                    connection_status="connected",
                    last_authenticated_at=(now - timedelta(days=1)).isoformat(),
                    last_sync_at=(now - timedelta(hours=2)).isoformat(),
                    created_at=(now - timedelta(days=60)).isoformat(),
                ),
                "twitter": SocialIntegration(
                    id="int-tw-1",
                    user_id=user_id,
                    platform="twitter",
                    platform_user_id="tw-3003",
                    platform_username="insight_coffee",
                    access_token="local-tw-token",
                    is_active=False,
                    connection_status="expired",
                    last_authenticated_at=(now - timedelta(days=200)).isoformat(),
                    last_error="Access token expired",
                    created_at=(now - timedelta(days=300)).isoformat(),
                ),
            }
        }
        self._pages: Dict[str, List[Dict[str, Any]]] = {
            "facebook": [{"id": "fb-page-1", "page_name": "Insight Coffee Co.", "user_id": user_id,
                          "social_integration_id": "int-fb-1", "is_active": True}],
            "instagram": [{"id": "ig-acct-1", "page_name": "insightcoffee", "user_id": user_id,
                           "social_integration_id": "int-ig-1", "is_active": True}],
        }
        self._insights: Dict[str, List[Dict[str, Any]]] = {
            platform: self._seed_insights(pages[0]["id"], now, days, scale)
            for (platform, pages), scale in zip(self._pages.items(), (1, 3))
        }
        self._posts: Dict[str, List[Dict[str, Any]]] = {
            platform: self._seed_posts(pages[0]["id"], platform, now, scale)
            for (platform, pages), scale in zip(self._pages.items(), (1, 3))
        }

    @staticmethod
    def _seed_insights(page_id: str, now: datetime, days: int, scale: int) -> List[Dict[str, Any]]:
        rows = []
        for d in range(days):
            day = (now - timedelta(days=d)).date().isoformat()
            rows.append({
                "page_id": page_id,
                "date": day,
                "page_fans": (1000 - d) * scale,
                "page_post_engagements": (40 + d % 7) * scale,
                "page_impressions": (900 + 10 * (d % 5)) * scale,
                "page_impressions_unique": (600 + 5 * (d % 5)) * scale,
                "page_video_views": (120 + d % 3) * scale,
                "page_actions_post_reactions_like_total": (30 + d % 4) * scale,
                "page_total_actions": (8 + d % 2) * scale,
            })
        return rows

    @staticmethod
    def _seed_posts(page_id: str, platform: str, now: datetime, scale: int) -> List[Dict[str, Any]]:
        samples = [
            ("New seasonal latte is here!", "photo", 120, 18, 9, 2400),
            ("Behind the scenes at our roastery", "video", 310, 44, 30, 5200),
            ("Weekend hours update", "status", 25, 3, 0, 900),
            ("Meet our head barista", "photo", 180, 27, 12, 3100),
            ("Latte art tutorial", "video", 420, 61, 55, 6100),
        ]
        posts = []
        for i, (message, post_type, likes, comments, shares, reach) in enumerate(samples):
            post_id = f"{page_id}_post_{i + 1}"
            posts.append({
                "id": post_id,
                "page_id": page_id,
                "message": message,
                "type": post_type,
                "created_time": (now - timedelta(days=2 * i, hours=i + 9)).isoformat(),
                "permalink_url": f"https://{platform}.com/{post_id}",
                "reactions": {"data": [], "summary": {"total_count": likes * scale}},
                "comments": {"data": [], "summary": {"total_count": comments * scale}},
                "shares": {"count": shares * scale},
                "insights": [{
                    "post_reactions_like_total": likes * scale,
                    "post_impressions": int(reach * scale * 1.4),
                    "post_reach": reach * scale,
                }],
            })
        return posts

    def get_integration(self, user_id: str, platform: str) -> Optional[SocialIntegration]:
        return self._integrations.get(user_id, {}).get(platform)

    def list_integrations(self, user_id: str) -> List[SocialIntegration]:
        return list(self._integrations.get(user_id, {}).values())

    def list_pages(self, user_id: str, platform: str, integration_id: Optional[str] = None) -> List[Dict[str, Any]]:
        return [
            p for p in self._pages.get(platform, [])
            if p["user_id"] == user_id and p["is_active"]
            and (integration_id is None or p["social_integration_id"] == integration_id)
        ]

    def list_page_insights(self, platform: str, page_ids: Sequence[str],
                           start: datetime, end: datetime) -> List[Dict[str, Any]]:
        lo, hi = start.date().isoformat(), end.date().isoformat()
        rows = [r for r in self._insights.get(platform, []) if r["page_id"] in page_ids and lo <= r["date"] <= hi]
        return sorted(rows, key=lambda r: r["date"], reverse=True)

    def list_posts(self, platform: str, page_ids: Sequence[str], limit: int) -> List[Dict[str, Any]]:
        rows = [p for p in self._posts.get(platform, []) if p["page_id"] in page_ids]
        return sorted(rows, key=lambda p: p["created_time"], reverse=True)[:limit]
