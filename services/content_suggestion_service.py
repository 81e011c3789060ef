import random
import re
from collections import Counter
from datetime import datetime
from typing import Any, Dict, List, Optional

from base import IntegrationStoreBase, ToolServiceError
from config import UTC
from services.analytics_service import post_metrics

DAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]
DEFAULT_POSTING_HOUR = 14
POSTS_TO_ANALYZE = 50
BASE_HASHTAGS = ["trending", "viral", "explore", "fyp", "instagood"]
_COMPACT_OFFSET = re.compile(r"([+-]\d{2})(\d{2})$")


def parse_timestamp(value: str) -> datetime:
    """Parse ISO timestamps, including Graph API style `Z` and `+0000` offsets."""
    value = value.strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(_COMPACT_OFFSET.sub(r"\1:\2", value))


def analyze_posts(posts: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Summarise post history: common post types, average engagement, busiest hours."""
    if not posts:
        return {"top_post_types": [], "avg_engagement": 0, "best_posting_hours": []}

    types = Counter(p.get("type") or "unknown" for p in posts)
    engagements = [e for e in (post_metrics(p)["total_engagement"] for p in posts) if e > 0]
    hours = Counter(
        parse_timestamp(p["created_time"]).hour for p in posts if p.get("created_time")
    )
    return {
        "top_post_types": [t for t, _ in types.most_common(5)],
        "avg_engagement": round(sum(engagements) / len(engagements)) if engagements else 0,
        "best_posting_hours": [h for h, _ in hours.most_common(3)],
    }


def hashtags_for(topic: Optional[str]) -> List[str]:
    topic_tags = ["".join(topic.lower().split())] if topic else []
    return topic_tags + BASE_HASHTAGS[:4]


def tips_for(platform: str) -> List[str]:
    return [
        "Use high-quality visuals for better engagement",
        "Include a clear call-to-action",
        "Post during peak activity hours",
        "Engage with comments within the first hour",
        f"Use relevant hashtags (5-10 for {platform})",
    ]


def describe(content_type: str, topic: Optional[str], rng: random.Random) -> str:
    templates = [
        f"Create a {content_type} about {topic or 'your niche'} that showcases behind-the-scenes content",
        f"Share a {content_type} featuring user testimonials or success stories",
        f"Post a {content_type} with actionable tips related to {topic or 'your audience interests'}",
        f"Develop a {content_type} that answers common questions from your audience",
        f"Create an engaging {content_type} using trending audio or effects",
    ]
    return rng.choice(templates)


class ContentSuggestionService:
    def __init__(self, store: IntegrationStoreBase, user_id: str, rng: Optional[random.Random] = None):
        self.store = store
        self.user_id = user_id
        self.rng = rng or random.Random()

    def generate_content_suggestions(self, platform: str, content_type: str,
                                     topic: Optional[str] = None, count: int = 5) -> Dict[str, Any]:
        integration = self.store.get_integration(self.user_id, platform)
        if not integration:
            raise ToolServiceError(f"No {platform} integration found")
        if platform not in self.store.insight_platforms:
            raise ToolServiceError(f"Platform {platform} is not supported yet")

        pages = self.store.list_pages(self.user_id, platform, integration.id)
        if not pages:
            raise ToolServiceError(f"No active {platform} pages found for this integration")
        posts = self.store.list_posts(platform, [p["id"] for p in pages], POSTS_TO_ANALYZE)
        analysis = analyze_posts(posts)

        suggestions = []
        for i in range(count):
            hours = analysis["best_posting_hours"]
            types = analysis["top_post_types"]
            suggestions.append({
                "id": f"suggestion_{i + 1}",
                "title": f"{topic} Content Idea {i + 1}" if topic else f"{content_type} Idea {i + 1}",
                "description": describe(content_type, topic, self.rng),
                "content_type": content_type,
                "platform": platform,
                "best_posting_time": {
                    "day": DAYS[i % len(DAYS)],
                    "hour": hours[i % len(hours)] if hours else DEFAULT_POSTING_HOUR,
                    "timezone": "Your local time",
                },
                "hashtags": hashtags_for(topic),
                "tips": tips_for(platform),
                "based_on_analysis": {
                    "inspired_by_type": types[i % len(types)] if types else content_type,
                    "expected_engagement": f"Based on your average of {analysis['avg_engagement']} engagements per post",
                },
            })

        return {
            "platform": platform,
            "content_type": content_type,
            "topic": topic or "general",
            "suggestions": suggestions,
            "analysis_summary": {
                "total_posts_analyzed": len(posts),
                "pages_analyzed": len(pages),
                "top_performing_types": analysis["top_post_types"],
                "average_engagement": analysis["avg_engagement"],
            },
            "generated_at": datetime.now(UTC).isoformat(),
        }
