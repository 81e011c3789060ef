from typing import Any, Dict

from base import ToolServiceError

# TODO: replace with audience breakdowns from page_fans_gender_age / page_fans_country
# once the sync job stores them.
AUDIENCE_INSIGHTS: Dict[str, Dict[str, Any]] = {
    "demographics": {
        "age_ranges": [
            {"range": "18-24", "percentage": 25},
            {"range": "25-34", "percentage": 35},
            {"range": "35-44", "percentage": 20},
            {"range": "45-54", "percentage": 12},
            {"range": "55+", "percentage": 8},
        ],
        "gender": [
            {"gender": "male", "percentage": 45},
            {"gender": "female", "percentage": 52},
            {"gender": "other", "percentage": 3},
        ],
    },
    "interests": {
        "top_interests": [
            {"interest": "Technology", "score": 85},
            {"interest": "Fashion", "score": 72},
            {"interest": "Travel", "score": 68},
            {"interest": "Food", "score": 65},
            {"interest": "Fitness", "score": 58},
        ],
    },
    "activity_times": {
        "peak_hours": [
            {"hour": 9, "activity_level": "high"},
            {"hour": 12, "activity_level": "high"},
            {"hour": 18, "activity_level": "very_high"},
            {"hour": 21, "activity_level": "high"},
        ],
        "peak_days": [
            {"day": "Monday", "activity_score": 75},
            {"day": "Wednesday", "activity_score": 82},
            {"day": "Friday", "activity_score": 90},
            {"day": "Sunday", "activity_score": 88},
        ],
    },
    "locations": {
        "top_countries": [
            {"country": "United States", "percentage": 45},
            {"country": "United Kingdom", "percentage": 15},
            {"country": "Canada", "percentage": 12},
            {"country": "Australia", "percentage": 8},
            {"country": "Germany", "percentage": 6},
        ],
        "top_cities": [
            {"city": "New York", "percentage": 8},
            {"city": "Los Angeles", "percentage": 6},
            {"city": "London", "percentage": 5},
            {"city": "Toronto", "percentage": 4},
            {"city": "Sydney", "percentage": 3},
        ],
    },
}


class AudienceService:
    @staticmethod
    def get_audience_insights(platform: str, insight_type: str) -> Dict[str, Any]:
        if insight_type not in AUDIENCE_INSIGHTS:
            raise ToolServiceError(f"Unknown insight type: {insight_type}")
        return {"platform": platform, "insight_type": insight_type, "data": AUDIENCE_INSIGHTS[insight_type]}
