from datetime import timezone
from dotenv import load_dotenv

load_dotenv()

UTC = timezone.utc

PLATFORMS = ["facebook", "instagram", "twitter", "tiktok", "linkedin", "youtube"]
# platforms the analytics/content tools accept (no linkedin)
CONTENT_PLATFORMS = ["instagram", "twitter", "tiktok", "youtube", "facebook"]

TIMEFRAME_DAYS = {"7d": 7, "30d": 30, "90d": 90, "1y": 365}
