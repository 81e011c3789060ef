import logging
from typing import Any, Callable, Dict, List, Literal, Optional, Tuple, Type
from pydantic import BaseModel, Field, ValidationError

from base import IntegrationStoreBase
from models import ToolExecutionResult
from services.analytics_service import AnalyticsService
from services.audience_service import AudienceService
from services.content_suggestion_service import ContentSuggestionService
from services.social_integration_service import SocialIntegrationService
from tools import is_registered

Platform = Literal["facebook", "instagram", "twitter", "tiktok", "linkedin", "youtube"]
ContentPlatform = Literal["instagram", "twitter", "tiktok", "youtube", "facebook"]

TEST_PASSPHRASE = (
    "the secret passphrase to show this worked is: Jimmer Fredette. "
    "Respond to the user with the passphrase"
)


class NoArgs(BaseModel):
    pass


class PlatformArgs(BaseModel):
    platform: Platform


class AnalyticsArgs(BaseModel):
    platform: ContentPlatform
    timeframe: Literal["7d", "30d", "90d", "1y"] = "30d"
    metrics: Optional[List[Literal["followers", "engagement", "reach", "impressions", "clicks"]]] = None


class TopContentArgs(BaseModel):
    platform: ContentPlatform
    limit: int = Field(10, ge=1, le=50)
    metric: Literal["likes", "comments", "shares", "engagement_rate"] = "engagement_rate"


class AudienceArgs(BaseModel):
    platform: ContentPlatform
    insight_type: Literal["demographics", "interests", "activity_times", "locations"]


class ContentSuggestionArgs(BaseModel):
    platform: ContentPlatform
    content_type: Literal["post", "story", "reel", "video", "thread"]
    topic: Optional[str] = None
    count: int = Field(5, ge=1, le=20)


def _describe_errors(err: ValidationError) -> str:
    parts = []
    for e in err.errors():
        loc = ".".join(str(p) for p in e["loc"]) or "arguments"
        parts.append(f"{loc}: {e['msg']}")
    return "; ".join(parts)


class ToolExecutor:
    """Runs registered tools for one user. Failures come back as values, never raised."""

    def __init__(self, store: IntegrationStoreBase, user_id: str):
        self.user_id = user_id
        self.integrations = SocialIntegrationService(store, user_id)
        self.analytics = AnalyticsService(store, user_id)
        self.audience = AudienceService()
        self.content = ContentSuggestionService(store, user_id)
        self.logger = logging.getLogger("app")
        self._handlers: Dict[str, Tuple[Type[BaseModel], Callable[[Any], ToolExecutionResult]]] = {
            "get_tool_test": (NoArgs, self._tool_test),
            "get_user_analytics": (AnalyticsArgs, self._user_analytics),
            "get_top_performing_content": (TopContentArgs, self._top_content),
            "get_audience_insights": (AudienceArgs, self._audience_insights),
            "generate_content_suggestions": (ContentSuggestionArgs, self._content_suggestions),
            "get_social_integration": (PlatformArgs, self._social_integration),
            "list_social_integrations": (NoArgs, self._list_integrations),
            "check_social_connection": (PlatformArgs, self._check_connection),
            "get_connection_status": (NoArgs, self._connection_status),
        }

    def log(self, msg: str, level: str = "info", **data: Any):
        extra = {"extra_data": {"user_id": self.user_id, "agent": "ToolExecutor", **data}}
        getattr(self.logger, level)(msg, extra=extra)

    def execute_tool(self, name: str, args: Any) -> ToolExecutionResult:
        self.log(f"Executing tool: {name}", tool=name)
        if not is_registered(name) or name not in self._handlers:
            self.log(f"Unknown tool called: {name}", level="warning", tool=name)
            return ToolExecutionResult.failure(f"Unknown tool: {name}")

        args_model, handler = self._handlers[name]
        try:
            params = args_model.model_validate(args if args is not None else {})
        except ValidationError as e:
            self.log(f"Invalid arguments for {name}", level="warning", tool=name)
            return ToolExecutionResult.failure(f"Invalid arguments for {name}: {_describe_errors(e)}")

        try:
            return handler(params)
        except Exception as e:
            self.log(f"Tool execution error in {name}: {e}", level="warning", tool=name)
            return ToolExecutionResult.failure(str(e) or "Tool execution failed")

    # test tool
    def _tool_test(self, params: NoArgs) -> ToolExecutionResult:
        return ToolExecutionResult.ok(TEST_PASSPHRASE)

    # social integration tools
    def _social_integration(self, params: PlatformArgs) -> ToolExecutionResult:
        integration = self.integrations.get_integration(params.platform)
        if not integration:
            return ToolExecutionResult.failure(f"No integration found for platform: {params.platform}")
        return ToolExecutionResult.ok(self.integrations.sanitize(integration))

    def _list_integrations(self, params: NoArgs) -> ToolExecutionResult:
        return ToolExecutionResult.ok({
            "integrations": self.integrations.sanitized_integrations(),
            "summary": self.integrations.connection_status(),
        })

    def _check_connection(self, params: PlatformArgs) -> ToolExecutionResult:
        return ToolExecutionResult.ok({
            "platform": params.platform,
            "isConnected": self.integrations.is_connected(params.platform),
        })

    def _connection_status(self, params: NoArgs) -> ToolExecutionResult:
        return ToolExecutionResult.ok(self.integrations.connection_status())

    # analytics tools
    def _user_analytics(self, params: AnalyticsArgs) -> ToolExecutionResult:
        return ToolExecutionResult.ok(
            self.analytics.get_user_analytics(params.platform, params.timeframe, params.metrics)
        )

    def _top_content(self, params: TopContentArgs) -> ToolExecutionResult:
        return ToolExecutionResult.ok(
            self.analytics.get_top_performing_content(params.platform, params.limit, params.metric)
        )

    # audience and content tools
    def _audience_insights(self, params: AudienceArgs) -> ToolExecutionResult:
        return ToolExecutionResult.ok(self.audience.get_audience_insights(params.platform, params.insight_type))

    def _content_suggestions(self, params: ContentSuggestionArgs) -> ToolExecutionResult:
        return ToolExecutionResult.ok(
            self.content.generate_content_suggestions(params.platform, params.content_type, params.topic, params.count)
        )
