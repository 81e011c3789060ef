from typing import Any, Dict, List, Optional

from base import IntegrationStoreBase
from models import SocialIntegration


class SocialIntegrationService:
    """Tool-facing view of the user's social integrations."""

    def __init__(self, store: IntegrationStoreBase, user_id: str):
        self.store = store
        self.user_id = user_id

    def get_integration(self, platform: str) -> Optional[SocialIntegration]:
        return self.store.get_integration(self.user_id, platform)

    def list_integrations(self) -> List[SocialIntegration]:
        return self.store.list_integrations(self.user_id)

    def is_connected(self, platform: str) -> bool:
        integration = self.get_integration(platform)
        return integration is not None and integration.is_active

    def connection_status(self) -> Dict[str, Any]:
        integrations = self.list_integrations()
        active = [i for i in integrations if i.is_active]
        by_status: Dict[str, List[str]] = {}
        for i in integrations:
            by_status.setdefault(i.connection_status, []).append(i.platform)
        return {
            "connected": [i.platform for i in active],
            "total": len(active),
            "allIntegrations": len(integrations),
            "byStatus": by_status,
        }

    @staticmethod
    def sanitize(integration: SocialIntegration) -> Dict[str, Any]:
        """Drop tokens and ids before anything is handed to the model."""
        return integration.model_dump(include={
            "platform",
            "platform_username",
            "platform_email",
            "is_active",
            "connection_status",
            "last_authenticated_at",
            "last_sync_at",
            "last_error",
            "created_at",
        })

    def sanitized_integrations(self) -> List[Dict[str, Any]]:
        return [self.sanitize(i) for i in self.list_integrations()]
