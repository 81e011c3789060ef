from abc import ABC, abstractmethod
from datetime import datetime
from typing import (
    Any,
    Dict,
    List,
    Optional,
    Sequence,
    Tuple
)

from models import SocialIntegration


class ToolServiceError(Exception):
    """Raised by collaborators when a tool cannot produce its data."""


class IntegrationStoreBase(ABC):

    # platforms whose pages/insights/posts are synced into the store
    insight_platforms: Tuple[str, ...] = ()

    @abstractmethod
    def get_integration(self, user_id: str, platform: str) -> Optional[SocialIntegration]:
        """Get the user's integration for one platform"""

    @abstractmethod
    def list_integrations(self, user_id: str) -> List[SocialIntegration]:
        """List all the user's integrations"""

    @abstractmethod
    def list_pages(self, user_id: str, platform: str, integration_id: Optional[str] = None) -> List[Dict[str, Any]]:
        """List active pages/accounts synced for an integration"""

    @abstractmethod
    def list_page_insights(self, platform: str, page_ids: Sequence[str],
                           start: datetime, end: datetime) -> List[Dict[str, Any]]:
        """Daily page insight rows in [start, end], newest first"""

    @abstractmethod
    def list_posts(self, platform: str, page_ids: Sequence[str], limit: int) -> List[Dict[str, Any]]:
        """Posts newest first, each carrying an `insights` list"""

    def close(self) -> None:
        """Release any connections held by the store"""
