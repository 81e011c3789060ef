import httpx
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple
from tenacity import (
    Retrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential
)

from base import IntegrationStoreBase, ToolServiceError
from models import SocialIntegration
from config.settings import settings

cfg = settings.supabase


def _is_retryable(exc: BaseException) -> bool:
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code >= 500
    return isinstance(exc, httpx.TransportError)


def _in_filter(values: Sequence[str]) -> str:
    return f"in.({','.join(values)})"


class IntegrationStoreSupabase(IntegrationStoreBase):
    """Reads integrations and synced page data through Supabase's PostgREST API."""

    insight_platforms = ("facebook",)

    def __init__(self, base_url: Optional[str] = None, service_key: Optional[str] = None,
                 backoff_factor: Optional[float] = None):
        self.base = (base_url or cfg.url).rstrip("/")
        key = service_key if service_key is not None else cfg.service_key
        self.client = httpx.Client(
            timeout=cfg.timeout_seconds,
            headers={"apikey": key, "Authorization": f"Bearer {key}", "Accept": "application/json"},
        )
        self.logger = logging.getLogger("app")
        self._retrying = Retrying(
            stop=stop_after_attempt(cfg.max_retries),
            wait=wait_exponential(multiplier=cfg.backoff_factor if backoff_factor is None else backoff_factor, max=5),
            retry=retry_if_exception(_is_retryable),
            before_sleep=self._log_retry,
            reraise=True,
        )

    def _url(self, table: str) -> str:
        return f"{self.base}/rest/v1/{table}"

    def _log_retry(self, retry_state) -> None:
        self.logger.warning(
            f"Supabase attempt {retry_state.attempt_number} failed: {retry_state.outcome.exception()}. Retrying..."
        )

    def _send(self, table: str, params: List[Tuple[str, str]]) -> httpx.Response:
        resp = self.client.get(self._url(table), params=params)
        if resp.status_code >= 500:
            resp.raise_for_status()
        return resp

    def _select(self, table: str, params: List[Tuple[str, str]]) -> List[Dict[str, Any]]:
        try:
            resp = self._retrying(self._send, table, params)
        except httpx.HTTPError as e:
            self.logger.error(f"All {cfg.max_retries} attempts failed for {table}: {e}")
            raise ToolServiceError(f"Integration store unavailable: {e}") from e
        if resp.status_code >= 400:
            raise ToolServiceError(f"Integration store returned {resp.status_code} for {table}")
        return resp.json()

    def _check_platform(self, platform: str) -> None:
        if platform not in self.insight_platforms:
            raise ToolServiceError(f"Platform {platform} is not supported yet")

    def get_integration(self, user_id: str, platform: str) -> Optional[SocialIntegration]:
        rows = self._select("social_integrations", [
            ("select", "*"),
            ("user_id", f"eq.{user_id}"),
            ("platform", f"eq.{platform}"),
            ("limit", "1"),
        ])
        return SocialIntegration.model_validate(rows[0]) if rows else None

    def list_integrations(self, user_id: str) -> List[SocialIntegration]:
        rows = self._select("social_integrations", [
            ("select", "*"),
            ("user_id", f"eq.{user_id}"),
            ("order", "created_at.asc"),
        ])
        return [SocialIntegration.model_validate(r) for r in rows]

    def list_pages(self, user_id: str, platform: str, integration_id: Optional[str] = None) -> List[Dict[str, Any]]:
        self._check_platform(platform)
        params = [("select", "id,page_name"), ("user_id", f"eq.{user_id}"), ("is_active", "eq.true")]
        if integration_id:
            params.append(("social_integration_id", f"eq.{integration_id}"))
        return self._select(f"{platform}_pages", params)

    def list_page_insights(self, platform: str, page_ids: Sequence[str],
                           start: datetime, end: datetime) -> List[Dict[str, Any]]:
        self._check_platform(platform)
        return self._select(f"{platform}_page_insights", [
            ("select", "*"),
            ("page_id", _in_filter(page_ids)),
            ("date", f"gte.{start.date().isoformat()}"),
            ("date", f"lte.{end.date().isoformat()}"),
            ("order", "date.desc"),
        ])

    def list_posts(self, platform: str, page_ids: Sequence[str], limit: int) -> List[Dict[str, Any]]:
        self._check_platform(platform)
        return self._select(f"{platform}_posts", [
            ("select", f"*,insights:{platform}_post_insights(*)"),
            ("page_id", _in_filter(page_ids)),
            ("order", "created_time.desc"),
            ("limit", str(limit)),
        ])

    def close(self) -> None:
        self.client.close()
