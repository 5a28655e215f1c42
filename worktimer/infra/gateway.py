"""
Timer Gateway - REST access to the backend's time entry store.

Architecture Decision: Gateway instead of Repository
The backend owns every time entry and enforces the one-running-timer rule.
This module only translates calls into HTTP requests and responses into
domain models. It keeps no state besides the HTTP client, so it can be
swapped for a mock transport in tests.
"""

import logging
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from worktimer.domain.errors import (
    ConflictError, NetworkError, NotFoundError, TimerApiError
)
from worktimer.domain.models import ActiveTimer, TaskEntries, TimeEntry, TimeSummary
from worktimer.infra.config import Settings

logger = logging.getLogger(__name__)

SUMMARY_PERIODS = ("day", "week", "month")


class TimerGateway:
    """
    Async client for the time entry endpoints.

    Every response is wrapped in the backend's envelope:
    ``{"success": bool, "data": ..., "message": str}``.
    """

    def __init__(self, base_url: str, headers: Optional[dict] = None,
                 timeout: float = 15.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers=headers or {},
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Settings,
                      transport: Optional[httpx.AsyncBaseTransport] = None) -> "TimerGateway":
        return cls(
            base_url=settings.api_base_url,
            headers=settings.auth_headers(),
            timeout=settings.request_timeout_seconds,
            transport=transport,
        )

    async def aclose(self):
        await self.client.aclose()

    async def __aenter__(self) -> "TimerGateway":
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    # ------------------------------------------------------------------
    # Timer operations
    # ------------------------------------------------------------------

    async def fetch_active_timer(self) -> Optional[ActiveTimer]:
        """Get the caller's running entry, or None when no timer runs"""
        data = await self._request("GET", "/time-entries/active")
        if not data:
            return None
        return self._parse(ActiveTimer, data)

    async def start_timer(self, task_id: str) -> TimeEntry:
        """
        Ask the backend to open a running entry for a task.

        Raises:
            ConflictError: the user already has a running entry
            NotFoundError: the task does not exist or is not accessible
        """
        data = await self._request("POST", f"/tasks/{task_id}/time/start")
        return self._parse(TimeEntry, data)

    async def stop_timer(self, entry_id: str, description: Optional[str] = None) -> TimeEntry:
        """
        Close a running entry. The backend stamps the end time and computes
        the final duration.

        Raises:
            NotFoundError: the entry is already closed or not ours
        """
        data = await self._request(
            "POST", f"/tasks/0/time/stop/{entry_id}", json={"description": description}
        )
        return self._parse(TimeEntry, data)

    async def fetch_task_entries(self, task_id: str) -> TaskEntries:
        """Get historical entries for a task plus the backend's total"""
        data = await self._request("GET", f"/tasks/{task_id}/time/entries")
        return self._parse(TaskEntries, data)

    # ------------------------------------------------------------------
    # Entry maintenance
    # ------------------------------------------------------------------

    async def update_entry(self, entry_id: str, description: Optional[str] = None,
                           is_billable: Optional[bool] = None,
                           hourly_rate: Optional[float] = None) -> TimeEntry:
        """Update the editable attributes of an entry; only given fields are sent"""
        payload = {
            key: value for key, value in (
                ("description", description),
                ("is_billable", is_billable),
                ("hourly_rate", hourly_rate),
            ) if value is not None
        }
        data = await self._request("PATCH", f"/time-entries/{entry_id}", json=payload)
        return self._parse(TimeEntry, data)

    async def delete_entry(self, entry_id: str) -> None:
        await self._request("DELETE", f"/time-entries/{entry_id}")

    async def fetch_summary(self, period: str = "week") -> TimeSummary:
        """Get the caller's totals for the current day, week or month"""
        if period not in SUMMARY_PERIODS:
            raise ValueError(f"Unknown summary period: {period}")
        data = await self._request("GET", "/time-entries/my-summary", params={"period": period})
        return self._parse(TimeSummary, data)

    # ------------------------------------------------------------------
    # Transport helpers
    # ------------------------------------------------------------------

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        """Send a request and unwrap the envelope, raising typed errors"""
        logger.debug("%s %s", method, path)
        try:
            response = await self.client.request(method, path, **kwargs)
        except httpx.TransportError as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise NetworkError(str(e) or type(e).__name__) from e

        body = self._decode(response)
        message = (body.get("message") or "") if isinstance(body, dict) else ""

        if response.status_code == 409:
            raise ConflictError(message or "Another timer is already running", 409)
        if response.status_code == 404:
            raise NotFoundError(message or "Not found", 404)
        if response.is_error:
            logger.warning("%s %s returned %s: %s", method, path, response.status_code, message)
            raise TimerApiError(message or f"HTTP {response.status_code}", response.status_code)

        if not response.content:
            return None

        if not isinstance(body, dict):
            raise TimerApiError("Unexpected response body", response.status_code)
        if not body.get("success", False):
            raise TimerApiError(message or "Request failed", response.status_code)

        return body.get("data")

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError:
            return {}

    @staticmethod
    def _parse(model, data):
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise TimerApiError(f"Malformed {model.__name__} in response: {e}") from e
