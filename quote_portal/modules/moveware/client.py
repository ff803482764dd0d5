"""
Moveware REST API client.

Requests authenticate with per-tenant credentials sent as mw-* headers and go
to {base_url}/{coId}/api/{path}. Responses are returned as parsed JSON,
untouched; shaping them is the normalizer's job.
"""

import asyncio
from datetime import datetime
from typing import Any, Callable, Dict, Optional

import httpx
from pydantic import BaseModel

from quote_portal.core.config import get_settings
from quote_portal.core.exceptions import MovewareError
from quote_portal.modules.observability.logging_config import get_logger

from .models import Credentials

logger = get_logger(__name__)


class JobActivity(BaseModel):
    """Diary entry written to a job when a quote is accepted online."""

    job_id: str
    branch_code: str = ""
    accepted_at: datetime
    # terms, load date, insurance and order number travel in the notes
    accepted_options_summary: str = ""


class MovewareClient:
    def __init__(
        self,
        credentials: Credentials,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.credentials = credentials
        settings = get_settings()
        self._client = httpx.AsyncClient(
            base_url=f"{credentials.base_url.rstrip('/')}/{credentials.co_id}/api/",
            headers={
                "mw-company-id": credentials.co_id,
                "mw-username": credentials.username,
                "mw-password": credentials.password,
                "Accept": "application/json",
                "Content-Type": "application/json",
            },
            timeout=timeout if timeout is not None else settings.MOVEWARE_TIMEOUT_SECONDS,
            transport=transport,
        )

    async def __aenter__(self) -> "MovewareClient":
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    async def aclose(self):
        await self._client.aclose()

    async def _request(self, method: str, path: str, body: Any = None) -> Any:
        url = f"{self._client.base_url}{path}"
        logger.debug(f"[Moveware] {method} {url}")
        try:
            if body is None:
                r = await self._client.request(method, path)
            else:
                r = await self._client.request(method, path, json=body)
        except httpx.HTTPError as e:
            raise MovewareError(f"Moveware {method} failed at {url}: {e}", url=url) from e

        if not r.is_success:
            raise MovewareError(
                f"Moveware API {r.status_code} at {url}: {r.text[:300]}",
                upstream_status=r.status_code,
                url=url,
                body=r.text,
            )

        # write endpoints may answer 204 / empty
        if not r.content:
            return {}
        try:
            return r.json()
        except ValueError as e:
            raise MovewareError(
                f"Moveware returned non-JSON body at {url}",
                upstream_status=r.status_code,
                url=url,
                body=r.text,
            ) from e

    async def _get(self, path: str) -> Any:
        return await self._request("GET", path)

    async def _post(self, path: str, body: Any) -> Any:
        return await self._request("POST", path, body)

    async def _patch(self, path: str, body: Any) -> Any:
        return await self._request("PATCH", path, body)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def fetch_job(self, job_id: str) -> Any:
        return await self._get(f"jobs/{job_id}")

    async def fetch_options(self, job_id: str) -> Any:
        return await self._get(f"jobs/{job_id}/options?include=charges")

    async def fetch_quotation_options(self, job_id: str, quote_id: str) -> Any:
        return await self._get(f"jobs/{job_id}/quotations/{quote_id}?include=options")

    async def fetch_reviews(self, job_id: str) -> Any:
        return await self._get(f"jobs/{job_id}/reviews")

    async def fetch_questions(self, job_id: str) -> Any:
        return await self._get(f"jobs/{job_id}/questions")

    async def fetch_inventory(self, job_id: str) -> Any:
        """
        Fetch the first page of a job's inventory.

        Moveware pages inventory server-side. When the response metadata
        reports more items than were returned, a warning is logged.
        """
        raw = await self._get(f"jobs/{job_id}/inventory")

        if isinstance(raw, dict):
            meta = raw.get("meta") if isinstance(raw.get("meta"), dict) else {}
            total = next((meta[k] for k in ("totalItems", "total", "count") if meta.get(k) is not None), None)
            usage = raw.get("inventoryUsage")
            if total is not None and isinstance(usage, list):
                try:
                    truncated = float(total) > len(usage)
                except (TypeError, ValueError):
                    truncated = False
                if truncated:
                    logger.warning(
                        f"[Moveware] inventory truncated for job {job_id}: "
                        f"API reports {total} items but returned {len(usage)}"
                    )
        return raw

    async def fetch_job_bundle(self, job_id: str) -> Dict[str, Any]:
        """
        Fetch quotation, options and inventory concurrently.

        Each branch settles on its own: a failed fetch shows up as
        `<name>Error` next to the payloads that did arrive.

        Returns:
            Dict like {"quotation": {...}, "options": {...}, "inventoryError": "..."}
        """
        branches = {
            "quotation": self.fetch_job(job_id),
            "options": self.fetch_options(job_id),
            "inventory": self.fetch_inventory(job_id),
        }
        outcomes = await asyncio.gather(*branches.values(), return_exceptions=True)

        results: Dict[str, Any] = {}
        for name, outcome in zip(branches, outcomes):
            if isinstance(outcome, Exception):
                logger.error(f"[Moveware] {name} fetch failed for coId={self.credentials.co_id} job={job_id}: {outcome}")
                results[f"{name}Error"] = str(outcome)
            else:
                results[name] = outcome
        return results

    # ------------------------------------------------------------------
    # Write-backs
    # ------------------------------------------------------------------

    async def post_review(self, job_id: str, body: Any) -> Any:
        return await self._post(f"jobs/{job_id}/reviews", body)

    async def patch_quote_acceptance(self, job_id: str, quote_id: str, quotation_date: str) -> Any:
        """Mark a quotation Accepted. quotation_date is YYYY-MM-DD."""
        return await self._patch(
            f"jobs/{job_id}/quotations/{quote_id}",
            {"quotationDate": quotation_date, "status": "Accepted"},
        )

    async def patch_job_status(self, job_id: str, status: str, estimated_move_date: Optional[str] = None) -> Any:
        body: Dict[str, Any] = {"status": status}
        if estimated_move_date:
            body["estimatedMove"] = {"date": estimated_move_date}
        return await self._patch(f"jobs/{job_id}", body)

    async def post_job_activity(self, job_id: str, activity: JobActivity) -> Any:
        """
        Create a diary activity recording the online acceptance.

        Moveware ignores `completed` on creation, so the new activity is
        patched to completed afterwards. That second call is best effort.
        """
        d = activity.accepted_at
        date_str = d.strftime("%Y-%m-%d")
        start_str = d.strftime("%H:%M")
        notes = activity.accepted_options_summary.replace("\r\n", "\n").replace("\r", "\n")
        title = "Online Customer Quote Accepted"

        body = {
            "activityDate": date_str,
            "activityHours": start_str,
            "activityTime": str(d.hour),
            "appointment": False,
            "branch": activity.branch_code,
            "comment": title,
            "completed": "Y",
            "date": date_str,
            "dateModified": date_str,
            "dateTime": f"{date_str}T{start_str}:00.000",
            "description": title,
            "diaries": "",
            "keyaction": title,
            "notes": notes,
            "parentId": int(activity.job_id) if activity.job_id.isdigit() else activity.job_id,
            "parentNumber": activity.job_id,
            "parentType": "Job",
            "type": title,
        }

        created = await self._post(f"jobs/{job_id}/activities", body)

        activity_id = None
        if isinstance(created, dict):
            data = created.get("data") if isinstance(created.get("data"), dict) else {}
            links = created.get("links") if isinstance(created.get("links"), dict) else {}
            activity_id = created.get("id") or data.get("id") or links.get("full")

        if activity_id:
            try:
                await self._patch(f"jobs/{job_id}/activities/{activity_id}", {"completed": "Y"})
            except MovewareError as e:
                logger.warning(f"[Moveware] activity completion PATCH failed for job {job_id}: {e}")
        else:
            logger.warning(f"[Moveware] no activity id in POST response for job {job_id}; skipping completion PATCH")

        return created


ClientFactory = Callable[[Credentials], MovewareClient]


def create_moveware_client(credentials: Credentials) -> MovewareClient:
    return MovewareClient(credentials)
