# app/client/approvals_client.py
"""Thin HTTP client for the approvals API.

The caller owns the session: pass a ``SessionContext`` holding the base URL
and bearer token obtained from ``POST /api/auth/login``.
"""

from dataclasses import dataclass
from typing import Any, Optional

import httpx

from app.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class SessionContext:
    base_url: str
    token: Optional[str] = None
    timeout: float = 10.0


class ApprovalClientError(Exception):
    def __init__(self, status_code: int, message: str, error_code: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.error_code = error_code

    def __repr__(self):
        return f"<ApprovalClientError {self.status_code} {self.error_code}: {self.message}>"


class ApprovalsClient:
    def __init__(self, session: SessionContext, transport: Optional[httpx.BaseTransport] = None):
        headers = {"Accept": "application/json"}
        if session.token:
            headers["Authorization"] = f"Bearer {session.token}"

        self.session = session
        self._http = httpx.Client(
            base_url=session.base_url.rstrip("/") + "/api",
            headers=headers,
            timeout=session.timeout,
            transport=transport,
        )

    def close(self) -> None:
        self._http.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    # -------------------------------------------------
    # TRANSPORT
    # -------------------------------------------------
    def _request(self, method: str, path: str, **kwargs) -> Any:
        try:
            response = self._http.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            logger.error("Approvals API unreachable", extra={"path": path, "error": str(exc)})
            raise ApprovalClientError(0, f"Request failed: {exc}") from exc

        try:
            body = response.json()
        except ValueError:
            body = {}

        if response.is_error or body.get("success") is False:
            raise ApprovalClientError(
                response.status_code,
                body.get("message") or response.reason_phrase,
                body.get("error_code"),
            )

        return body.get("data")

    # -------------------------------------------------
    # READS
    # -------------------------------------------------
    def get_stats(self) -> dict:
        return self._request("GET", "/approvals/stats")

    def list_approvals(self, status: Optional[str] = None) -> list[dict]:
        params = {"status": status} if status and status != "all" else None
        return self._request("GET", "/approvals", params=params)["items"]

    def get_quotation_details(self, quotation_id: int) -> dict:
        return self._request("GET", f"/approvals/quotation/{quotation_id}")

    def get_approval_history(self, quotation_id: int, transaction_type: str = "quotation") -> list[dict]:
        return self._request("GET", f"/approvals/{transaction_type}/{quotation_id}/history")

    # -------------------------------------------------
    # DECISIONS
    # -------------------------------------------------
    def approve_quotation(
        self,
        quotation_id: int,
        comments: Optional[str] = None,
        is_override: bool = False,
    ) -> dict:
        return self._request(
            "POST",
            f"/approvals/quotation/{quotation_id}/approve",
            json={"comments": comments, "is_override": is_override},
        )

    def reject_quotation(
        self,
        quotation_id: int,
        comments: str,
        is_override: bool = False,
    ) -> dict:
        if not comments or not comments.strip():
            raise ApprovalClientError(400, "Comments are required when rejecting", "VALIDATION_ERROR")

        return self._request(
            "POST",
            f"/approvals/quotation/{quotation_id}/reject",
            json={"comments": comments, "is_override": is_override},
        )

    def submit_quotation_for_approval(self, quotation_id: int, comments: Optional[str] = None) -> dict:
        return self._request(
            "POST",
            f"/quotations/{quotation_id}/submit",
            json={"comments": comments},
        )
