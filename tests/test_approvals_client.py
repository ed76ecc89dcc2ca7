import json

import httpx
import pytest

from app.client.approvals_client import ApprovalClientError, ApprovalsClient, SessionContext


def _client(handler, token="token-123"):
    return ApprovalsClient(
        SessionContext(base_url="http://backoffice.local/", token=token),
        transport=httpx.MockTransport(handler),
    )


def _ok(data):
    return httpx.Response(200, json={"success": True, "message": "ok", "data": data})


def test_sends_bearer_token_and_unwraps_data():
    seen = {}

    def handler(request):
        seen["auth"] = request.headers.get("Authorization")
        seen["path"] = request.url.path
        return _ok({"total": 3, "pending_approvals": 1, "approved": 1, "rejected": 1})

    with _client(handler) as api:
        stats = api.get_stats()

    assert stats["pending_approvals"] == 1
    assert seen == {"auth": "Bearer token-123", "path": "/api/approvals/stats"}


def test_list_approvals_passes_status_filter():
    seen = {}

    def handler(request):
        seen["params"] = dict(request.url.params)
        return _ok({"total": 0, "items": []})

    with _client(handler) as api:
        assert api.list_approvals("pending_approval") == []
        assert seen["params"] == {"status": "pending_approval"}

        api.list_approvals("all")
        assert seen["params"] == {}


def test_approve_posts_override_flag():
    seen = {}

    def handler(request):
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return _ok({"id": 7, "status": "approved"})

    with _client(handler) as api:
        result = api.approve_quotation(7, comments="fine", is_override=True)

    assert result["status"] == "approved"
    assert seen["path"] == "/api/approvals/quotation/7/approve"
    assert seen["body"] == {"comments": "fine", "is_override": True}


def test_reject_validates_comments_locally():
    def handler(request):
        raise AssertionError("no request expected")

    with _client(handler) as api:
        with pytest.raises(ApprovalClientError) as exc:
            api.reject_quotation(7, "  ")

    assert exc.value.status_code == 400
    assert exc.value.error_code == "VALIDATION_ERROR"


def test_error_envelope_becomes_exception():
    def handler(request):
        return httpx.Response(
            409,
            json={
                "success": False,
                "message": "Cannot approve a quotation in status draft",
                "error_code": "INVALID_STATE",
                "details": {"requires_override": True},
            },
        )

    with _client(handler) as api:
        with pytest.raises(ApprovalClientError) as exc:
            api.approve_quotation(1)

    assert exc.value.status_code == 409
    assert exc.value.error_code == "INVALID_STATE"
    assert "draft" in exc.value.message


def test_transport_failure_is_wrapped():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with _client(handler) as api:
        with pytest.raises(ApprovalClientError) as exc:
            api.get_approval_history(3)

    assert exc.value.status_code == 0


def test_submit_and_history_paths():
    paths = []

    def handler(request):
        paths.append((request.method, request.url.path))
        return _ok([])

    with _client(handler, token=None) as api:
        api.submit_quotation_for_approval(5)
        api.get_approval_history(5)
        api.get_quotation_details(5)

    assert paths == [
        ("POST", "/api/quotations/5/submit"),
        ("GET", "/api/approvals/quotation/5/history"),
        ("GET", "/api/approvals/quotation/5"),
    ]
