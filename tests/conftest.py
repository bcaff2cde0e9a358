"""Shared fixtures: scripted transport, controllable clock, token responses."""

import json
import threading
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import pytest

from openstack_auth.core.transport import BaseTransport, TransportResponse


T0 = datetime(2025, 1, 15, 10, 0, 0, tzinfo=timezone.utc)
AUTH_URL = "https://keystone.example.com:5000"
TOKENS_URL = f"{AUTH_URL}/v3/auth/tokens"

CATALOG = [
    {
        "id": "svc-compute",
        "name": "nova",
        "type": "compute",
        "endpoints": [
            {"interface": "public", "region": "RegionOne", "region_id": "RegionOne",
             "url": "https://nova.example.com/v2.1"},
            {"interface": "internal", "region": "RegionOne", "region_id": "RegionOne",
             "url": "http://nova.internal:8774/v2.1"},
            {"interface": "public", "region": "RegionTwo", "region_id": "RegionTwo",
             "url": "https://nova.r2.example.com/v2.1"},
        ],
    },
    {
        "id": "svc-image",
        "name": "glance",
        "type": "image",
        "endpoints": [
            {"interface": "public", "region": "RegionOne", "url": "https://glance.example.com"},
        ],
    },
]


def token_body(
    expires_at: datetime,
    catalog: Optional[List[Dict[str, Any]]] = None,
    project_id: Optional[str] = "proj-1",
    methods: Optional[List[str]] = None,
) -> Dict[str, Any]:
    """Build an Identity v3 token response body."""
    token: Dict[str, Any] = {
        "expires_at": expires_at.strftime("%Y-%m-%dT%H:%M:%S.000000Z"),
        "issued_at": T0.strftime("%Y-%m-%dT%H:%M:%S.000000Z"),
        "methods": methods or ["password"],
        "user": {"id": "user-1", "name": "a"},
        "catalog": CATALOG if catalog is None else catalog,
    }
    if project_id:
        token["project"] = {"id": project_id, "name": "p"}
    return {"token": token}


def token_response(
    value: str,
    expires_at: Optional[datetime] = None,
    status_code: int = 201,
    **body_kwargs,
) -> TransportResponse:
    """A successful token issue response carrying ``value`` in X-Subject-Token."""
    expires_at = expires_at or T0 + timedelta(hours=1)
    return TransportResponse(
        status_code=status_code,
        headers={"X-Subject-Token": value, "Content-Type": "application/json"},
        content=json.dumps(token_body(expires_at, **body_kwargs)).encode("utf-8"),
    )


def error_response(status_code: int, message: str = "The request you have made requires authentication.") -> TransportResponse:
    """A keystone style error response."""
    body = {"error": {"code": status_code, "title": "Error", "message": message}}
    return TransportResponse(
        status_code=status_code,
        headers={"Content-Type": "application/json"},
        content=json.dumps(body).encode("utf-8"),
    )


class FakeClock:
    """Mutable clock returning aware UTC datetimes."""

    def __init__(self, now: datetime = T0):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


class FakeTransport(BaseTransport):
    """
    Transport returning scripted responses in order.

    Each scripted item is a TransportResponse or an exception to raise.
    When ``gate`` is set, every request waits for it before answering.
    """

    def __init__(self, *responses, gate: Optional[threading.Event] = None):
        self.responses = list(responses)
        self.calls: List[Dict[str, Any]] = []
        self.gate = gate
        self.entered = threading.Event()
        self._lock = threading.Lock()

    @property
    def call_count(self) -> int:
        return len(self.calls)

    def queue(self, *responses) -> None:
        self.responses.extend(responses)

    def request(self, method, url, *, headers=None, json=None, timeout=None):
        with self._lock:
            self.calls.append({"method": method, "url": url, "headers": headers or {}, "json": json})
            item = self.responses.pop(0)
        self.entered.set()

        if self.gate is not None:
            self.gate.wait(timeout=5)

        if isinstance(item, BaseException):
            raise item
        return item


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def transport():
    return FakeTransport()
