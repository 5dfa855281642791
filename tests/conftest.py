from typing import Any, Dict, Optional

import httpx
import pytest
from gedcomx_client.client import GedcomxClient
from gedcomx_client.constants import GEDCOMX_MEDIA_TYPE
from gedcomx_client.state import ApplicationState

BASE = "https://mock-gx.com"


@pytest.fixture
def client():
    return GedcomxClient(base_url=BASE)


@pytest.fixture
def make_state(client):
    """Build a state from a canned exchange without touching the network."""

    def _make(
        status: int = 200,
        *,
        json: Any = None,
        headers: Any = None,
        method: str = "GET",
        url: str = f"{BASE}/platform/collections/tree",
        request_headers: Optional[Dict[str, str]] = None,
        access_token: Optional[str] = None,
        kind: str = "gedcomx",
        factory=None,
    ) -> ApplicationState:
        if request_headers is None:
            request_headers = {
                "Accept": GEDCOMX_MEDIA_TYPE,
                "Content-Type": GEDCOMX_MEDIA_TYPE,
            }
        request = httpx.Request(method, url, headers=request_headers)
        response = httpx.Response(status, json=json, headers=headers, request=request)
        return ApplicationState(client, request, response, access_token, factory, kind)

    return _make
