import logging
import os
import time
from typing import Any, Mapping, Optional

import httpx
from dotenv import load_dotenv


class GedcomxClient:
    """
    Synchronous HTTP transport shared by every application state.
    - Builds requests and sends them; one blocking round trip per send()
    - No status handling: states classify responses themselves
    - Transport failures (httpx.HTTPError) propagate unchanged
    - Timeouts and redirects are the underlying httpx.Client's business
    """

    def __init__(
        self,
        *,
        base_url: str = "",
        timeout_seconds: float = 30.0,
        user_agent: Optional[str] = None,
        logger: Optional[logging.Logger] = None,
        http: Optional[httpx.Client] = None,
    ):
        self.base_url = (base_url or "").rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.log = logger or logging.getLogger("gedcomx_client.client")

        headers = {"User-Agent": user_agent} if user_agent else None

        self._owns_http = http is None
        self.http = http or httpx.Client(
            base_url=self.base_url,
            headers=headers,
            timeout=timeout_seconds,
            follow_redirects=True,
        )

    @classmethod
    def from_env(cls, **kwargs) -> "GedcomxClient":
        load_dotenv()
        base_url = os.getenv("GEDCOMX_BASE_URL", "").strip()
        if not base_url:
            raise ValueError("GEDCOMX_BASE_URL must be provided.")
        timeout = os.getenv("GEDCOMX_TIMEOUT_SECONDS", "").strip()
        if timeout and "timeout_seconds" not in kwargs:
            kwargs["timeout_seconds"] = float(timeout)
        return cls(base_url=base_url, **kwargs)

    def close(self) -> None:
        if self._owns_http:
            self.http.close()

    def __enter__(self) -> "GedcomxClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def create_request(
        self,
        method: str,
        uri: Any,
        *,
        headers: Optional[Mapping[str, str]] = None,
        content: Optional[bytes] = None,
        data: Optional[Mapping[str, Any]] = None,
    ) -> httpx.Request:
        return self.http.build_request(
            method.upper(), uri, headers=headers, content=content, data=data
        )

    def send(self, request: httpx.Request) -> httpx.Response:
        start = time.perf_counter()
        response = self.http.send(request)
        duration_ms = int((time.perf_counter() - start) * 1000)

        # structured-ish log without secrets
        self.log.debug(
            "op.request",
            extra={
                "method": request.method,
                "url": str(request.url),
                "status": response.status_code,
                "duration_ms": duration_ms,
            },
        )
        return response
