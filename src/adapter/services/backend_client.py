"""Shared HTTP plumbing for the backend gateways"""

from typing import Any, Optional
import httpx


class BackendClient:
    """
    Base for gateways talking to the backend REST API

    Each call opens its own httpx.AsyncClient with the configured timeout
    and bearer token. `transport` lets tests plug in httpx.MockTransport.
    """

    def __init__(
        self,
        base_url: str,
        token: str = "",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self.transport = transport

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers=self._headers(),
            timeout=self.timeout,
            transport=self.transport,
        )

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        """Decoded body, or None when the body is not JSON"""
        try:
            return response.json()
        except ValueError:
            return None

    @staticmethod
    def _error_message(body: Any, default: str) -> str:
        if isinstance(body, dict):
            message = body.get("message") or body.get("error")
            if message:
                return str(message)
        return default
