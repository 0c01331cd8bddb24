from __future__ import annotations

import os
from typing import Dict, List

import httpx
import requests

DEFAULT_API_BASE = os.getenv("HEALTHTALK_API_BASE", "http://localhost:5000")


class RelayTransportError(Exception):
    """The relay could not be reached or did not answer with a usable body."""


class RelayTransport:
    """
    HTTP access to the relay's ``/api`` surface.

    The timeout here is the only one a dispatch is subject to.
    """

    def __init__(
        self,
        api_base: str = DEFAULT_API_BASE,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def post_chat(self, messages: List[Dict[str, str]]) -> dict:
        """POST ``{"messages": [...]}`` and return the decoded JSON object.

        Raises ``RelayTransportError`` on network failure, a non-2xx status
        or a body that is not a JSON object.
        """
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            try:
                resp = await client.post(f"{self.api_base}/api/chat", json={"messages": messages})
            except httpx.HTTPError as exc:
                raise RelayTransportError(f"Network error: {exc}") from exc

        if resp.is_error:
            try:
                reason = resp.json().get("error")
            except (ValueError, AttributeError):
                reason = None
            raise RelayTransportError(reason or f"API error {resp.status_code}")

        try:
            data = resp.json()
        except ValueError as exc:
            raise RelayTransportError("Relay returned a body that is not JSON") from exc
        if not isinstance(data, dict):
            raise RelayTransportError("Relay returned a body that is not a JSON object")
        return data

    def check_health(self) -> bool:
        """Blocking ``GET /api/health``; True when the relay answers ``status: OK``."""
        try:
            r = requests.get(f"{self.api_base}/api/health", timeout=5)
            r.raise_for_status()
            return r.json().get("status") == "OK"
        except (requests.RequestException, ValueError, AttributeError):
            return False
