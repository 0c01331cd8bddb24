from typing import Any, Optional

import httpx
from pydantic import BaseModel

from .config import GEMINI_BASE_URL, DEFAULT_MODEL
from .logging_config import get_logger
from .prompt_builder import GenerateContentPayload

logger = get_logger(__name__)


class GenerationResult(BaseModel):
    ok: bool                                 # True if HTTP 2xx with a decodable JSON body
    status: int                              # HTTP status code, 0 when no response arrived
    data: Any = None                         # decoded JSON body, any JSON type
    error: Optional[str] = None              # short reason, safe to show to a client


class GeminiClient:
    """
    Minimal Gemini REST client (query-param authentication).
    """

    def __init__(
        self,
        api_key: str | None,
        model: str = DEFAULT_MODEL,
        base_url: str = GEMINI_BASE_URL,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        if not api_key:
            raise ValueError(
                "No Gemini API key found ─ set GEMINI_API_KEY in your environment "
                "or pass api_key='…' to GeminiClient()."
            )
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def _url(self) -> tuple[str, dict]:
        """Return (url, params) so every call includes ?key=…"""
        return f"{self.base_url}/models/{self.model}:generateContent", {"key": self.api_key}

    async def generate_content(self, payload: GenerateContentPayload) -> GenerationResult:
        """
        Send one ``generateContent`` request and *always* return a GenerationResult.
        No exceptions are bubbled up to the caller.
        """
        url, params = self._url()
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            try:
                resp = await client.post(url, params=params, json=payload.model_dump())
            except httpx.HTTPError as exc:
                # Network / DNS / TLS failure or timeout
                logger.warning("Gemini request failed: %s", type(exc).__name__)
                return GenerationResult(ok=False, status=0, error="Network error talking to the upstream provider")

        status = resp.status_code
        if not 200 <= status < 300:
            logger.warning("Gemini returned HTTP %s: %.300s", status, resp.text)
            return GenerationResult(
                ok=False,
                status=status,
                error=f"Upstream provider returned HTTP {status}",
            )

        try:
            body = resp.json()
        except ValueError:
            logger.warning("Gemini returned an unreadable body: %.300s", resp.text)
            return GenerationResult(
                ok=False,
                status=status,
                error="Upstream provider returned an unreadable response",
            )

        # Any decoded JSON passes through; the reply decoder judges its shape
        return GenerationResult(ok=True, status=status, data=body)
