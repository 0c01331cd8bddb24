
from typing import Optional, Sequence

from .exceptions import ChatValidationError, UpstreamUnavailable
from .gemini_client import GeminiClient
from .logging_config import get_logger
from .models import Turn
from .prompt_builder import PromptBuilder
from .response_parser import NoReply, ResponseParser

logger = get_logger(__name__)


class ChatOrchestrator:
    """
    Relay dispatcher. Stateless: everything is derived from the request body.

    Responsibilities
    ----------------
    1. Validate the turn list and pick the last turn      -> ChatValidationError
    2. Wrap its content in the provider envelope          -> PromptBuilder
    3. Send exactly one upstream request                  -> GeminiClient
    4. Decode the reply, falling back on any shape miss   -> ResponseParser
    """

    def __init__(
        self,
        client: Optional[GeminiClient],
        builder: PromptBuilder,
        parser: ResponseParser,
    ):
        self.client = client
        self.builder = builder
        self.parser = parser

    async def handle_chat(self, messages: Sequence[Turn]) -> str:
        """
        Relay the last turn of ``messages`` upstream and return the reply text.

        Earlier turns are accepted but not forwarded.

        Raises
        ------
        ChatValidationError
            No turns, or the last turn has no content. No upstream call is made.
        UpstreamUnavailable
            The provider could not be reached or answered with an error.
        """
        if not messages:
            raise ChatValidationError("messages is required")
        last = messages[-1]
        prompt = last.content.strip()
        if not prompt:
            raise ChatValidationError("the last message must have non-empty content")

        logger.info("Incoming chat: turns=%s prompt_len=%s", len(messages), len(prompt))

        if self.client is None:
            logger.error("GEMINI_API_KEY is not set; cannot relay")
            raise UpstreamUnavailable("Upstream credential is not configured on the server")

        result = await self.client.generate_content(self.builder.build(prompt))
        if not result.ok:
            logger.error("Upstream call failed: status=%s error=%s", result.status, result.error)
            raise UpstreamUnavailable(result.error or "Upstream provider unavailable")

        decoded = self.parser.parse_result(result.data)
        if isinstance(decoded, NoReply):
            logger.warning("No usable reply from upstream: %s", decoded.reason)
        return self.parser.reply_or_fallback(decoded)
