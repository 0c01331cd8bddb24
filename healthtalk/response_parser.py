
from typing import Any, List, Literal, Optional, Union

from pydantic import BaseModel, ValidationError

FALLBACK_REPLY = "Sorry, I couldn't generate a response."


# Shape of a Gemini generateContent response, one model per level. Lists are
# left untyped so that only element 0 is ever validated: a malformed sibling
# candidate or part does not hide a good first one. Every level is optional;
# the provider drops parts of it on refusal, safety filtering, or error.
class _Part(BaseModel):
    text: Optional[str] = None


class _Content(BaseModel):
    parts: Optional[List[Any]] = None


class _Candidate(BaseModel):
    content: Optional[_Content] = None
    finishReason: Any = None


class _GenerateContentResponse(BaseModel):
    candidates: Optional[List[Any]] = None


class ReplyText(BaseModel):
    kind: Literal["reply"] = "reply"
    text: str


class NoReply(BaseModel):
    kind: Literal["no_reply"] = "no_reply"
    reason: str


DecodedReply = Union[ReplyText, NoReply]


class ResponseParser:
    """Decodes an upstream body into ``ReplyText`` or ``NoReply``; never raises."""

    def parse_result(self, body: Any) -> DecodedReply:
        try:
            response = _GenerateContentResponse.model_validate(body)
        except ValidationError:
            return NoReply(reason="response does not match the generateContent shape")
        if not response.candidates:
            return NoReply(reason="no candidates")

        try:
            candidate = _Candidate.model_validate(response.candidates[0])
        except ValidationError:
            return NoReply(reason="first candidate does not match the expected shape")
        if candidate.content is None or not candidate.content.parts:
            reason = "empty candidate"
            if candidate.finishReason:
                reason += f" (finishReason={candidate.finishReason})"
            return NoReply(reason=reason)

        try:
            part = _Part.model_validate(candidate.content.parts[0])
        except ValidationError:
            return NoReply(reason="first part does not match the expected shape")
        if not part.text:
            return NoReply(reason="first part has no text")
        return ReplyText(text=part.text)

    @staticmethod
    def reply_or_fallback(decoded: DecodedReply) -> str:
        if isinstance(decoded, ReplyText):
            return decoded.text
        return FALLBACK_REPLY
