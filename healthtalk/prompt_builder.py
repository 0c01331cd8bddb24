
from typing import List

from pydantic import BaseModel, Field


class TextPart(BaseModel):
    text: str


class UpstreamContent(BaseModel):
    role: str = "user"
    parts: List[TextPart]


class GenerateContentPayload(BaseModel):
    """Body of a Gemini ``generateContent`` call."""
    contents: List[UpstreamContent] = Field(default_factory=list)


class PromptBuilder:
    """
    Wraps the prompt text in the provider's envelope.

    Only one user turn is ever forwarded; earlier turns stay on the client.
    """

    def build(self, prompt: str) -> GenerateContentPayload:
        return GenerateContentPayload(
            contents=[UpstreamContent(role="user", parts=[TextPart(text=prompt)])]
        )
