
from typing import List, Literal

from pydantic import BaseModel, Field


class Turn(BaseModel):
    """One message of the conversation as it travels on the wire (no id)."""
    role: Literal["user", "assistant"]
    content: str = ""


class ChatRequest(BaseModel):
    messages: List[Turn] = Field(
        default_factory=list,
        description="Whole conversation, oldest first; only the last turn is forwarded upstream",
    )


class ChatResponse(BaseModel):
    reply: str


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    status: str = "OK"
    message: str = "HealthTalk API is running"
