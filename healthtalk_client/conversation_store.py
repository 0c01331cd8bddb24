"""Client-side conversation state.

The store owns the ordered list of turns for one chat session, the input
buffer, and the typing indicator. Typing is derived from a counter of
in-flight dispatches, so several dispatches may overlap:

    IDLE --submit--> SENDING --reply--> RESOLVED --> IDLE
                             --error--> FAILED   --> IDLE

Assistant turns are appended when their dispatch settles, so with overlapping
dispatches they appear in the order the relay answered, not the order the
user turns were sent.
"""
from __future__ import annotations

import enum
import uuid
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from .prompts import GREETING, NO_REPLY_FALLBACK, SERVER_UNREACHABLE
from .transport import RelayTransport, RelayTransportError


class Turn(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant"]
    content: str
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)

    def to_wire(self) -> Dict[str, str]:
        return {"role": self.role, "content": self.content}


class Conversation:
    """Append-only list of turns, seeded with the assistant greeting."""

    def __init__(self, greeting: str = GREETING):
        self._turns: List[Turn] = [Turn(role="assistant", content=greeting)]

    def append(self, turn: Turn) -> None:
        self._turns.append(turn)

    @property
    def turns(self) -> List[Turn]:
        return list(self._turns)

    def __len__(self) -> int:
        return len(self._turns)


class SessionState(enum.Enum):
    IDLE = "idle"
    SENDING = "sending"


class DispatchOutcome(enum.Enum):
    RESOLVED = "resolved"
    FAILED = "failed"


class ConversationStore:
    def __init__(self, transport: RelayTransport | None = None, greeting: str = GREETING):
        self.transport = transport or RelayTransport()
        self.greeting = greeting
        self.conversation = Conversation(greeting)
        self.input_buffer = ""
        self.last_outcome: Optional[DispatchOutcome] = None
        self._in_flight = 0

    # --------------------------------------------------------------------- #
    # state
    # --------------------------------------------------------------------- #
    @property
    def turns(self) -> List[Turn]:
        return self.conversation.turns

    @property
    def in_flight(self) -> int:
        return self._in_flight

    @property
    def state(self) -> SessionState:
        return SessionState.SENDING if self._in_flight > 0 else SessionState.IDLE

    @property
    def is_typing(self) -> bool:
        return self.state is SessionState.SENDING

    def wire_messages(self) -> List[Dict[str, str]]:
        return [t.to_wire() for t in self.conversation.turns]

    # --------------------------------------------------------------------- #
    # input buffer
    # --------------------------------------------------------------------- #
    def set_input(self, text: str) -> None:
        self.input_buffer = text

    def clear_input(self) -> None:
        self.input_buffer = ""

    def append_dictation(self, transcript: str) -> None:
        """Add a speech transcript to the input buffer without sending it."""
        spoken = transcript.strip()
        if not spoken:
            return
        self.input_buffer = f"{self.input_buffer} {spoken}" if self.input_buffer else spoken

    # --------------------------------------------------------------------- #
    # public API
    # --------------------------------------------------------------------- #
    async def submit(self, text: str | None = None) -> Optional[DispatchOutcome]:
        """
        Send ``text`` (or the input buffer) as a user turn.

        The user turn is appended before the relay is contacted. Returns None
        without dispatching when the text is blank after trimming.
        """
        message = (self.input_buffer if text is None else text).strip()
        if not message:
            return None

        self.conversation.append(Turn(role="user", content=message))
        self.input_buffer = ""
        return await self.dispatch(self.conversation)

    async def inject_quick_prompt(self, text: str) -> Optional[DispatchOutcome]:
        return await self.submit(text)

    async def dispatch(self, conversation: Conversation) -> DispatchOutcome:
        """
        Send ``conversation`` to the relay and append the assistant turn.

        Never raises: transport failures become the unreachable-server turn.
        Holds one unit of the in-flight counter from the call until the reply
        settles, unless the session was reset in the meantime (the reply then
        lands in the discarded conversation).
        """
        messages = [t.to_wire() for t in conversation.turns]
        counted = conversation is self.conversation
        if counted:
            self._in_flight += 1
        try:
            data = await self.transport.post_chat(messages)
        except RelayTransportError:
            content, outcome = SERVER_UNREACHABLE, DispatchOutcome.FAILED
        else:
            reply = data.get("reply")
            if not isinstance(reply, str) or not reply:
                reply = NO_REPLY_FALLBACK
            content, outcome = reply, DispatchOutcome.RESOLVED
        finally:
            if counted and conversation is self.conversation:
                self._in_flight -= 1

        conversation.append(Turn(role="assistant", content=content))
        if conversation is self.conversation:
            self.last_outcome = outcome
        return outcome

    def reset(self) -> None:
        """Start over with a fresh greeting; in-flight replies are dropped from view."""
        self.conversation = Conversation(self.greeting)
        self.input_buffer = ""
        self._in_flight = 0
        self.last_outcome = None
