"""
Conversation turn models and window helpers
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional, Sequence

USER = "user"
ASSISTANT = "assistant"
SYSTEM = "system"

_SPEAKERS = {USER: "Human", ASSISTANT: "AI", SYSTEM: "System"}


@dataclass(frozen=True)
class ConversationTurn:
    """One recorded message"""
    role: str
    text: str
    timestamp: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"role": self.role, "content": self.text, "created": self.timestamp}


@dataclass
class SessionSummary:
    """Session listing entry"""
    id: str
    last_message_at: Optional[str]
    last_message_preview: Optional[str]
    message_count: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def last_turns(turns: Sequence[ConversationTurn], n: int) -> List[ConversationTurn]:
    """Bounded window over the most recent turns."""
    if n <= 0:
        return []
    return list(turns[-n:])


def format_window(turns: Sequence[ConversationTurn]) -> str:
    """Render turns as a "Human: ... / AI: ..." transcript."""
    return "\n".join(f"{_SPEAKERS.get(t.role, 'AI')}: {t.text}" for t in turns)


def user_texts(turns: Sequence[ConversationTurn]) -> List[str]:
    return [t.text for t in turns if t.role == USER]


def last_assistant_text(turns: Sequence[ConversationTurn]) -> str:
    for turn in reversed(turns):
        if turn.role == ASSISTANT:
            return turn.text
    return ""
